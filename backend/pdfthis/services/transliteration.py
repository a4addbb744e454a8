from __future__ import annotations

import re

# Printable ASCII is what the Base14 fonts are guaranteed to draw. Whitespace is
# left alone so the word splitter still sees it.
_UNSUPPORTED_RE = re.compile(r"[^\x20-\x7E\s]")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E]")

ARABIC_TO_LATIN: dict[str, str] = {
    "ا": "A",
    "ب": "B",
    "ت": "T",
    "ث": "TH",
    "ج": "J",
    "ح": "H",
    "خ": "KH",
    "د": "D",
    "ذ": "DH",
    "ر": "R",
    "ز": "Z",
    "س": "S",
    "ش": "SH",
    "ص": "S",
    "ض": "D",
    "ط": "T",
    "ظ": "Z",
    "ع": "A",
    "غ": "GH",
    "ف": "F",
    "ق": "Q",
    "ك": "K",
    "ل": "L",
    "م": "M",
    "ن": "N",
    "ة": "T",
    "ـ": "-",
    "ه": "H",
    "و": "W",
    "ي": "Y",
    "ى": "A",
    "ئ": "A",
    "ء": "A",
    "إ": "E",
}


def prepare_text(text: str | None, *, unicode_support: bool) -> str:
    """Best-effort transliteration applied before measuring and drawing.

    With Unicode support on the text passes through untouched. Otherwise every
    character outside printable ASCII is mapped through ARABIC_TO_LATIN and
    anything unknown becomes "?".
    """
    if not text:
        return ""
    s = str(text)
    if unicode_support:
        return s
    return _UNSUPPORTED_RE.sub(lambda m: ARABIC_TO_LATIN.get(m.group(0), "?"), s)


def ascii_fallback(text: str) -> str:
    return _NON_PRINTABLE_RE.sub("?", text)
