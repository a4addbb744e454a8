"""
Decides which document a request gets and builds its content blocks.

- No query parameters: the instructions document.
- Any query parameters: the echo document (title, optional paragraph, the
  remaining parameters as "key = value" lines).
Both end with a Disclaimer section. Nothing here draws or fails; absent or
empty parameters fall back to defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from pdfthis.services.blocks import ContentBlock

MAX_PARAMS = 50
MAX_VALUE_LEN = 500

TITLE_KEY = "title"
TEXT_KEY = "text"
RESERVED_KEYS = frozenset({TITLE_KEY, TEXT_KEY})

DEFAULT_TITLE = "PDF"
INSTRUCTIONS_TITLE = "PDF Generator"
EXAMPLE_QUERY = "?title=Hello%20world!&text=This%20is%20a%20paragraph.&count=3"

INSTRUCTIONS_DISCLAIMER = (
    "This PDF file is for testing purposes. Content is rendered directly from URL parameters."
)
UNICODE_DISCLAIMER = (
    "This PDF supports Unicode characters. Content is rendered from URL parameters."
)
TRANSLITERATED_DISCLAIMER = (
    "Unicode characters are transliterated. Content is rendered from URL parameters."
)


@dataclass(frozen=True)
class Parameter:
    key: str
    value: str = ""


def parameters_from_pairs(pairs: Iterable[Tuple[str, Optional[str]]]) -> List[Parameter]:
    return [Parameter(key=str(k), value="" if v is None else str(v)) for k, v in pairs]


def truncate(value: Optional[str], limit: int = MAX_VALUE_LEN) -> str:
    return (value or "")[:limit]


def first_value(params: Sequence[Parameter], key: str) -> Optional[str]:
    for p in params:
        if p.key == key:
            return p.value
    return None


def example_url(origin: str, path: str) -> str:
    return f"{origin.rstrip('/')}{path}{EXAMPLE_QUERY}"


class ContentSelector:
    def __init__(self, *, unicode_support: bool = False):
        self.unicode_support = bool(unicode_support)

    def select(self, params: Sequence[Parameter], *, origin: str = "", path: str = "/") -> List[ContentBlock]:
        if not params:
            return self.instructions(origin=origin, path=path)
        return self.echo(params)

    def instructions(self, *, origin: str, path: str) -> List[ContentBlock]:
        blocks: List[ContentBlock] = [ContentBlock.title(INSTRUCTIONS_TITLE)]

        blocks.append(ContentBlock.header("Purpose"))
        blocks.append(
            ContentBlock.paragraph(
                "This service returns a PDF file whose content is customized using URL parameters. "
                "Use it wherever a real PDF document is needed and its content does not matter.",
                space_after=1,
            )
        )

        blocks.append(ContentBlock.header("Use Cases"))
        blocks.extend(
            _list_lines(
                [
                    "- Provide a real PDF file to pipelines and integration tests",
                    "- Echo URL parameters as text in a document",
                    "- Exercise PDF upload, preview and download features",
                    "- Produce multi-page documents from long parameter values",
                ]
            )
        )

        blocks.append(ContentBlock.header("Example Usage"))
        blocks.append(ContentBlock.line(example_url(origin, path), space_after=2))

        blocks.append(ContentBlock.header("Notes"))
        blocks.extend(
            _list_lines(
                [
                    f"- Each value is limited to {MAX_VALUE_LEN} characters.",
                    f"- Up to {MAX_PARAMS} URL parameters are rendered.",
                    "- Full Unicode support enabled"
                    if self.unicode_support
                    else "- Unicode characters are transliterated to Latin equivalents",
                    "- Right-to-left languages may not render in proper direction",
                ]
            )
        )

        blocks.append(ContentBlock.header("Disclaimer"))
        blocks.append(ContentBlock.paragraph(INSTRUCTIONS_DISCLAIMER))
        return blocks

    def echo(self, params: Sequence[Parameter]) -> List[ContentBlock]:
        # Title is capped like every other value.
        title = truncate(first_value(params, TITLE_KEY)) or DEFAULT_TITLE
        blocks: List[ContentBlock] = [ContentBlock.title(title)]

        text = first_value(params, TEXT_KEY)
        if text:
            blocks.append(ContentBlock.paragraph(truncate(text), space_after=1))

        non_reserved = [p for p in params if p.key not in RESERVED_KEYS]
        extra = non_reserved[:MAX_PARAMS]
        if extra:
            blocks.append(ContentBlock.header("Extra information"))
            if len(non_reserved) > MAX_PARAMS:
                blocks.append(
                    ContentBlock.line(
                        f"Note: Showing first {MAX_PARAMS} parameters (excluding title/text).",
                        space_after=1,
                    )
                )
            blocks.extend(_list_lines([f"{p.key} = {truncate(p.value)}" for p in extra]))

        blocks.append(ContentBlock.header("Disclaimer"))
        blocks.append(
            ContentBlock.paragraph(
                UNICODE_DISCLAIMER if self.unicode_support else TRANSLITERATED_DISCLAIMER
            )
        )
        return blocks


def _list_lines(lines: Sequence[str]) -> List[ContentBlock]:
    blocks = [ContentBlock.line(s) for s in lines]
    if blocks:
        blocks[-1] = replace(blocks[-1], space_after=1)
    return blocks
