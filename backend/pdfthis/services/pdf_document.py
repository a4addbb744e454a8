from __future__ import annotations

import io
from dataclasses import dataclass
from threading import Lock
from typing import Optional, Protocol, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from pdfthis.errors import PdfGenerationError

PAGE_SIZE: Tuple[float, float] = (float(letter[0]), float(letter[1]))

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


@dataclass(frozen=True)
class FontSpec:
    name: str
    # TrueType file to register under `name`; None means a Base14 font.
    path: Optional[str] = None


# reportlab's font registry is process-wide: each TrueType file is registered
# once under its name, later documents only look it up.
_TTF_LOCK = Lock()
_REGISTERED_TTF: dict[str, str] = {}


def _register_ttf_once(spec: FontSpec) -> None:
    with _TTF_LOCK:
        if _REGISTERED_TTF.get(spec.name) == spec.path:
            pdfmetrics.getFont(spec.name)
            return
        pdfmetrics.registerFont(TTFont(spec.name, spec.path))
        _REGISTERED_TTF[spec.name] = spec.path


class PdfDocument(Protocol):
    """Page/font/draw surface the layout engine renders onto."""

    @property
    def page_size(self) -> Tuple[float, float]: ...

    @property
    def page_count(self) -> int: ...

    def set_title(self, title: str) -> None: ...

    def embed_font(self, spec: FontSpec) -> str: ...

    def add_page(self) -> int: ...

    def text_width(self, text: str, font: str, size: float) -> float: ...

    def draw_text(self, text: str, x: float, y: float, font: str, size: float) -> None: ...

    def save(self) -> bytes: ...


class ReportLabDocument:
    """In-memory PDF built on a reportlab canvas.

    Notes:
    - Base14 fonts are referenced, not embedded.
    - `invariant=1` keeps the output free of timestamps and random IDs, so the
      same request yields the same bytes.
    - Every page is painted with a white background when it is allocated.
    """

    def __init__(self, *, page_size: Tuple[float, float] = PAGE_SIZE, creator: str | None = None):
        self._buffer = io.BytesIO()
        self._page_size = (float(page_size[0]), float(page_size[1]))
        self._page_count = 0
        self._saved = False
        try:
            self._canvas = canvas.Canvas(self._buffer, pagesize=self._page_size, invariant=1)
        except Exception as exc:
            raise PdfGenerationError(f"Unable to create PDF canvas: {exc}") from exc
        if creator:
            self._canvas.setCreator(creator)

    @property
    def page_size(self) -> Tuple[float, float]:
        return self._page_size

    @property
    def page_count(self) -> int:
        return self._page_count

    def set_title(self, title: str) -> None:
        self._canvas.setTitle(title)

    def embed_font(self, spec: FontSpec) -> str:
        try:
            if spec.path:
                _register_ttf_once(spec)
            else:
                pdfmetrics.getFont(spec.name)
        except Exception as exc:
            raise PdfGenerationError(f"Unable to load font {spec.name!r}: {exc}") from exc
        return spec.name

    def add_page(self) -> int:
        # The canvas opens its first page implicitly; later pages need showPage().
        if self._page_count:
            self._canvas.showPage()
        self._page_count += 1
        self._paint_background()
        return self._page_count - 1

    def _paint_background(self) -> None:
        width, height = self._page_size
        self._canvas.setFillColorRGB(1, 1, 1)
        self._canvas.rect(0, 0, width, height, stroke=0, fill=1)
        self._canvas.setFillColorRGB(0, 0, 0)

    def text_width(self, text: str, font: str, size: float) -> float:
        return float(pdfmetrics.stringWidth(text, font, size))

    def draw_text(self, text: str, x: float, y: float, font: str, size: float) -> None:
        self._canvas.setFont(font, size)
        self._canvas.drawString(x, y, text)

    def save(self) -> bytes:
        if not self._saved:
            try:
                self._canvas.save()
            except Exception as exc:
                raise PdfGenerationError(f"Unable to serialize PDF: {exc}") from exc
            self._saved = True
        return self._buffer.getvalue()
