"""
Text layout for the generated PDF.

Takes the ordered content blocks, wraps each one to the page column, paginates
line by line and positions everything with a top-down cursor. Drawing, fonts
and page allocation are delegated to a `PdfDocument`.

Layout never fails on its own account:
- a width lookup that raises falls back to `len(text) * size * 0.6`;
- a draw that raises is retried once with non-ASCII characters replaced by "?".
Only construction failures (fonts, canvas, serialization) propagate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

from pdfthis.errors import PdfGenerationError
from pdfthis.services.blocks import BlockKind, ContentBlock
from pdfthis.services.pdf_document import BOLD_FONT, REGULAR_FONT, FontSpec, PdfDocument
from pdfthis.services.transliteration import ascii_fallback, prepare_text

logger = logging.getLogger("pdfthis")

MARGIN = 50
LINE_HEIGHT = 18
BODY_SIZE = 12
TITLE_SIZE = 26
SECTION_HEADER_SIZE = 14
WIDTH_ESTIMATE_FACTOR = 0.6

UNICODE_FONT_NAME = "PdfThisUnicode"


@dataclass(frozen=True)
class BlockStyle:
    bold: bool
    size: float
    # Line heights that must fit above the bottom margin before a line is drawn.
    # Titles and headers also reserve the first line that follows them.
    reserve: float
    # Line heights the cursor moves down after each drawn line.
    advance: float


BLOCK_STYLES: dict[BlockKind, BlockStyle] = {
    BlockKind.TITLE: BlockStyle(bold=True, size=TITLE_SIZE, reserve=3, advance=2),
    BlockKind.SECTION_HEADER: BlockStyle(bold=True, size=SECTION_HEADER_SIZE, reserve=2.5, advance=1.5),
    BlockKind.PARAGRAPH: BlockStyle(bold=False, size=BODY_SIZE, reserve=1, advance=1),
    BlockKind.LINE: BlockStyle(bold=False, size=BODY_SIZE, reserve=1, advance=1),
}


@dataclass
class LayoutState:
    current_page: int
    cursor_y: float
    pages: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class PlacedLine:
    page_index: int
    x: float
    y: float
    text: str
    font: str
    size: float


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    page_count: int
    lines: Tuple[PlacedLine, ...] = ()


def estimate_text_width(text: str, size: float) -> float:
    return len(text) * size * WIDTH_ESTIMATE_FACTOR


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    """Greedy word wrap.

    Words are accumulated while the measured line stays within `max_width`. A
    word that is too wide on its own is cut character by character under the
    same test. A single character wider than the column is emitted as is.
    """
    lines: List[str] = []
    current = ""
    for word in text.split():
        attempt = f"{current} {word}" if current else word
        if measure(attempt) <= max_width:
            current = attempt
            continue

        if current:
            lines.append(current)

        chunk = ""
        for ch in word:
            attempt_chunk = chunk + ch
            if measure(attempt_chunk) <= max_width:
                chunk = attempt_chunk
            else:
                if chunk:
                    lines.append(chunk)
                chunk = ch
        current = chunk

    if current:
        lines.append(current)
    return lines


class LayoutEngine:
    """Renders content blocks onto a `PdfDocument`, one physical line at a time.

    An engine owns its document and state for exactly one render.
    """

    def __init__(
        self,
        document: PdfDocument,
        *,
        unicode_support: bool = False,
        unicode_font_path: Optional[str] = None,
    ):
        self._document = document
        self._unicode_support = bool(unicode_support)
        self._unicode_font_path = unicode_font_path
        self._regular_font = REGULAR_FONT
        self._bold_font = BOLD_FONT
        self._state: Optional[LayoutState] = None
        self._placed: List[PlacedLine] = []
        self._finished = False
        self.estimated_widths = 0
        self.glyph_fallbacks = 0

    @property
    def state(self) -> Optional[LayoutState]:
        return self._state

    @property
    def max_text_width(self) -> float:
        width, _height = self._document.page_size
        return width - MARGIN * 2

    @property
    def top_y(self) -> float:
        _width, height = self._document.page_size
        return height - MARGIN

    def render(self, blocks: Iterable[ContentBlock]) -> RenderedDocument:
        if self._finished:
            raise RuntimeError("LayoutEngine already rendered a document")
        blocks = list(blocks)

        self._embed_fonts()
        for block in blocks:
            if block.kind == BlockKind.TITLE:
                self._document.set_title(prepare_text(block.text, unicode_support=self._unicode_support))
                break

        self._allocate_page()
        for block in blocks:
            self._draw_block(block)

        self._finished = True
        content = self._document.save()
        return RenderedDocument(
            content=content,
            page_count=len(self._state.pages),
            lines=tuple(self._placed),
        )

    def _embed_fonts(self) -> None:
        if self._unicode_support and self._unicode_font_path:
            font = self._document.embed_font(FontSpec(UNICODE_FONT_NAME, self._unicode_font_path))
            self._regular_font = self._bold_font = font
            return
        self._regular_font = self._document.embed_font(FontSpec(REGULAR_FONT))
        self._bold_font = self._document.embed_font(FontSpec(BOLD_FONT))

    def _allocate_page(self) -> None:
        page = self._document.add_page()
        if self._state is None:
            self._state = LayoutState(current_page=page, cursor_y=self.top_y)
        else:
            self._state.current_page = page
            self._state.cursor_y = self.top_y
        self._state.pages.append(page)

    def _ensure_space(self, needed: float) -> None:
        if self._state.cursor_y - needed < MARGIN:
            self._allocate_page()

    def _draw_block(self, block: ContentBlock) -> None:
        style = BLOCK_STYLES[block.kind]
        font = self._bold_font if style.bold else self._regular_font

        for line in self.wrap(block.text, font, style.size):
            self._ensure_space(style.reserve * LINE_HEIGHT)
            self._draw_line(line, font, style.size)
            self._state.cursor_y -= style.advance * LINE_HEIGHT

        if block.space_after:
            # Clamped: the next line's space check allocates the page.
            self._state.cursor_y = max(MARGIN, self._state.cursor_y - block.space_after * LINE_HEIGHT)

    def wrap(self, text: str, font: str, size: float) -> List[str]:
        prepared = prepare_text(text, unicode_support=self._unicode_support)
        return wrap_text(prepared, self.max_text_width, lambda t: self.text_width(t, font, size))

    def measure(self, text: str, font: str, size: float) -> Optional[float]:
        """Measured width, or None when the font metrics lookup fails."""
        try:
            return self._document.text_width(text, font, size)
        except Exception as exc:
            logger.debug("text_width_estimated", extra={"font": font, "size": size, "error": str(exc)})
            return None

    def text_width(self, text: str, font: str, size: float) -> float:
        width = self.measure(text, font, size)
        if width is None:
            self.estimated_widths += 1
            return estimate_text_width(text, size)
        return width

    def _try_draw(self, text: str, x: float, y: float, font: str, size: float) -> bool:
        try:
            self._document.draw_text(text, x, y, font, size)
        except Exception as exc:
            logger.debug("glyph_fallback_applied", extra={"font": font, "error": str(exc)})
            return False
        return True

    def _draw_line(self, text: str, font: str, size: float) -> None:
        x = MARGIN
        y = self._state.cursor_y
        if not self._try_draw(text, x, y, font, size):
            self.glyph_fallbacks += 1
            text = ascii_fallback(text)
            try:
                self._document.draw_text(text, x, y, font, size)
            except Exception as exc:
                raise PdfGenerationError(f"Unable to draw text: {exc}") from exc
        self._placed.append(
            PlacedLine(page_index=self._state.current_page, x=x, y=y, text=text, font=font, size=size)
        )
