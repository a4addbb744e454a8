from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from pdfthis.services.content_selector import ContentSelector, Parameter
from pdfthis.services.layout_engine import LayoutEngine, RenderedDocument
from pdfthis.services.pdf_document import PdfDocument, ReportLabDocument

logger = logging.getLogger("pdfthis")

DocumentFactory = Callable[..., PdfDocument]


def generate_pdf(
    params: Sequence[Parameter],
    *,
    origin: str = "",
    path: str = "/",
    unicode_support: bool = False,
    unicode_font_path: Optional[str] = None,
    creator: Optional[str] = None,
    document_factory: DocumentFactory = ReportLabDocument,
) -> RenderedDocument:
    """Select content for `params`, lay it out on a fresh document and serialize it.

    Each call builds its own selector, document and layout state. Unicode text
    is only passed through when a Unicode font is configured; Base14 fonts have
    no glyphs for it, so without one the text is transliterated.
    """

    unicode_active = bool(unicode_support and unicode_font_path)
    if unicode_support and not unicode_active:
        logger.debug("unicode_support_without_font")

    selector = ContentSelector(unicode_support=unicode_active)
    blocks = selector.select(params, origin=origin, path=path)

    document = document_factory(creator=creator)
    engine = LayoutEngine(
        document,
        unicode_support=unicode_active,
        unicode_font_path=unicode_font_path,
    )
    rendered = engine.render(blocks)

    logger.info(
        "pdf_rendered",
        extra={
            "mode": "echo" if params else "instructions",
            "unicode": unicode_active,
            "blocks": len(blocks),
            "pages": rendered.page_count,
            "bytes": len(rendered.content),
            "estimated_widths": engine.estimated_widths,
            "glyph_fallbacks": engine.glyph_fallbacks,
        },
    )
    return rendered
