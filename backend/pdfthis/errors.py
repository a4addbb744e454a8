from __future__ import annotations


class PdfGenerationError(RuntimeError):
    """Unrecoverable failure while constructing the PDF document.

    Raised for font lookup/registration, canvas creation and serialization
    failures. Width-measurement and glyph-draw problems never surface as this
    error; the layout engine absorbs them.
    """
