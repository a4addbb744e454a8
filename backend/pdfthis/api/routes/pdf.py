import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from pdfthis.api.deps import get_document_factory, get_settings
from pdfthis.config import Settings
from pdfthis.core.observability import failure_body
from pdfthis.services.content_selector import parameters_from_pairs
from pdfthis.services.pdf_service import DocumentFactory, generate_pdf

router = APIRouter(tags=["pdf"])

logger = logging.getLogger("pdfthis")

PDF_FILENAME = "pdfthis.pdf"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
def render_pdf(
    request: Request,
    app_settings: Settings = Depends(get_settings),
    document_factory: DocumentFactory = Depends(get_document_factory),
) -> Response:
    """Any path, any method: the query string drives the document."""
    params = parameters_from_pairs(request.query_params.multi_items())

    try:
        rendered = generate_pdf(
            params,
            origin=f"{request.url.scheme}://{request.url.netloc}",
            path=request.url.path,
            unicode_support=app_settings.unicode_support,
            unicode_font_path=app_settings.unicode_font_path,
            creator=app_settings.app_name,
            document_factory=document_factory,
        )
    except Exception as exc:
        logger.exception(
            "pdf_generation_failed",
            extra={"path": request.url.path, "params": len(params), "error": str(exc)},
        )
        return PlainTextResponse(failure_body(exc), status_code=500)

    return Response(
        content=rendered.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="{PDF_FILENAME}"',
            "Cache-Control": "no-store",
            "X-PDF-Pages": str(rendered.page_count),
        },
    )
