from fastapi import APIRouter

from pdfthis.api.routes import pdf

api_router = APIRouter()
# Catch-all; include last.
api_router.include_router(pdf.router)
