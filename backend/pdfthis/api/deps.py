from pdfthis.config import Settings, settings
from pdfthis.services.pdf_document import ReportLabDocument
from pdfthis.services.pdf_service import DocumentFactory


def get_settings() -> Settings:
    return settings


def get_document_factory() -> DocumentFactory:
    return ReportLabDocument
