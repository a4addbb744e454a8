import os

# CRITICAL: Set environment variables BEFORE any app imports
# These must be set before pdfthis.config.settings is loaded
os.environ["ENVIRONMENT"] = "test"
os.environ["UNICODE_SUPPORT"] = "false"
os.environ.pop("UNICODE_FONT_PATH", None)
os.environ.pop("CORS_ORIGINS", None)

import pytest
from fastapi.testclient import TestClient

from pdfthis.main import app


@pytest.fixture(autouse=True)
def _restore_dependency_overrides():
    original = dict(app.dependency_overrides)
    try:
        yield
    finally:
        app.dependency_overrides = original


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def bundled_ttf():
    """Path to the Vera TrueType font that ships with reportlab."""
    import reportlab

    path = os.path.join(os.path.dirname(reportlab.__file__), "fonts", "Vera.ttf")
    if not os.path.exists(path):
        pytest.skip("reportlab build without bundled Vera.ttf")
    return path
