import io

from fastapi.testclient import TestClient
from pypdf import PdfReader

from pdfthis.api import deps
from pdfthis.config import Settings
from pdfthis.errors import PdfGenerationError
from pdfthis.main import app
from pdfthis.services.layout_engine import MARGIN


def _reader(resp) -> PdfReader:
    return PdfReader(io.BytesIO(resp.content))


def _text(resp) -> str:
    return "\n".join(page.extract_text() or "" for page in _reader(resp).pages)


def test_pdf_response_headers(client):
    r = client.get("/?a=1")
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == 'inline; filename="pdfthis.pdf"'
    assert r.headers["x-request-id"]
    assert r.content.startswith(b"%PDF-")


def test_instructions_document_without_query(client):
    r = client.get("/")
    assert r.status_code == 200

    text = _text(r)
    assert "PDF Generator" in text
    assert text.index("Purpose") < text.index("Use Cases") < text.index("Disclaimer")
    assert "http://testserver/?title=Hello%20world!" in text.replace("\n", "")


def test_scenario_title_text_and_extra_information(client):
    r = client.get("/any/path?title=Hello%20world!&text=This%20is%20a%20paragraph.&count=3")
    assert r.status_code == 200

    text = _text(r)
    assert "Hello world!" in text
    assert "This is a paragraph." in text
    assert "Extra information" in text
    assert "count = 3" in text
    assert "Unicode characters are transliterated." in text


def test_default_title_when_missing(client):
    text = _text(client.get("/?count=3"))
    assert text.lstrip().startswith("PDF")


def test_any_method_and_path_render_a_pdf(client):
    for method in ("post", "put", "delete", "patch"):
        r = client.request(method.upper(), "/some/deep/path?x=1")
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/pdf"


def test_page_count_round_trips_through_reader(client):
    long_value = "lorem ipsum " * 50
    query = "&".join(f"k{i}={long_value}" for i in range(60))
    r = client.get(f"/?{query}")
    assert r.status_code == 200

    reader = _reader(r)
    assert len(reader.pages) > 1
    assert int(r.headers["x-pdf-pages"]) == len(reader.pages)
    assert "Note: Showing first 50 parameters" in _text(r)


def test_same_request_yields_same_bytes(client):
    a = client.get("/?title=Same&b=2")
    b = client.get("/?title=Same&b=2")
    assert a.content == b.content


def test_non_ascii_values_never_fail_the_request(client):
    r = client.get("/?title=%D9%85%D8%B1%D8%AD%D8%A8%D8%A7&text=caf%C3%A9%20%E2%98%83")
    assert r.status_code == 200
    text = _text(r)
    assert "MRHBA" in text
    assert "caf? ?" in text


def test_unicode_setting_without_font_still_transliterates(client):
    app.dependency_overrides[deps.get_settings] = lambda: Settings(unicode_support=True)
    r = client.get("/?title=%D9%85%D8%B1%D8%AD%D8%A8%D8%A7&text=caf%C3%A9%20%E2%98%83")
    assert r.status_code == 200

    text = _text(r)
    assert "MRHBA" in text
    assert "caf? ?" in text
    assert "Unicode characters are transliterated." in text
    assert "This PDF supports Unicode characters." not in text


def test_unicode_setting_with_font_changes_disclaimer(client, bundled_ttf):
    app.dependency_overrides[deps.get_settings] = lambda: Settings(
        unicode_support=True, unicode_font_path=bundled_ttf
    )
    r = client.get("/?a=1")
    assert r.status_code == 200
    assert "This PDF supports Unicode characters." in _text(r)


def test_generate_pdf_uses_one_unicode_flag_for_content_and_layout():
    from pdfthis.services.content_selector import parameters_from_pairs
    from pdfthis.services.pdf_service import generate_pdf

    params = parameters_from_pairs([("title", "مرحبا"), ("text", "café")])
    rendered = generate_pdf(params, unicode_support=True)

    texts = [line.text for line in rendered.lines]
    assert texts[0] == "MRHBA"
    assert "caf?" in texts
    assert "Unicode characters are transliterated." in " ".join(texts)
    assert "This PDF supports Unicode characters." not in " ".join(texts)
    assert {line.font for line in rendered.lines} <= {"Helvetica", "Helvetica-Bold"}

def test_construction_failure_returns_plain_text_500():
    class BrokenDocument:
        def __init__(self, **kwargs):
            raise PdfGenerationError("Unable to create PDF canvas: out of memory")

    app.dependency_overrides[deps.get_document_factory] = lambda: BrokenDocument
    client = TestClient(app)

    r = client.get("/?title=x")
    assert r.status_code == 500
    assert r.text == "Failed to generate PDF: Unable to create PDF canvas: out of memory"
    assert r.headers["content-type"].startswith("text/plain")


def test_missing_unicode_font_file_is_a_request_error():
    app.dependency_overrides[deps.get_settings] = lambda: Settings(
        unicode_support=True, unicode_font_path="/nonexistent/font.ttf"
    )
    client = TestClient(app)

    r = client.get("/")
    assert r.status_code == 500
    assert r.text.startswith("Failed to generate PDF: Unable to load font 'PdfThisUnicode'")


def test_lines_stay_above_bottom_margin_on_real_document():
    from pdfthis.services.content_selector import parameters_from_pairs
    from pdfthis.services.pdf_service import generate_pdf

    params = parameters_from_pairs([(f"k{i}", "x " * 240) for i in range(50)])
    rendered = generate_pdf(params)

    assert rendered.page_count > 1
    assert all(line.y >= MARGIN for line in rendered.lines)
    assert len(PdfReader(io.BytesIO(rendered.content)).pages) == rendered.page_count
