from pdfthis.config import Settings


def test_defaults():
    s = Settings()
    assert s.unicode_support is False
    assert s.unicode_font_path is None
    assert s.cors_origin_list == []
    assert s.log_level == "INFO"


def test_unicode_flag_parsing(monkeypatch):
    for raw, expected in [("yes", True), ("ON", True), ("1", True), ("false", False), ("", False)]:
        monkeypatch.setenv("UNICODE_SUPPORT", raw)
        assert Settings().unicode_support is expected


def test_blank_font_path_is_none(monkeypatch):
    monkeypatch.setenv("UNICODE_FONT_PATH", "   ")
    assert Settings().unicode_font_path is None


def test_cors_origins_accepts_json_python_list_and_csv():
    assert Settings(cors_origins='["http://a.test/", "http://b.test"]').cors_origin_list == [
        "http://a.test",
        "http://b.test",
    ]
    assert Settings(cors_origins="['http://a.test']").cors_origin_list == ["http://a.test"]
    assert Settings(cors_origins="http://a.test, http://b.test/").cors_origin_list == [
        "http://a.test",
        "http://b.test",
    ]


def test_log_level_is_upper_cased():
    assert Settings(log_level="debug").log_level == "DEBUG"
