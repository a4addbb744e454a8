import json
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TRUTHY = {"1", "true", "yes", "y", "on"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = Field(default="pdfthis")
    environment: str = Field(default="dev")
    build_version: Optional[str] = None
    log_level: str = Field(default="INFO")
    slow_request_ms: int = Field(default=2000)

    # Off: non-ASCII text is transliterated and the disclaimer says so.
    unicode_support: bool = Field(default=False)
    # TrueType font used for both weights when unicode_support is on.
    unicode_font_path: Optional[str] = None

    # JSON list, Python-ish list or CSV. Empty disables CORS.
    cors_origins: str = Field(default="")

    @field_validator("unicode_support", mode="before")
    @classmethod
    def parse_bool(cls, value):
        if value is None or value == "":
            return False
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    @field_validator("unicode_font_path", mode="before")
    @classmethod
    def blank_font_path(cls, value):
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return str(value or "INFO").strip().upper()

    @property
    def cors_origin_list(self) -> List[str]:
        def _normalize_origin(o: str) -> str:
            s = str(o).strip().strip('"').strip("'")
            # Browsers send the Origin header without a trailing slash.
            if s.endswith("/"):
                s = s[:-1]
            return s

        s = (self.cors_origins or "").strip()
        if not s:
            return []

        # Many .env / docker setups wrap JSON in quotes. Strip a single pair.
        if (s.startswith('"') and s.endswith('"')) or (s.startswith("'") and s.endswith("'")):
            s = s[1:-1].strip()

        try:
            parsed = json.loads(s)
            if isinstance(parsed, list):
                return [_normalize_origin(v) for v in parsed if str(v).strip()]
            return [_normalize_origin(str(parsed))]
        except json.JSONDecodeError:
            pass

        if s.startswith("[") and s.endswith("]") and "'" in s and '"' not in s:
            try:
                parsed = json.loads(s.replace("'", '"'))
                if isinstance(parsed, list):
                    return [_normalize_origin(v) for v in parsed if str(v).strip()]
            except json.JSONDecodeError:
                pass

        return [_normalize_origin(v) for v in s.split(",") if str(v).strip()]


settings = Settings()
