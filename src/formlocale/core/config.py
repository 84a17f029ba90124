"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class FormConfig(BaseSettings):
    """Form decoding and validation configuration."""

    model_config = {"env_prefix": "FORMLOCALE_FORMS_"}

    max_multipart_bytes: int = 32 << 20
    error_format: str = "default"


class I18nConfig(BaseSettings):
    """Internationalization configuration."""

    model_config = {"env_prefix": "FORMLOCALE_I18N_"}

    locales_dir: str | None = "locales"
    default_locale: str = "en"
    fallback_locale: str = "en"
    default_formats: bool = True
    watch: bool = False
    watch_interval_seconds: float = 1.0
    set_cookie: bool = False
    cookie_name: str = "locale"
    cookie_max_age: int = 365 * 24 * 60 * 60
    editor_enabled: bool = False
    editor_path: str = "/i18n-editor"


class Settings(BaseSettings):
    """Root toolkit settings."""

    model_config = {"env_prefix": "FORMLOCALE_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    forms: FormConfig = Field(default_factory=FormConfig)
    i18n: I18nConfig = Field(default_factory=I18nConfig)
