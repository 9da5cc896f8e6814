from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "doctransform"
    db_username: str = "doctransform"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_connect_timeout_seconds: float = 10.0

    job_poll_interval_seconds: int = 5
    ledger_backend: str = "postgres"

    files_root: str = "/app/files"
    artifacts_root: str = "/app/artifacts"
    artifacts_base_url: str = "http://localhost:8080/artifacts"

    pdf_engine: str = "pdfplumber"
    ocr_dpi: int = 300
    tesseract_cmd: str = ""

    translation_provider: str = "example"
    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 30
    openai_compatible_base_url: str = ""

    pdf_font_path: str = ""

    extract_timeout_seconds: float = 120.0
    translate_timeout_seconds: float = 60.0
    encode_timeout_seconds: float = 60.0
    publish_timeout_seconds: float = 30.0
    fetch_timeout_seconds: float = 30.0

    notification_webhook_url: str = ""
    notification_timeout_seconds: float = 5.0
