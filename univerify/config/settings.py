from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_TYPES = [
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
]


class Settings(BaseSettings):
    """Client configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_base_url: str = "http://localhost:5000"
    app_url: str = "https://univerify.vercel.app"
    request_timeout_seconds: int = 30

    upload_max_size_bytes: int = 10 * 1024 * 1024
    upload_allowed_types: list[str] = list(DEFAULT_ALLOWED_TYPES)

    confirmation_max_retries: int = 10
    confirmation_delay_ms: int = 2000
    progress_reset_seconds: int = 3

    token_store_path: str = ".univerify/session.json"
    wallet_private_key: str = ""
