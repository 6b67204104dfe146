"""Relay configuration loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Relay settings with environment variable loading and sensible defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "repo-dispatch-relay"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080

    # GitHub dispatch target
    github_token: str = ""
    github_api_url: str = "https://api.github.com"
    github_timeout: float = 30.0
    default_event_type: str = "update-file-event"

    # Relay surface
    api_key: str = ""
    cors_origins: str = ""


settings = Settings()
