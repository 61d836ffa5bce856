"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "postgresql://localhost:5432/apparel_catalog"
    create_tables_on_startup: bool = False

    # Catalog behaviour
    # When enabled, a partial update keeps stored extension fields that the
    # request does not mention instead of rewriting the whole specifications blob.
    merge_extension_fields: bool = False

    # Local blob storage for catalog images
    upload_dir: str = "uploads"

    # Application
    debug: bool = False
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000


settings = Settings()


def get_settings() -> Settings:
    """Dependency that provides the application settings."""
    return settings
