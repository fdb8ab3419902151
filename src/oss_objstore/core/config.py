"""Configuration management for oss-objstore."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    log_format: str = "json"
    otel_enabled: bool = False
    otel_service_name: str = "oss-objstore"

    # Listing
    list_page_size: int = 1000

    # Uploads: bounded read buffer and the backend's large-object threshold
    upload_chunk_size: int = 8 * 1024 * 1024
    multipart_threshold: int = 2 * 1024 * 1024 * 1024
    scratch_dir: Optional[str] = None

    # Client tuning
    addressing_style: str = "virtual"
    connect_timeout: float = 10.0
    read_timeout: float = 60.0

    model_config = {
        "env_prefix": "OSS_OBJSTORE_",
        "case_sensitive": False,
    }


settings = Settings()
