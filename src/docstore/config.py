from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field("sqlite:///docstore.db", description="SQLAlchemy URL")
    max_upload_bytes: int = Field(10 * 1024 * 1024, description="Upload size limit")
    allowed_extensions: List[str] = Field([".pdf"])


settings = Settings()
