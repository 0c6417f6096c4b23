import secrets
from typing import List

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings

# Thirty days
DEFAULT_TOKEN_EXPIRE_MINUTES = 60 * 24 * 30


class Settings(BaseSettings):
    model_config = ConfigDict(extra="ignore", env_file=".env")

    database_url: str = "sqlite:///./tasks.db"

    # Security configuration
    secret_key: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    algorithm: str = "HS256"
    access_token_expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES
    bcrypt_rounds: int = 12

    # Pagination
    default_page_limit: int = 10
    max_page_limit: int = 100

    cors_origins: List[str] = ["*"]
    allowed_hosts: List[str] = ["localhost", "127.0.0.1"]

    log_level: str = "INFO"


settings = Settings()
