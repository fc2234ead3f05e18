from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    service_name: str = Field(default="AISH Backend")

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./aish.db")
    sql_echo: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    cors_origins: list[str] = Field(default=["*"])

    # Password hashing
    password_secret: str = Field(default="aish-dev-password-secret")
    password_hash_iterations: int = Field(default=210_000, ge=1)

    # Logging
    log_level: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
