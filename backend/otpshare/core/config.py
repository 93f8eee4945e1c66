from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "otp-share"
    app_env: str = "development"

    database_url: str = "sqlite:///./otpshare.sqlite"

    # JWT (verified caller identity)
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Base64 AES-256 key for key material at rest; derived from JWT_SECRET when empty
    KEY_ENCRYPTION_KEY: str = ""

    # Share links
    SHARE_DEFAULT_TTL_SECONDS: int = 24 * 60 * 60
    SHARE_MAX_TTL_SECONDS: int = 30 * 24 * 60 * 60

    # Public share lookup throttling
    SHARE_LOOKUP_MAX_FAILURES: int = 10
    SHARE_LOOKUP_BASE_DELAY: float = 2.0
    SHARE_LOOKUP_MAX_DELAY: float = 300.0

    CORS_ORIGINS: List[str] = ["*"]

    log_level: str = "INFO"
    log_format: str = "text"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
