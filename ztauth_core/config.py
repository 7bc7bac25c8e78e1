"""Configuration management using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_path: str = "./data/ztauth.db"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Public origin used to build password reset links
    base_url: str = "http://localhost:3000"

    # JWT Configuration
    jwt_secret_key: str = "change-me-in-production-use-env-var"
    jwt_expiry_days: int = 30

    # Shared key for the X-ZT1-Auth header on /api/v1/users. Unset disables
    # the endpoint (every request is rejected).
    user_api_key: str | None = None

    # Password reset links expire after this many minutes
    reset_token_expiry_minutes: int = 15

    # Bcrypt work factor (higher = more secure but slower)
    # For tests, use 4 for faster execution while maintaining functionality
    bcrypt_work_factor: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ZTAUTH_",
        case_sensitive=False
    )


settings = Settings()
