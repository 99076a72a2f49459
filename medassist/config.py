"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic_settings import BaseSettings
from typing import List

PLACEHOLDER_SECRET_KEY = "change-me"

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        app_env: Deployment environment name (development, production, ...)
        log_level: Root logging level
        database_url: SQLAlchemy connection string
        secret_key: Secret key for JWT token encoding
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Access token expiration time in minutes
        reset_token_expire_minutes: Password reset token expiration time in minutes
        bcrypt_rounds: bcrypt work factor used for password digests
        cors_origins: Origins allowed by the CORS middleware
    """
    app_env: str = "development"
    log_level: str = "INFO"

    # Database settings
    database_url: str = "sqlite:///./medassist.db"

    # JWT settings
    secret_key: str = PLACEHOLDER_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    reset_token_expire_minutes: int = 30

    # Password hashing
    bcrypt_rounds: int = 12

    # Frontend settings
    cors_origins: List[str] = ["http://localhost:3000"]

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False


def validate_runtime_config() -> None:
    """
    Refuse to start a production deployment with the placeholder signing key.

    Raises:
        RuntimeError: If running in production without SECRET_KEY set
    """
    if settings.app_env.lower() == "production" and settings.secret_key == PLACEHOLDER_SECRET_KEY:
        raise RuntimeError("SECRET_KEY must be set in production.")


# Create settings instance
settings = Settings()
