from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Core
    ENVIRONMENT: str = Field(default="production")
    FIRESTORE_PROJECT_ID: str = Field(default="")
    FIRESTORE_DATABASE: str = Field(default="")  # named database, empty = (default)
    APP_BASE_URL: str = Field(default="")
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ALLOW_ORIGINS: str = Field(default="*")  # comma-separated

    # Firebase Authentication
    FIREBASE_PROJECT_ID: str = Field(default="")  # ID token audience
    FIREBASE_WEB_API_KEY: str = Field(default="")
    IDENTITY_TOOLKIT_URL: str = Field(default="https://identitytoolkit.googleapis.com/v1")
    HTTP_TIMEOUT_SEC: float = Field(default=15.0)

    # Marketplace
    LATEST_ADS_COUNT: int = Field(default=3)
    APPLICATIONS_IN_BATCH: int = Field(default=10)  # Firestore "in" filter batch size
    RECENT_APPLICATIONS_LIMIT: int = Field(default=5)
    AVAILABLE_ADS_PREVIEW: int = Field(default=3)
    MIN_PASSWORD_LENGTH: int = Field(default=6)


settings = Settings()
