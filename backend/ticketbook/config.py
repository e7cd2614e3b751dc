"""Application configuration via environment variables."""
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    # Database
    DATABASE_URL: Optional[str] = None
    MYSQL_HOST: str = "localhost"
    MYSQL_USER: str = "root"
    MYSQL_PASSWORD: str = ""
    MYSQL_DATABASE: str = "travel_app"
    MYSQL_PORT: int = 3306
    DB_POOL_SIZE: int = 10

    # Calendar day boundary for upcoming/previous
    TIMEZONE: str = "UTC"

    # Media storage
    PUBLIC_DIR: str = "public"
    PHOTO_STORAGE: str = "local"  # local | drive
    DRIVE_FOLDER_ID: str = ""
    GOOGLE_PROJECT_ID: str = ""
    GOOGLE_PRIVATE_KEY_ID: str = ""
    GOOGLE_PRIVATE_KEY: str = ""
    GOOGLE_CLIENT_EMAIL: str = ""
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"

    # Bridge service
    BRIDGE_URL: str = "https://isshun.site/bridge"
    BRIDGE_API_KEY: str = ""
    EVENT_BACKEND: str = "database"  # database | bridge
    PHOTO_PATH_TARGET: str = "database"  # database | bridge

    # Sessions
    AUTH_USERS: list[dict[str, str]] = []
    ENVIRONMENT: str = "development"
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 7

    APP_URL: str = "http://localhost:8000"
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.MYSQL_USER}:{self.MYSQL_PASSWORD}"
            f"@{self.MYSQL_HOST}:{self.MYSQL_PORT}/{self.MYSQL_DATABASE}"
        )

    @property
    def google_credentials(self) -> dict[str, Optional[str]]:
        """Service-account info in the shape google-auth expects."""
        return {
            "type": "service_account",
            "project_id": self.GOOGLE_PROJECT_ID or None,
            "private_key_id": self.GOOGLE_PRIVATE_KEY_ID or None,
            "private_key": self.GOOGLE_PRIVATE_KEY.replace("\\n", "\n") or None,
            "client_email": self.GOOGLE_CLIENT_EMAIL or None,
            "client_id": self.GOOGLE_CLIENT_ID or None,
            "token_uri": self.GOOGLE_TOKEN_URI,
        }


settings = Settings()
