"""
Centralized application configuration
"""
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()


DEFAULT_SECRET_KEY = "change-me"


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # ============================================
    # Application Settings
    # ============================================
    APP_NAME: str = "Parking Reservation API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ============================================
    # Database Settings
    # ============================================
    DATABASE_URL: str = "sqlite:///./parking.db"
    AUTO_CREATE_TABLES: bool = True
    SEED_SAMPLE_DATA: bool = False

    # ============================================
    # Security Settings
    # ============================================
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ALLOW_OFFICER_SIGNUP: bool = True
    BCRYPT_ROUNDS: int = 12

    # Bootstrap officer, only created when a password is configured
    DEFAULT_OFFICER_USERNAME: str = "officer"
    DEFAULT_OFFICER_PASSWORD: Optional[str] = None

    # ============================================
    # CORS Settings
    # ============================================
    CORS_ORIGINS: str = "*"

    # ============================================
    # Server Settings
    # ============================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    class Config:
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def database_url(self) -> str:
        # Heroku/Railway style URLs are not accepted by SQLAlchemy 1.4+
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
        return self.DATABASE_URL

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def validate_settings(self) -> List[str]:
        """Validate critical settings and return warnings"""
        warnings = []

        if self.is_production:
            if self.SECRET_KEY == DEFAULT_SECRET_KEY:
                warnings.append("CRITICAL: Using default SECRET_KEY in production!")

            if self.database_url.startswith("sqlite"):
                warnings.append("WARNING: Using SQLite in production!")

            if self.ALLOW_OFFICER_SIGNUP:
                warnings.append(
                    "WARNING: Anyone can sign up as OFFICER (ALLOW_OFFICER_SIGNUP=true)")

        return warnings


# Create global settings instance
settings = Settings()
