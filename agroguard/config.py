from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator, ValidationError
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application Settings

    Every variable has a development default. Useful overrides:
    - MONGODB_URI, MONGODB_DB (primary document database)
    - FALLBACK_API_URL (REST fallback consumed by the catalog client)
    - FALLBACK_DATABASE_URL or POSTGRES_* (store behind the REST surface)
    - GEMINI_API_KEY, USE_MOCK_AI
    """

    PROJECT_NAME: str = "AgroGuard Backend API"
    API_STR: str = "/api"
    VERSION: str = "1.0.0"

    # Store behind the REST fallback surface
    FALLBACK_DATABASE_URL: Optional[str] = None
    DATA_DIR: str = "data"
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    POSTGRES_PORT: int = 5432

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Explicit URL first, then PostgreSQL components, then a local SQLite file"""
        if self.FALLBACK_DATABASE_URL:
            return self.FALLBACK_DATABASE_URL
        if self.POSTGRES_SERVER and self.POSTGRES_DB:
            return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        return f"sqlite+aiosqlite:///./{self.DATA_DIR}/agroguard.db"

    # Primary document database
    MONGODB_URI: Optional[str] = None
    MONGODB_DB: str = "agroguard"

    # REST fallback as seen by catalog clients
    FALLBACK_API_URL: str = "http://localhost:3001"
    FALLBACK_API_TIMEOUT: float = 10

    # Gemini AI Configuration
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.0-flash"
    USE_MOCK_AI: bool = False
    ANALYSIS_TIMEOUT: Optional[float] = None
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Application Configuration
    ENV_MODE: str = "dev"
    DEBUG: bool = False
    CORS_ORIGIN: str = "http://localhost:5173"

    @field_validator('GEMINI_API_KEY', 'MONGODB_URI')
    @classmethod
    def blank_as_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty credentials as not configured"""
        if v is None or v.strip() == '':
            return None
        return v

    @property
    def remote_analysis_enabled(self) -> bool:
        return bool(self.GEMINI_API_KEY) and not self.USE_MOCK_AI

    @property
    def is_dev(self) -> bool:
        return self.ENV_MODE == "dev"

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = "ignore"
        case_sensitive = True


def get_settings() -> Settings:
    """
    Get application settings with detailed error reporting.

    Raises:
        SystemExit: If environment variables fail validation
    """
    try:
        settings = Settings()
        logger.info("✅ Configuration loaded successfully")
        logger.info(f"📊 Environment: {settings.ENV_MODE}")
        logger.info(f"🗄️  Fallback store: {settings.SQLALCHEMY_DATABASE_URI.split('@')[-1]}")
        logger.info(f"🍃 Primary database: {'configured' if settings.MONGODB_URI else 'not configured'}")
        logger.info(f"🧠 Remote analysis: {'ON' if settings.remote_analysis_enabled else 'OFF (simulator)'}")
        return settings
    except ValidationError as e:
        logger.error("❌ Configuration validation failed!")
        logger.error("=" * 60)
        logger.error("INVALID ENVIRONMENT VARIABLES:")
        logger.error("=" * 60)

        for error in e.errors():
            field = error['loc'][0]
            error_type = error['type']
            msg = error['msg']

            logger.error(f"  ❌ {field}")
            logger.error(f"     Type: {error_type}")
            logger.error(f"     Message: {msg}")
            logger.error("")

        logger.error("=" * 60)
        logger.error("Please fix these variables in your .env file or environment")
        logger.error("=" * 60)
        sys.exit(1)


# Singleton settings instance
settings: Optional[Settings] = None


def init_settings() -> Settings:
    """Initialize settings (called once at startup)"""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
