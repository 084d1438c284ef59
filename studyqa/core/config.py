"""Application configuration with environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "StudyQA API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Storage backend: memory, sql or mongo
    STORAGE_BACKEND: str = "memory"

    # Relational backend
    DATABASE_URL: str = "sqlite:///./studyqa.db"

    # Document-store backend
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "aiTutorDb"
    MONGODB_TIMEOUT_MS: int = 5000

    # OpenAI
    OPENAI_API_KEY: str = "your-openai-api-key-here"
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TIMEOUT_SECONDS: float = 30.0
    OPENAI_MAX_TOKENS: int = 2000
    GENERATION_MAX_CHARS: int = 10000

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10 MiB

    # Question generation
    DEFAULT_QUESTION_COUNT: int = 5
    MAX_QUESTION_COUNT: int = 50

    # OCR
    OCR_LANGUAGE: str = "eng"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create global settings instance
settings = Settings()
