from pydantic_settings import BaseSettings
from typing import List, Any
import json


def parse_list_setting(v: Any) -> List[str]:
    """Parse a list setting from a JSON array or a comma-separated string"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [item.strip() for item in v.split(',') if item.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Campus Records"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database (record store backend)
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./campus_records.db"
    DB_ECHO: bool = False

    # Serve every view from the in-memory demo fixtures instead of the database
    USE_MOCK_DATA: bool = False

    # ==========================================
    # Authentication (tokens are issued by the hosting environment)
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    # ==========================================
    # File Storage
    # ==========================================
    STORAGE_MODE: str = "local"  # "local", "s3", or "minio"
    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # AWS S3 / MinIO
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "us-east-1"
    S3_PUBLIC_URL: str = ""  # e.g. https://cdn.example.edu, falls back to the bucket endpoint
    MINIO_ENDPOINT: str = "localhost:9000"

    CERTIFICATE_BUCKET: str = "certificates"
    MAX_UPLOAD_SIZE: int = 10485760  # 10MB
    ALLOWED_EXTENSIONS_STR: str = "pdf,jpg,jpeg,png,doc,docx"

    @property
    def ALLOWED_EXTENSIONS(self) -> List[str]:
        """Parse allowed extensions from comma-separated string"""
        return [ext.lower() for ext in parse_list_setting(self.ALLOWED_EXTENSIONS_STR)]

    # ==========================================
    # Views
    # ==========================================
    NOTIFICATION_PAGE_SIZE: int = 10
    LEADERBOARD_SIZE: int = 10
    LEADERBOARD_WIDGET_SIZE: int = 5
    STUDENT_RECENT_CERTIFICATES: int = 8
    MAX_RECOMMENDATIONS: int = 6

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_list_setting(self.CORS_ORIGINS_STR)

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
