from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # Application
    APP_NAME: str = "OneHR Portal API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Database (MongoDB)
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "onehr"
    MONGODB_TIMEOUT_MS: int = 5000

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # First admin account, created on startup when missing
    BOOTSTRAP_ADMIN_EMAIL: Optional[str] = None
    BOOTSTRAP_ADMIN_PASSWORD: Optional[str] = None
    BOOTSTRAP_ADMIN_NAME: str = "Administrator"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
