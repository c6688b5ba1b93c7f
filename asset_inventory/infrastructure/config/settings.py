"""Application settings"""
from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Asset Inventory API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: List[str] = ["*"]

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_TYPE: str = "sqlite"  # sqlite, postgresql
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "assets"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    STORE_TIMEOUT_SECONDS: float = 10.0  # upper bound for a single store call

    # Asset vocabulary (deployment specific)
    ASSET_CATEGORIES: List[str] = [
        "Electronics",
        "Furniture",
        "Software",
        "Office Supplies",
        "IT Infrastructure",
        "Laboratory Equipment",
        "Vehicles",
        "Other",
    ]
    ASSET_STATUSES: List[str] = [
        "Active",
        "In Use",
        "Maintenance",
        "In Repair",
        "Retired",
        "Decommissioned",
        "In Storage",
    ]
    DEFAULT_LOCATION: str = "Not specified"
    DEFAULT_ASSIGNEE: str = "Unassigned"
    SEED_DEMO_DATA: bool = False

    # Advisory chat (hosted LLM)
    LLM_API_KEY: Optional[str] = None
    LLM_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    LLM_MODEL: str = "gemini-1.5-flash"
    LLM_TIMEOUT_SECONDS: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True

    def get_database_url(self) -> str:
        """Get database URL from settings or environment"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.DATABASE_TYPE == "postgresql":
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        elif self.DATABASE_TYPE == "sqlite":
            return "sqlite:///./assets.db"
        else:
            raise ValueError(f"Unsupported database type: {self.DATABASE_TYPE}")


settings = Settings()
