from pydantic_settings import BaseSettings
from typing import List, Literal


class Settings(BaseSettings):
    """
    Application configuration settings.
    Loads from environment variables or .env file.
    """

    # Application
    APP_NAME: str = "Dealership API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Record store
    # Options: mongo, memory
    # - mongo: Beanie documents on MongoDB (production)
    # - memory: process-local store (development, tests)
    STORE_BACKEND: Literal["mongo", "memory"] = "mongo"
    DATABASE_URL: str = "mongodb://localhost:27017/dealership"
    DATABASE_NAME: str = "dealership_db"
    SEED_DEMO_DATA: bool = False

    # JWT Authentication
    SECRET_KEY: str = "change_this_secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    # Offers
    DEFAULT_OFFER_DURATION_DAYS: int = 30
    EXPIRING_SOON_DAYS: int = 7
    HIGH_DISCOUNT_THRESHOLD: float = 20.0

    # Analytics
    LOW_STOCK_THRESHOLD: int = 5
    TOP_CUSTOMERS_LIMIT: int = 10

    # Catalog client
    API_BASE_URL: str = "http://localhost:8000/api"
    CATALOG_REFRESH_SECONDS: float = 120.0

    # Storefront / admin console origins
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
