from pydantic_settings import BaseSettings
from typing import List
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # App Settings
    APP_NAME: str = os.getenv("APP_NAME", "SalonEase")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    # MongoDB Settings
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "saloneasy_db")
    
    # JWT Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your_secret_key_here")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
    
    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Admin web
        "http://localhost:8080",  # Mobile web build
    ]
    
    # Scheduling
    SLOT_GRANULARITY_MINUTES: int = int(os.getenv("SLOT_GRANULARITY_MINUTES", "60"))
    SALON_TIMEZONE: str = os.getenv("SALON_TIMEZONE", "UTC")
    
    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
