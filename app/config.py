import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./folderdeck.db")
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", 7))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "folderdeck.log")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")
    DEBUG = os.getenv("DEBUG", "False").lower() == "true"
    APP_VERSION = os.getenv("APP_VERSION", "0.1.0")
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


settings = Settings()
