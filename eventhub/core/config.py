import os

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./eventhub.db")

# Directory holding uploaded event images
UPLOADS_DIR = os.getenv("UPLOADS_DIR", "./uploads")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]


def get_database_url():
    return DATABASE_URL


def get_uploads_dir():
    return UPLOADS_DIR
