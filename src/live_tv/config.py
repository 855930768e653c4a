"""Configuration management for Live TV."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Application configuration."""

    # Base paths
    BASE_DIR = Path(__file__).resolve().parent.parent.parent
    DATA_DIR = BASE_DIR / "data"
    LOG_DIR = BASE_DIR / "logs"

    # Database (key-value persistence backend)
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/live_tv.db")

    # Flask settings
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
    FLASK_PORT = int(os.getenv("FLASK_PORT", "8080"))
    DEBUG = os.getenv("DEBUG", "False").lower() == "true"

    # Seed document, fetched only when the backend has no channels
    SEED_URL = os.getenv("SEED_URL", "")
    SEED_FILE = Path(os.getenv("SEED_FILE", str(BASE_DIR / "channels.json")))
    SEED_TIMEOUT = float(os.getenv("SEED_TIMEOUT", "5"))

    # Import/export
    STRICT_IMPORT = os.getenv("STRICT_IMPORT", "False").lower() == "true"

    # Log retention
    ACTIVITY_LIMIT = int(os.getenv("ACTIVITY_LIMIT", "50"))
    BACKUP_HISTORY_LIMIT = int(os.getenv("BACKUP_HISTORY_LIMIT", "10"))
    RECENT_ACTIVITY_LIMIT = int(os.getenv("RECENT_ACTIVITY_LIMIT", "5"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = LOG_DIR / "live_tv.log"

    @classmethod
    def ensure_directories(cls):
        """Create necessary directories if they don't exist."""
        cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)

config = Config()
