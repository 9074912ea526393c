import os
import logging
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()

DB_CONFIG: Dict[str, Any] = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": os.getenv("DB_PORT", "5432"),
    "database": os.getenv("DB_DATABASE", "postgres"),
    "user": os.getenv("DB_USER", "postgres"),
    "password": os.getenv("DB_PASSWORD", ""),
}

SCHEMA_NAME = os.getenv("DB_SCHEMA", "public")

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Messages shown when a chat is opened, and how many more "load" adds
MESSAGE_PAGE_SIZE = int(os.getenv("MESSAGE_PAGE_SIZE", "10"))
LOAD_MORE_INCREMENT = 10


def build_db_config(database: str, port: str, user: str) -> Dict[str, Any]:
    """Override the .env connection settings with command-line values."""
    db_config = dict(DB_CONFIG)
    db_config.update({"database": database, "port": port, "user": user})
    return db_config


def setup_logger(name: str) -> logging.Logger:
    """Configure and return a named logger writing to stderr."""
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
