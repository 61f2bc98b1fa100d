"""
Database initialization and management.

Provides the MongoDB connection and the collections the coach uses:
- users: profile, goal, subscription status
- workout_logs: the current week's parsed logs (cleared when archived)
- weekly_history: one archived summary per user per week
"""

from urllib.parse import urlparse

from pymongo import ASCENDING, DESCENDING, MongoClient

from core.env_loader import get_env
from utils.logger import get_logger

DEFAULT_MONGODB_URL = "mongodb://localhost:27017/arlo"


def init_database(mongodb_url: str = None):
    """
    Initialize MongoDB database with its collections and indexes.

    Args:
        mongodb_url: MongoDB connection URL (can include database name in path).
                     If not provided, uses MONGODB_URL env var or localhost.

    Returns:
        pymongo.Database: Database instance
    """
    logger = get_logger("database")

    if mongodb_url is None:
        mongodb_url = get_env("MONGODB_URL", DEFAULT_MONGODB_URL)

    # Database name comes from the URL path
    parsed = urlparse(mongodb_url)
    db_name = parsed.path.lstrip('/') if parsed.path and parsed.path != '/' else "arlo"

    if parsed.query:
        # Preserve query parameters (like authSource, etc.)
        connection_string = f"{parsed.scheme}://{parsed.netloc}/?{parsed.query}"
    else:
        connection_string = f"{parsed.scheme}://{parsed.netloc}/"

    client = MongoClient(connection_string)
    db = client[db_name]
    setup_collections(db)

    logger.info(f"Database initialized: {db_name}")
    return db


def setup_collections(db) -> None:
    """Create indexes; safe to call repeatedly."""
    db["users"].create_index("user_id", unique=True)
    db["workout_logs"].create_index([("user_id", ASCENDING), ("date", ASCENDING)])
    db["weekly_history"].create_index([("user_id", ASCENDING), ("week_start", DESCENDING)])
