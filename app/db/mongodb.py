"""
MongoDB Connection Utility

MongoDB stores:
- Student documents, each with its academic details and (when placed)
  its embedded placement record

WHY MongoDB for these?
- A student and its placement record are read and written together
- The placement state is a tagged union - a natural nested document
- Imports append hundreds of documents at once (insert_many)
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the placement tracker database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "students": "students",
    "counters": "counters",
}


def init_mongo_indexes():
    """
    Create indexes for the student filters that hit the database.
    Call this once during app startup.
    """
    students = get_collection(COLLECTIONS["students"])

    students.create_index("roll_number")
    students.create_index("mentor_id")
    students.create_index("department")
    students.create_index("seq")
    students.create_index([("placement.status", ASCENDING), ("seq", ASCENDING)])

    logger.info("MongoDB indexes created successfully")
