"""
MongoDB Connection Utility

MongoDB stores:
- User identity records (local and Google accounts) with their nested profile

WHY MongoDB for these?
- Document-oriented: the profile is a nested sub-record of the user
- Schema-flexible: federated accounts have no password or phone number
- No joins needed: each user document is self-contained
"""
import logging

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from portal.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we'll use:
    - users: identity records with nested profile
    """
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
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
}


def init_mongo_indexes():
    """
    Create indexes.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # One record per email; duplicate inserts fail with DuplicateKeyError
    db[COLLECTIONS["users"]].create_index("email", unique=True)

    logger.info("MongoDB indexes created successfully")
