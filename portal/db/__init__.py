"""
Database module - MongoDB connection.
"""
from portal.db.mongodb import get_mongo_db, get_collection, test_mongo_connection, init_mongo_indexes

__all__ = [
    "get_mongo_db",
    "get_collection",
    "test_mongo_connection",
    "init_mongo_indexes",
]
