"""
MongoDB Connection Utility

MongoDB stores every entity of the portal:
- users (identities: name, email, password hash, role)
- jobs (postings owned by a recruiter)
- applications (student -> job, with status)
- student_profiles / recruiter_profiles (one per user)

Uniqueness rules live in the indexes created by init_mongo_indexes().
The application layer pre-checks them, but the index is what actually
guards against two concurrent writers.
"""
import logging

from pymongo import MongoClient, ASCENDING
from pymongo.database import Database
from pymongo.collection import Collection

from jobportal.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

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
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection. Use the COLLECTIONS constants for names."""
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
    "users": "users",
    "jobs": "jobs",
    "applications": "applications",
    "student_profiles": "student_profiles",
    "recruiter_profiles": "recruiter_profiles"
}


def init_mongo_indexes():
    """
    Create indexes. Call this once during app startup.
    """
    db = get_mongo_db()

    # One account per email
    db[COLLECTIONS["users"]].create_index("email", unique=True)

    # Recruiter dashboard lookups
    db[COLLECTIONS["jobs"]].create_index("recruiter_id")

    # At most one application per (job, student)
    db[COLLECTIONS["applications"]].create_index([
        ("job_id", ASCENDING),
        ("student_id", ASCENDING)
    ], unique=True)
    db[COLLECTIONS["applications"]].create_index("student_id")

    # One profile per user
    db[COLLECTIONS["student_profiles"]].create_index("user_id", unique=True)
    db[COLLECTIONS["recruiter_profiles"]].create_index("user_id", unique=True)

    logger.info("MongoDB indexes created successfully")
