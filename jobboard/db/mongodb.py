"""
MongoDB Connection Utility

MongoDB stores two collections:
- users: accounts with embedded profile sections
  (employments, educations, it_skills, projects, accomplishments, certifications)
- jobs: postings with embedded applications

Embedded sections have no life of their own: deleting a parent deletes them.
"""
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from loguru import logger

from jobboard.core.config import get_settings

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
    """Get the job board database"""
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
    except PyMongoError as e:
        logger.error(f"MongoDB connection failed: {e}")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "jobs": "jobs",
}


def init_mongo_indexes(db: Database = None):
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = db if db is not None else get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)

    jobs = db[COLLECTIONS["jobs"]]
    # Employer dashboards list their own jobs newest first
    jobs.create_index([("employer", ASCENDING), ("created_at", DESCENDING)])
    jobs.create_index("is_active")
    jobs.create_index("location")
    # Status updates locate the job by application id alone
    jobs.create_index("applications._id")

    logger.info("MongoDB indexes created successfully")
