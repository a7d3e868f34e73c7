"""
Document Store - per-collection load/modify/save over MongoDB.

Services receive a DocumentStore through FastAPI dependencies instead of
reaching for a module-level collection, so tests can hand in any
pymongo-compatible Collection.

Concurrency:
- Default: `save` replaces the whole document, last writer wins.
- optimistic=True: `save` only replaces the document if its `version` still
  matches the copy that was loaded, and bumps it. A mismatch raises
  ConflictError instead of silently overwriting a concurrent change.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError
from loguru import logger

from jobboard.core.config import get_settings
from jobboard.core.errors import ConflictError, InternalError, NotFoundError
from jobboard.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# HELPERS
# ============================================================

def utcnow() -> datetime:
    # BSON stores milliseconds; truncate so in-memory and stored values agree
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id; malformed ids return None and behave like absent ones."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc: Any) -> Any:
    """Convert MongoDB document to JSON-serializable structure (ObjectId -> str)."""
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, dict):
        return {key: serialize_doc(value) for key, value in doc.items()}
    if isinstance(doc, list):
        return [serialize_doc(item) for item in doc]
    return doc


def serialize_docs(docs: list) -> list:
    return [serialize_doc(doc) for doc in docs]


# ============================================================
# STORE
# ============================================================

class DocumentStore:
    """
    Thin wrapper around one collection.

    Every persistence failure surfaces as InternalError; nothing is retried.
    """

    def __init__(self, collection: Collection, label: str = "Document", optimistic: bool = False):
        self.collection = collection
        self.label = label
        self.optimistic = optimistic

    @property
    def name(self) -> str:
        return self.collection.name

    def find_by_id(self, doc_id: Any, projection: dict = None) -> Optional[dict]:
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        return self.find_one({"_id": oid}, projection)

    def find_one(self, query: dict, projection: dict = None) -> Optional[dict]:
        try:
            return self.collection.find_one(query, projection)
        except PyMongoError as e:
            logger.error(f"{self.name}: find_one failed: {e}")
            raise InternalError() from e

    def find(self, query: dict, projection: dict = None, sort: list = None) -> List[dict]:
        try:
            cursor = self.collection.find(query, projection)
            if sort:
                cursor = cursor.sort(sort)
            return list(cursor)
        except PyMongoError as e:
            logger.error(f"{self.name}: find failed: {e}")
            raise InternalError() from e

    def insert(self, doc: Dict[str, Any]) -> dict:
        """Insert a new document with timestamps and version 0."""
        now = utcnow()
        doc.setdefault("created_at", now)
        doc["updated_at"] = now
        doc["version"] = 0
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise ConflictError("Duplicate key") from e
        except PyMongoError as e:
            logger.error(f"{self.name}: insert failed: {e}")
            raise InternalError() from e
        doc["_id"] = result.inserted_id
        return doc

    def save(self, doc: Dict[str, Any]) -> dict:
        """
        Persist a loaded-and-modified document as a whole.

        Raises:
            NotFoundError: the document disappeared since it was loaded
            ConflictError: optimistic mode and someone saved in between
        """
        query = {"_id": doc["_id"]}
        loaded_version = doc.get("version", 0)
        if self.optimistic:
            query["version"] = doc["version"] if "version" in doc else {"$exists": False}

        replacement = dict(doc)
        replacement["updated_at"] = utcnow()
        replacement["version"] = loaded_version + 1

        try:
            result = self.collection.replace_one(query, replacement)
        except PyMongoError as e:
            logger.error(f"{self.name}: save of {doc['_id']} failed: {e}")
            raise InternalError() from e

        if result.matched_count == 0:
            if self.optimistic and self.find_one({"_id": doc["_id"]}, {"_id": 1}) is not None:
                logger.warning(f"{self.name}: version conflict saving {doc['_id']}")
                raise ConflictError()
            raise NotFoundError(f"{self.label} not found")

        doc.update(updated_at=replacement["updated_at"], version=replacement["version"])
        return doc

    def update_fields(self, doc_id: Any, fields: Dict[str, Any]) -> Optional[dict]:
        """$set top-level fields; returns the updated document or None if absent."""
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        update = {"$set": {**fields, "updated_at": utcnow()}, "$inc": {"version": 1}}
        try:
            return self.collection.find_one_and_update(
                {"_id": oid}, update, return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            logger.error(f"{self.name}: update of {doc_id} failed: {e}")
            raise InternalError() from e

    def delete(self, doc_id: Any) -> bool:
        oid = to_object_id(doc_id)
        if oid is None:
            return False
        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError as e:
            logger.error(f"{self.name}: delete of {doc_id} failed: {e}")
            raise InternalError() from e
        return result.deleted_count > 0


# ============================================================
# DEPENDENCIES
# ============================================================

def get_user_store() -> DocumentStore:
    """FastAPI dependency - store over the users collection."""
    return DocumentStore(
        get_collection(COLLECTIONS["users"]),
        label="User",
        optimistic=get_settings().optimistic_concurrency,
    )


def get_job_store() -> DocumentStore:
    """FastAPI dependency - store over the jobs collection."""
    return DocumentStore(
        get_collection(COLLECTIONS["jobs"]),
        label="Job",
        optimistic=get_settings().optimistic_concurrency,
    )
