#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the MongoDB connection and create indexes.
Usage: python scripts/check_connections.py
"""
from jobboard.core.config import get_settings
from jobboard.core.logger import setup_logger
from jobboard.db.mongodb import test_mongo_connection, init_mongo_indexes, get_mongo_db, COLLECTIONS


def main():
    settings = get_settings()
    setup_logger(settings.log_level)
    print("=" * 50)
    print("JOB BOARD - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    ❌ MongoDB: FAILED")
        return 1
    print("    ✅ MongoDB: CONNECTED")

    print("\n[2] Creating indexes...")
    init_mongo_indexes()
    db = get_mongo_db()
    for name in COLLECTIONS.values():
        print(f"    {name}: {db[name].estimated_document_count()} documents")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
