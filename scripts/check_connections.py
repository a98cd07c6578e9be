#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the MongoDB connection and indexes before starting the API.
Usage: python scripts/check_connections.py
"""
import sys

from jobportal.core.config import get_settings
from jobportal.db.mongodb import get_mongo_db, init_mongo_indexes, test_mongo_connection, COLLECTIONS


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB PORTAL - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    ❌ MongoDB: FAILED")
        sys.exit(1)
    print("    ✅ MongoDB: CONNECTED")

    print("\n[2] Creating indexes...")
    init_mongo_indexes()
    db = get_mongo_db()
    for name in COLLECTIONS.values():
        indexes = sorted(db[name].index_information())
        print(f"    {name}: {', '.join(indexes)}")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
