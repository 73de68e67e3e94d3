"""
Database Helper Functions

MongoDB connection helpers. The bootstrap script connects from an explicit
connection string; the diagnostics API calls `configure_from_env()` to build
the module-level `db` from DATABASE_URL and DATABASE_NAME. Importing this
module reads no environment configuration.
"""

import os

from dotenv import load_dotenv
from fastapi import HTTPException
from pymongo import MongoClient
from pymongo.database import Database

from definitions import DB_NAME


def connect(url: str) -> MongoClient:
    """Open a client for a mongodb:// connection string"""
    return MongoClient(url)


def get_database(client: MongoClient, name: str = DB_NAME) -> Database:
    return client[name]


_client = None
db = None


def configure_from_env():
    """Load .env and connect the module-level db when both values are set"""
    global _client, db
    # Load environment variables from .env file
    load_dotenv()

    database_url = os.getenv("DATABASE_URL")
    database_name = os.getenv("DATABASE_NAME")

    if database_url and database_name:
        _client = connect(database_url)
        db = get_database(_client, database_name)
    return db


def get_db() -> Database:
    """FastAPI dependency returning the configured database"""
    if db is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Check DATABASE_URL and DATABASE_NAME environment variables.",
        )
    return db
