import logging
import os

from fastapi import FastAPI
from pymongo import ASCENDING, AsyncMongoClient

from ...internal.schemas import UNIQUE_KEYS

DEFAULT_DATABASE_NAME = "mindai"

async def connect_client(
    app: FastAPI
):
    try:
        mongodb_uri = os.environ.get("MONGODB_URI")
        assert len(mongodb_uri or '') > 0, "Please define the MONGODB_URI environment variable"

        database_name = os.environ.get("MONGODB_DB_NAME") or DEFAULT_DATABASE_NAME
        app.state.mongo_client = AsyncMongoClient(mongodb_uri,
                                                  serverSelectionTimeoutMS=30000,
                                                  tz_aware=True)
        app.state.mongo_db = app.state.mongo_client[database_name]
        await ensure_indexes(app)
    except Exception as e:
        raise RuntimeError(f"Could not connect to the database: {e}") from e

async def ensure_indexes(
    app: FastAPI
):
    for collection_name, unique_keys in UNIQUE_KEYS.items():
        await app.state.mongo_db[collection_name].create_index(
            [(key, ASCENDING) for key in unique_keys],
            unique=True
        )
        logging.info(f"[ensure_indexes] Unique index on {collection_name}: {unique_keys}")

async def disconnect_client(
    app: FastAPI
):
    await app.state.mongo_client.close()
