from __future__ import annotations

from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from config import PlannerSettings, get_settings
from services.error_handlers import ConfigurationError
from services.logger_singleton import LoggerSingleton

logger = LoggerSingleton.get_logger(__name__)

_client: Optional[AsyncMongoClient] = None


def get_mongo_db(settings: Optional[PlannerSettings] = None) -> AsyncDatabase:
    """Return the shared async MongoDB database for the configured MONGO_URI.

    The client is created once per process and connects lazily, so this does
    not block. MONGO_DB_NAME picks the database; without it the URI's default
    database is used.
    """
    global _client

    settings = settings or get_settings()
    if not settings.mongo_uri:
        raise ConfigurationError("MONGO_URI is not configured")

    if _client is None:
        client_options = {
            'serverSelectionTimeoutMS': 10000,
            'connectTimeoutMS': 10000,
            'socketTimeoutMS': 30000,
            'retryWrites': False,  # failures surface to the caller, no driver retries
            'retryReads': False,
            'tz_aware': True,
            'appname': 'repair-planner',
        }
        _client = AsyncMongoClient(settings.mongo_uri, **client_options)
        logger.info("MongoDB client created")

    if settings.mongo_db_name:
        return _client.get_database(settings.mongo_db_name)
    return _client.get_default_database()


async def close_mongo_client() -> None:
    """Close the shared client, if one was created"""
    global _client

    if _client is not None:
        await _client.close()
        _client = None
        logger.info("MongoDB client closed")
