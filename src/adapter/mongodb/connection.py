"""Shared MongoDB client for the users collection.

One client per process, created lazily on first request. A missing or
unreachable MONGO_URL at startup is treated as configuration and not retried;
a client that was working and stops answering pings is rebuilt.
"""

import os
import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'identity')

# tz_aware: stored created_at/updated_at come back as UTC datetimes, not naive
CLIENT_OPTIONS = {
    'tz_aware': True,
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'retryWrites': True,
    'retryReads': True,
}

_client: MongoClient | None = None
_ever_connected = False
_misconfigured = False


def reset_client():
    """Forget the cached client and any earlier connection failure."""
    global _client, _ever_connected, _misconfigured
    _client = None
    _ever_connected = False
    _misconfigured = False


def _is_alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return a live MongoClient, or None when MongoDB is unconfigured or unreachable."""
    global _client, _ever_connected, _misconfigured

    if _client is not None:
        if _is_alive(_client):
            return _client
        logger.warning("[MONGODB] Cached client stopped answering, reconnecting")
        _client = None

    if _misconfigured:
        return None

    if not MONGO_URL:
        logger.error("[MONGODB] MONGO_URL not configured")
        _misconfigured = True
        return None

    try:
        client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
    except PyMongoError as e:
        logger.error("[MONGODB] Invalid MONGO_URL", extra={"error": str(e)[:200]})
        _misconfigured = True
        return None

    if not _is_alive(client):
        if not _ever_connected:
            logger.error("[MONGODB] Initial connection failed", extra={"database": DATABASE_NAME})
            _misconfigured = True
        return None

    if not _ever_connected:
        logger.info("[MONGODB] Connected", extra={"database": DATABASE_NAME})
    _ever_connected = True
    _client = client
    return client
