# rentalhub/db/mongo.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from rentalhub.core.config import get_settings
import certifi

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def get_client() -> AsyncIOMotorClient:
    assert _client is not None, "Mongo client not initialized"
    return _client


def get_db() -> AsyncIOMotorDatabase:
    assert _db is not None, "Mongo DB not initialized"
    return _db


def _new_client() -> AsyncIOMotorClient:
    settings = get_settings()
    options = dict(
        uuidRepresentation="standard",
        serverSelectionTimeoutMS=6000,
        connectTimeoutMS=6000,
    )
    if settings.MONGO_TLS:
        # explicit CA bundle: slim containers often ship without one
        options.update(tls=True, tlsCAFile=certifi.where())
    return AsyncIOMotorClient(settings.MONGO_URI, **options)


async def connect():
    """
    Create the Motor client and ping the server.
    A failed ping does not abort startup: the client stays lazy and the
    first real query attempts the connection again.
    """
    global _client, _db
    settings = get_settings()

    try:
        _client = _new_client()
        _db = _client[settings.MONGO_DB]
        await _client.admin.command("ping")
        logger.info("Mongo connected (ping ok) db=%s", settings.MONGO_DB)
    except Exception as e:
        logger.warning("Mongo ping at startup failed: %s", e)
        if _client is not None:
            _client.close()
        try:
            _client = _new_client()
            _db = _client[settings.MONGO_DB]
            logger.warning("Mongo will attempt lazy connection on first query")
        except Exception as e2:
            # routes that need the DB will assert
            _client = None
            _db = None
            logger.error("Mongo client init failed: %s", e2)


async def disconnect():
    global _client, _db
    if _client:
        _client.close()
        logger.info("Mongo disconnected")
    _client = None
    _db = None
