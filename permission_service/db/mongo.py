import logging

from fastapi import HTTPException, Request, status
from pymongo import MongoClient
from pymongo.errors import ConfigurationError

from permission_service.core.config import Settings, settings
from permission_service.core.exceptions import StoreInitError
from permission_service.services.permission_store import MongoStore

logger = logging.getLogger(__name__)


def create_client(config: Settings = settings) -> MongoClient:
    return MongoClient(
        config.MONGO_HOST,
        serverSelectionTimeoutMS=config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
    )


def open_store(client: MongoClient, config: Settings = settings) -> MongoStore:
    """Open the permission store on the database named in the connection string."""
    try:
        db = client.get_default_database()
    except ConfigurationError as e:
        raise StoreInitError(f"MONGO_HOST must name a database: {e}") from e

    logger.info("Connecting to mongodb database %s", db.name)
    return MongoStore.open(db, server_selection_timeout=config.MONGO_SERVER_SELECTION_TIMEOUT_MS / 1000)


# dependency to get the store opened at startup
def get_store(request: Request) -> MongoStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Permission store is not initialized",
        )
    return store
