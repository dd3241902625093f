import logging
from contextlib import contextmanager
from typing import Any, Iterator, NamedTuple, Optional

import pymongo
from pydantic import ValidationError as PydanticValidationError
from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, NetworkTimeout, PyMongoError
from pymongo.read_preferences import ReadPreference

from permission_service.core.exceptions import (
    CancellationError,
    NotFoundError,
    PermissionStoreError,
    StorageError,
    StoreInitError,
    ValidationError,
)
from permission_service.models.permission import (
    FILE_ID_FIELD,
    PERMISSION_COLLECTION_NAME,
    ROLE_FIELD,
    USER_ID_FIELD,
    Permission,
)
from permission_service.services.filters import Filter

logger = logging.getLogger(__name__)

PAIR_INDEX_NAME = "fileID_userID_unique"


class HealthCheckResult(NamedTuple):
    healthy: bool
    error: Optional[PermissionStoreError] = None


class MongoStore:
    """
    Permission records in a MongoDB collection.

    Every operation takes an optional ``timeout`` in seconds. When it fires,
    the call raises CancellationError. The deadline is capped at
    ``server_selection_timeout`` so an unreachable server fails as a
    StorageError instead of waiting out the whole deadline. Errors are never
    retried here.
    """

    def __init__(self, collection: Collection, server_selection_timeout: Optional[float] = None):
        self.collection = collection
        self.server_selection_timeout = server_selection_timeout

    @classmethod
    def open(cls, db: Database, server_selection_timeout: Optional[float] = None) -> "MongoStore":
        """
        Select the permissions collection and ensure the unique
        (fileID, userID) index exists. Safe on an already indexed collection.
        """
        collection = db[PERMISSION_COLLECTION_NAME]
        try:
            collection.create_index(
                [(FILE_ID_FIELD, ASCENDING), (USER_ID_FIELD, ASCENDING)],
                unique=True,
                name=PAIR_INDEX_NAME,
            )
        except PyMongoError as e:
            logger.error("Failed to create %s index on %s: %s", PAIR_INDEX_NAME, collection.full_name, e)
            raise StoreInitError(f"Failed to create unique index on {collection.full_name}: {e}") from e

        logger.info("Permission store ready on %s", collection.full_name)
        return cls(collection, server_selection_timeout)

    def _deadline(self, timeout: Optional[float]) -> Optional[float]:
        # pymongo.timeout() overrides serverSelectionTimeoutMS, so cap it here
        if timeout is None or self.server_selection_timeout is None:
            return timeout
        return min(timeout, self.server_selection_timeout)

    @contextmanager
    def _operation(self, name: str, timeout: Optional[float]) -> Iterator[None]:
        deadline = self._deadline(timeout)
        try:
            with pymongo.timeout(deadline):
                yield
        except PyMongoError as e:
            # ServerSelectionTimeoutError is a ConnectionFailure: the store is
            # unreachable, not the caller's deadline firing mid-operation
            connectivity = isinstance(e, ConnectionFailure) and not isinstance(e, NetworkTimeout)
            if deadline is not None and e.timeout and not connectivity:
                logger.warning("%s cancelled after %ss", name, deadline)
                raise CancellationError(name, deadline) from e
            logger.warning("%s failed: %s", name, e)
            raise StorageError(name, str(e)) from e

    @staticmethod
    def _decode(name: str, document: dict[str, Any]) -> Permission:
        try:
            return Permission.from_document(document)
        except PydanticValidationError as e:
            raise StorageError(name, f"could not decode permission: {e}") from e

    def health_check(self, timeout: Optional[float] = None) -> HealthCheckResult:
        """Ping the primary. Returns (False, error) instead of raising."""
        try:
            with self._operation("health check", timeout):
                self.collection.database.client.admin.command(
                    "ping", read_preference=ReadPreference.PRIMARY
                )
        except PermissionStoreError as e:
            return HealthCheckResult(False, e)
        return HealthCheckResult(True)

    def create(self, permission: Permission, timeout: Optional[float] = None) -> Permission:
        """
        Create a permission of a file to a user. If a permission already
        exists for the pair, its role is overwritten. Returns the stored record.
        """
        if not permission.file_id:
            raise ValidationError(FILE_ID_FIELD)
        if not permission.user_id:
            raise ValidationError(USER_ID_FIELD)

        pair = {FILE_ID_FIELD: permission.file_id, USER_ID_FIELD: permission.user_id}
        with self._operation("create", timeout):
            document = self.collection.find_one_and_update(
                pair,
                {"$set": {ROLE_FIELD: permission.role}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        if document is None:
            raise StorageError("create", "upsert returned no document")

        stored = self._decode("create", document)
        logger.info(
            "Set role %r for user %s on file %s", stored.role, stored.user_id, stored.file_id
        )
        return stored

    def get(self, filter: Filter, timeout: Optional[float] = None) -> Permission:
        """Return the first permission matching filter, or raise NotFoundError."""
        with self._operation("get", timeout):
            document = self.collection.find_one(filter.to_query())
        if document is None:
            logger.debug("No permission matches %r", filter)
            raise NotFoundError()
        return self._decode("get", document)

    def get_all(self, filter: Filter, timeout: Optional[float] = None) -> list[Permission]:
        """
        Return every permission matching filter, in store order.
        No match is an empty list, not an error.
        """
        permissions: list[Permission] = []
        with self._operation("get all", timeout):
            cursor = self.collection.find(filter.to_query())
            try:
                for document in cursor:
                    permissions.append(self._decode("get all", document))
            finally:
                cursor.close()
        return permissions

    def delete(self, filter: Filter, timeout: Optional[float] = None) -> Permission:
        """Delete the first permission matching filter and return it."""
        with self._operation("delete", timeout):
            document = self.collection.find_one_and_delete(filter.to_query())
        if document is None:
            logger.debug("Nothing to delete for %r", filter)
            raise NotFoundError()

        deleted = self._decode("delete", document)
        logger.info("Deleted permission %s (file %s, user %s)", deleted.id, deleted.file_id, deleted.user_id)
        return deleted
