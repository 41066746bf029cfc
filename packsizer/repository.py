"""MongoDB storage for packagings."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from .errors import CustomError
from .models import CreatePackagingDto, Packaging

DATABASE_NAME = "re-tech-challenge"
PACKAGING_COLLECTION = "packaging"

_ACTIVE_FILTER = {"deletedAt": None}
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class MongoClientProvider:
    """Connects to MongoDB on first use and hands out collections."""

    def __init__(
        self,
        url: str | None = None,
        client_factory: Callable[[str], Any] = MongoClient,
    ) -> None:
        self._url = url
        self._client_factory = client_factory
        self._client: Any = None

    def _connect(self) -> Any:
        url = self._url if self._url is not None else os.getenv("DB_URL", "")
        try:
            client = self._client_factory(url)
        except PyMongoError as err:
            raise RuntimeError(f"unable to connect to mongo, error: {err}") from err
        try:
            client.admin.command("ping")
        except PyMongoError as err:
            raise RuntimeError(f"unable to reach mongo, error: {err}") from err
        return client

    def get_collection(self, collection_name: str) -> Any:
        """Return the named collection of the application database."""
        if self._client is None:
            self._client = self._connect()
        return self._client[DATABASE_NAME][collection_name]


def document_from_dto(dto: CreatePackagingDto) -> dict[str, Any]:
    """Build the document stored for a new packaging."""
    return {
        "size": dto.size,
        "createdAt": datetime.now(timezone.utc),
        "updatedAt": None,
        "deletedAt": None,
    }


def packaging_from_document(document: Mapping[str, Any]) -> Packaging:
    """Turn a stored document into a Packaging."""
    return Packaging(
        id=str(document["_id"]),
        size=int(document.get("size", 0)),
        created_at=document.get("createdAt") or _ZERO_TIME,
        updated_at=document.get("updatedAt"),
        deleted_at=document.get("deletedAt"),
    )


class MongoPackagingRepository:
    """Packaging repository backed by a MongoDB collection."""

    def __init__(self, collection: Any) -> None:
        self._collection = collection

    def create(self, dto: CreatePackagingDto) -> Packaging:
        document = document_from_dto(dto)
        try:
            result = self._collection.insert_one(document)
        except PyMongoError as err:
            raise CustomError(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Error inserting packaging into DB", err
            ) from err
        document["_id"] = result.inserted_id
        return packaging_from_document(document)

    def delete_by_id(self, packaging_id: str) -> None:
        """Soft-delete a packaging by setting its deletion time."""
        try:
            object_id = ObjectId(packaging_id)
        except (InvalidId, TypeError) as err:
            raise CustomError(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Invalid ID format", err
            ) from err
        try:
            found = self._collection.find_one_and_update(
                {"_id": object_id},
                {"$set": {"deletedAt": datetime.now(timezone.utc)}},
            )
        except PyMongoError as err:
            raise CustomError(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Error deleting packaging", err
            ) from err
        if found is None:
            raise CustomError(
                HTTPStatus.NOT_FOUND,
                "Packaging not found",
                LookupError("mongo: no documents in result"),
            )

    def get_all(self) -> list[Packaging]:
        return self._find_active()

    def get_all_sorted_by_size(self) -> list[Packaging]:
        return self._find_active(sort=[("size", DESCENDING)])

    def _find_active(self, **options: Any) -> list[Packaging]:
        try:
            documents: Iterable[Mapping[str, Any]] = list(
                self._collection.find(_ACTIVE_FILTER, **options)
            )
        except PyMongoError as err:
            raise CustomError(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                "Error searching for packagings on the DB",
                err,
            ) from err
        try:
            return [packaging_from_document(document) for document in documents]
        except (KeyError, TypeError, ValueError) as err:
            raise CustomError(
                HTTPStatus.INTERNAL_SERVER_ERROR, "Error decoding DB result", err
            ) from err