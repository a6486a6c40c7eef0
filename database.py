"""
Document store client.

``Database`` wraps a pymongo client and one database on it.  An
instance is built at application startup and handed to the services;
there is no module level connection.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, client: MongoClient, name: str):
        self.client = client
        self.db = client[name]

    @classmethod
    def connect(cls, url: Optional[str], name: str, timeout_ms: int = 5000) -> "Database":
        """Open a connection and make sure the server answers.

        Raises ``RuntimeError`` when no connection string is configured or
        the server cannot be reached.
        """
        if not url:
            raise RuntimeError("DATABASE_URL is not set")
        client = MongoClient(url, serverSelectionTimeoutMS=timeout_ms)
        store = cls(client, name)
        try:
            store.ping()
        except PyMongoError as e:
            client.close()
            raise RuntimeError(f"MongoDB connection error: {e}") from e
        logger.info("MongoDB connected (database %s)", name)
        return store

    def ping(self) -> None:
        self.client.admin.command("ping")

    def ensure_indexes(self) -> None:
        # Nickname is the only user identifier; duplicates are rejected here
        # as well as by the service's lookup.
        self.db["user"].create_index([("nickname", ASCENDING)], unique=True)

    def create_document(self, collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
        """Insert a document, stamping ``created_at``/``updated_at``.

        Returns the inserted id as a string.
        """
        if isinstance(data, BaseModel):
            doc = data.model_dump()
        else:
            doc = dict(data)
        now = datetime.now(timezone.utc)
        doc["created_at"] = now
        doc["updated_at"] = now
        result = self.db[collection_name].insert_one(doc)
        return str(result.inserted_id)

    def find_one(self, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return self.db[collection_name].find_one(filter_dict or {})

    def update_one(self, collection_name: str, filter_dict: Dict[str, Any], values: Dict[str, Any]) -> int:
        """``$set`` the given values on the first match; returns the match count."""
        values = {**values, "updated_at": datetime.now(timezone.utc)}
        result = self.db[collection_name].update_one(filter_dict, {"$set": values})
        return result.matched_count

    def close(self) -> None:
        self.client.close()
