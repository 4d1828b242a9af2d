# Record store adapter: a MongoDB database reached through insert/select only

import logging
from typing import Dict, List

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from grievance_portal.config import new_id, now_utc

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for record store failures."""


class StoreWriteError(StoreError):
    pass


class StoreReadError(StoreError):
    pass


def convert_db_row(row: dict) -> dict:
    row = dict(row)
    row["id"] = str(row.pop("_id"))
    return row


class GrievanceStore:
    """Thin wrapper exposing ``insert(table, rows)`` and ``select(table, ...)``.

    The store assigns ``id``, ``created_at`` and ``updated_at`` on insert
    (rows may carry their own ``created_at``, e.g. backdated sample data).
    Calls are blocking; async callers run them on an executor.
    """

    def __init__(self, client: MongoClient, database: str):
        self.client = client
        self.db = client[database]

    def insert(self, table: str, rows: List[Dict]) -> List[Dict]:
        docs = []
        for row in rows:
            ts = now_utc()
            doc = {"_id": new_id(), **row}
            doc.setdefault("created_at", ts)
            doc.setdefault("updated_at", ts)
            docs.append(doc)
        try:
            self.db[table].insert_many(docs)
        except PyMongoError as e:
            logger.error("Insert into %s failed: %s", table, e)
            raise StoreWriteError(str(e)) from e
        return [convert_db_row(d) for d in docs]

    def select(self, table: str, order_by: str = "created_at", ascending: bool = False) -> List[Dict]:
        try:
            cursor = self.db[table].find({}).sort(order_by, ASCENDING if ascending else DESCENDING)
            return [convert_db_row(d) for d in cursor]
        except PyMongoError as e:
            logger.error("Select from %s failed: %s", table, e)
            raise StoreReadError(str(e)) from e

    def create_indexes(self, table: str) -> None:
        for field in ("created_at", "urgency", "category"):
            self.db[table].create_index(field)

    def close(self) -> None:
        self.client.close()
