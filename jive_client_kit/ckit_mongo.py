import logging
import time
from typing import Dict, Any, List

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase


logger = logging.getLogger("jmongo")


KEY_FIELD = "_id"
MTIME_FIELD = "mon_mtime"


class MongoPersistence:
    """
    Persistence for community records on top of pymongo's async API.

    One mongo collection per persistence collection, the record key goes to `_id`.
    Returned records never carry the `_id` and `mon_mtime` bookkeeping fields.
    """

    def __init__(self, db: AsyncDatabase):
        self.db = db

    @classmethod
    def from_url(cls, mongo_url: str, db_name: str = "jive") -> "MongoPersistence":
        logger.info("mongo persistence db=%s", db_name)
        return cls(AsyncMongoClient(mongo_url)[db_name])

    async def save(self, collection: str, key: str, record: Dict[str, Any]) -> Dict[str, Any]:
        assert key, "empty key"
        document = dict(record)
        document[KEY_FIELD] = key
        document[MTIME_FIELD] = time.time()
        await self.db[collection].replace_one({KEY_FIELD: key}, document, upsert=True)
        return _strip(document)

    async def find(self, collection: str, filter: Dict[str, Any]) -> List[Dict[str, Any]]:
        cursor = self.db[collection].find(filter or {})
        documents = []
        async for doc in cursor:
            documents.append(_strip(doc))
        return documents

    async def remove(self, collection: str, key: str) -> bool:
        result = await self.db[collection].delete_one({KEY_FIELD: key})
        return result.deleted_count > 0


def _strip(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in doc.items() if k not in (KEY_FIELD, MTIME_FIELD)}
