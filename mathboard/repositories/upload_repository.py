from typing import Any, Dict, List, Optional

from mathboard.db.context import DBContext


class UploadRepository:
    """Data access layer for upload metadata."""

    def __init__(self, db_context: Optional[DBContext] = None):
        self._db_context = db_context

    @property
    def collection(self):
        # Resolved on first query so the app starts without MONGODB_URL.
        if self._db_context is None:
            self._db_context = DBContext()
        return self._db_context.database.uploads

    async def insert(self, record: Dict[str, Any]):
        # insert_one adds _id to the dict it is given
        await self.collection.insert_one(dict(record))

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"key": key}, {"_id": 0})

    async def list(self, folder: Optional[str] = None) -> List[Dict[str, Any]]:
        query = {"folder": folder} if folder else {}
        cursor = self.collection.find(query, {"_id": 0}).sort("created_at", -1)
        return await cursor.to_list(length=None)

    async def delete(self, key: str) -> bool:
        result = await self.collection.delete_one({"key": key})
        return result.deleted_count > 0

    async def delete_by_folder(self, folder: str) -> List[str]:
        """Remove every upload in a folder and return the removed keys."""
        cursor = self.collection.find({"folder": folder}, {"_id": 0, "key": 1})
        keys = [doc["key"] for doc in await cursor.to_list(length=None)]
        if keys:
            await self.collection.delete_many({"key": {"$in": keys}})
        return keys
