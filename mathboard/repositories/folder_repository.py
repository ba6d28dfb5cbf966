from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from mathboard.db.context import DBContext


class FolderRepository:
    """Data access layer for upload folders."""

    def __init__(self, db_context: Optional[DBContext] = None):
        self._db_context = db_context

    @property
    def collection(self):
        if self._db_context is None:
            self._db_context = DBContext()
        return self._db_context.database.folders

    async def insert(self, name: str) -> Dict[str, Any]:
        doc = {"name": name, "created_at": datetime.now(timezone.utc)}
        await self.collection.insert_one(dict(doc))
        return doc

    async def get(self, name: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"name": name}, {"_id": 0})

    async def list(self) -> List[Dict[str, Any]]:
        cursor = self.collection.find({}, {"_id": 0}).sort("name", 1)
        return await cursor.to_list(length=None)

    async def delete(self, name: str) -> bool:
        result = await self.collection.delete_one({"name": name})
        return result.deleted_count > 0
