import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pymongo import ASCENDING, DESCENDING

from filevault.consts.node_type import NodeType
from filevault.crud.base import BaseCRUD, to_object_id
from filevault.models.node import Node
from filevault.schemas.node import NodeCreate

# "folder" sorts after "file", so descending node_type lists folders first
CHILDREN_SORT = [("node_type", DESCENDING), ("name", ASCENDING)]
RECENT_SORT = [("updated_at", DESCENDING)]


class NodeCRUD(BaseCRUD[Node, NodeCreate, NodeCreate]):
    def __init__(self):
        super().__init__(Node)

    @staticmethod
    def _children_query(owner_id: str, parent_id: Optional[str]) -> dict:
        return {"owner_id": owner_id, "parent_id": parent_id, "is_deleted": False}

    async def list_children(
        self, owner_id: str, parent_id: Optional[str], skip: int = 0, limit: int = 10
    ) -> List[Node]:
        """Visible direct children, folders first then by name"""
        cursor = self.model.find(self._children_query(owner_id, parent_id)).sort(CHILDREN_SORT)
        return await cursor.skip(skip).limit(limit).to_list()

    async def count_children(self, owner_id: str, parent_id: Optional[str]) -> int:
        return await self.model.find(self._children_query(owner_id, parent_id)).count()

    async def parent_links(self, owner_id: str) -> Dict[str, Optional[str]]:
        """Map of node id -> parent id for every node of the owner, trashed included"""
        collection = self.model.get_pymongo_collection()
        cursor = collection.find({"owner_id": owner_id}, {"_id": 1, "parent_id": 1})
        return {str(doc["_id"]): doc.get("parent_id") async for doc in cursor}

    async def mark_deleted(self, ids: Iterable[str], deleted_at: datetime) -> int:
        """Stamp not-yet-deleted nodes with one deletion timestamp, returns rows changed"""
        object_ids = [oid for oid in (to_object_id(i) for i in ids) if oid is not None]
        if not object_ids:
            return 0
        collection = self.model.get_pymongo_collection()
        result = await collection.update_many(
            {"_id": {"$in": object_ids}, "is_deleted": False},
            {"$set": {"is_deleted": True, "deleted_at": deleted_at, "updated_at": deleted_at}},
        )
        return result.modified_count

    async def search_by_name(
        self, owner_id: str, term: str, node_type: Optional[NodeType] = None
    ) -> List[Node]:
        """Case-insensitive substring match on name, newest first"""
        query = {
            "owner_id": owner_id,
            "is_deleted": False,
            "name": {"$regex": re.escape(term), "$options": "i"},
        }
        if node_type:
            query["node_type"] = node_type.value
        return await self.model.find(query).sort(RECENT_SORT).to_list()

    async def recent_files(self, owner_id: str, limit: int = 20) -> List[Node]:
        query = {"owner_id": owner_id, "node_type": NodeType.FILE.value, "is_deleted": False}
        return await self.model.find(query).sort(RECENT_SORT).limit(limit).to_list()

    async def list_by_type(
        self, owner_id: str, node_type: NodeType, skip: int = 0, limit: int = 10
    ) -> List[Node]:
        query = {"owner_id": owner_id, "node_type": node_type.value, "is_deleted": False}
        cursor = self.model.find(query).sort([("name", ASCENDING)])
        return await cursor.skip(skip).limit(limit).to_list()

    async def count_by_type(self, owner_id: str, node_type: NodeType) -> int:
        query = {"owner_id": owner_id, "node_type": node_type.value, "is_deleted": False}
        return await self.model.find(query).count()

    async def list_trash(self, owner_id: str, skip: int = 0, limit: int = 10) -> List[Node]:
        query = {"owner_id": owner_id, "is_deleted": True}
        cursor = self.model.find(query).sort([("deleted_at", DESCENDING)])
        return await cursor.skip(skip).limit(limit).to_list()

    async def count_trash(self, owner_id: str) -> int:
        return await self.model.find({"owner_id": owner_id, "is_deleted": True}).count()

    async def get_visible_many(self, ids: Iterable[str]) -> List[Node]:
        """Non-deleted nodes among ids, newest first"""
        object_ids = [oid for oid in (to_object_id(i) for i in ids) if oid is not None]
        if not object_ids:
            return []
        query = {"_id": {"$in": object_ids}, "is_deleted": False}
        return await self.model.find(query).sort(RECENT_SORT).to_list()


node_crud = NodeCRUD()
