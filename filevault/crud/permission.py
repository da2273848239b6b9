from typing import List

from filevault.crud.base import BaseCRUD
from filevault.models.permission import Permission
from filevault.schemas.permission import PermissionCreate


class PermissionCRUD(BaseCRUD[Permission, PermissionCreate, PermissionCreate]):
    def __init__(self):
        super().__init__(Permission)

    async def list_by_node(self, node_id: str) -> List[Permission]:
        return await self.model.find({"node_id": node_id}).sort([("created_at", 1)]).to_list()


permission_crud = PermissionCRUD()
