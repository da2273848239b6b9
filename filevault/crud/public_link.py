from typing import Optional

from filevault.crud.base import BaseCRUD
from filevault.models.public_link import PublicLink
from filevault.schemas.public_link import PublicLinkCreate


class PublicLinkCRUD(BaseCRUD[PublicLink, PublicLinkCreate, PublicLinkCreate]):
    def __init__(self):
        super().__init__(PublicLink)

    async def get_by_node(self, node_id: str) -> Optional[PublicLink]:
        """Oldest link of the node, treated as canonical"""
        links = await self.model.find({"node_id": node_id}).sort([("created_at", 1)]).limit(1).to_list()
        return links[0] if links else None

    async def get_by_token(self, token: str) -> Optional[PublicLink]:
        return await self.model.find_one({"token": token})


public_link_crud = PublicLinkCRUD()
