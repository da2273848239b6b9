from typing import List, Optional

from pymongo.errors import DuplicateKeyError

from filevault.crud.base import BaseCRUD
from filevault.models.star import Star
from pydantic import BaseModel


class StarCreate(BaseModel):
    owner_id: str
    file_id: str


class StarCRUD(BaseCRUD[Star, StarCreate, StarCreate]):
    def __init__(self):
        super().__init__(Star)

    async def get_star(self, owner_id: str, file_id: str) -> Optional[Star]:
        return await self.model.find_one({"owner_id": owner_id, "file_id": file_id})

    async def add(self, owner_id: str, file_id: str) -> tuple[Star, bool]:
        """Insert a star unless one exists, returns (star, created)"""
        existing = await self.get_star(owner_id, file_id)
        if existing:
            return existing, False
        try:
            return await self.create(StarCreate(owner_id=owner_id, file_id=file_id)), True
        except DuplicateKeyError:
            # Lost a race with a concurrent star of the same file
            return await self.get_star(owner_id, file_id), False

    async def remove(self, owner_id: str, file_id: str) -> int:
        collection = self.model.get_pymongo_collection()
        result = await collection.delete_many({"owner_id": owner_id, "file_id": file_id})
        return result.deleted_count

    async def list_file_ids(self, owner_id: str) -> List[str]:
        stars = await self.model.find({"owner_id": owner_id}).to_list()
        return [star.file_id for star in stars]


star_crud = StarCRUD()
