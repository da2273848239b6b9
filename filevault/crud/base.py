from datetime import datetime
from typing import Any, Dict, Generic, Optional, Type, TypeVar
from bson import ObjectId
from bson.errors import InvalidId
from beanie import Document
from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=Document)
CreateSchemaT = TypeVar("CreateSchemaT", bound=BaseModel)
UpdateSchemaT = TypeVar("UpdateSchemaT", bound=BaseModel)


def to_object_id(id: str) -> Optional[ObjectId]:
    """Parse a client-supplied id, None when it is not a valid ObjectId"""
    try:
        return ObjectId(id)
    except (InvalidId, TypeError):
        return None


class BaseCRUD(Generic[ModelT, CreateSchemaT, UpdateSchemaT]):
    def __init__(self, model: Type[ModelT]):
        self.model = model

    def _soft_deletable(self) -> bool:
        return "is_deleted" in self.model.model_fields

    async def get_by_id(self, id: str) -> Optional[ModelT]:
        """Document by id, trashed ones included; None for malformed ids"""
        oid = to_object_id(id)
        if oid is None:
            return None
        return await self.model.find_one({"_id": oid})

    async def create(self, obj_in: CreateSchemaT) -> ModelT:
        data = obj_in.model_dump()
        if self._soft_deletable():
            data.setdefault("is_deleted", False)
            data.setdefault("deleted_at", None)
        db_obj = self.model(**data)
        await db_obj.insert()
        return db_obj

    async def update(
        self,
        db_obj: ModelT,
        obj_in: UpdateSchemaT | Dict[str, Any],
    ) -> ModelT:
        if isinstance(obj_in, BaseModel):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = {k: v for k, v in obj_in.items() if v is not None}

        if "updated_at" in db_obj.model_fields:
            update_data["updated_at"] = datetime.utcnow()

        await db_obj.set(update_data)
        return db_obj

    async def delete(self, db_obj: ModelT) -> None:
        await db_obj.delete()
