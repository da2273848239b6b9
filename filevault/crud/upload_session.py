from typing import Optional

from filevault.crud.base import BaseCRUD
from filevault.models.upload_session import UploadSession, UploadedPart, TargetMetadata
from pydantic import BaseModel, Field


class UploadSessionCreate(BaseModel):
    upload_id: str
    storage_key: str
    owner_id: Optional[str] = None
    target_metadata: TargetMetadata = Field(default_factory=TargetMetadata)


class UploadSessionCRUD(BaseCRUD[UploadSession, UploadSessionCreate, UploadSessionCreate]):
    def __init__(self):
        super().__init__(UploadSession)

    async def get_by_upload_id(self, upload_id: str) -> Optional[UploadSession]:
        return await self.model.find_one({"upload_id": upload_id})

    async def record_part(self, session: UploadSession, part_number: int, etag: str) -> UploadSession:
        """Remember an acknowledged part, a re-sent part number replaces the earlier etag"""
        parts = [p for p in session.parts if p.part_number != part_number]
        parts.append(UploadedPart(part_number=part_number, etag=etag))
        parts.sort(key=lambda p: p.part_number)
        return await self.update(session, {"parts": [p.model_dump() for p in parts]})


upload_session_crud = UploadSessionCRUD()
