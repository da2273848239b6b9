from typing import List, Optional, Annotated
from beanie import Document, Indexed
from pydantic import BaseModel, Field

from filevault.models.time_mixin import TimeMixin


class UploadedPart(BaseModel):
    part_number: int = Field(..., ge=1)
    etag: str


class TargetMetadata(BaseModel):
    name: Optional[str] = None
    size_bytes: Optional[int] = None
    mime_type: Optional[str] = None


class UploadSession(Document, TimeMixin):
    """In-flight multipart upload and the parts acknowledged so far"""

    upload_id: Annotated[str, Indexed(str, unique=True)] = Field(..., description="Object store upload id")
    storage_key: str = Field(..., description="Object key the parts assemble into")
    owner_id: Optional[str] = Field(None, description="Uploading account")
    parts: List[UploadedPart] = Field(default_factory=list)
    target_metadata: TargetMetadata = Field(default_factory=TargetMetadata)

    class Settings:
        name = "upload_sessions"
