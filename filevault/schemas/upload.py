from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional


class InitiateUploadRequest(BaseModel):
    name: str = Field(..., min_length=1, description="File name")
    size_bytes: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = None


class InitiateUploadResponse(BaseModel):
    upload_id: str
    key: str


class ChunkResponse(BaseModel):
    etag: str = Field(..., alias="ETag")
    part_number: int = Field(..., alias="PartNumber")

    model_config = ConfigDict(populate_by_name=True)


class CompletedPart(BaseModel):
    etag: str = Field(..., alias="ETag")
    part_number: int = Field(..., ge=1, alias="PartNumber")

    model_config = ConfigDict(populate_by_name=True)


class CompleteUploadRequest(BaseModel):
    upload_id: Optional[str] = Field(None, alias="uploadId")
    key: Optional[str] = None
    parts: List[CompletedPart] = Field(default_factory=list)
    name: Optional[str] = Field(None, description="Display name, defaults to the key's last segment")
    size_bytes: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = None
    parent_id: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "uploadId": "2~abc",
                "key": "user_2abc/0b6c..._video.mp4",
                "parts": [{"ETag": "\"9b2cf535f27731c974343645a3985328\"", "PartNumber": 1}],
                "name": "video.mp4",
                "size_bytes": 10485760,
                "mime_type": "video/mp4"
            }
        }
    )


class CompleteUploadResponse(BaseModel):
    file_id: str = Field(..., alias="fileId")
    location: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
