from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from filevault.consts.node_type import NodeType


class NodeCreate(BaseModel):
    """Schema for inserting a node (internal use with all fields)"""
    owner_id: str = Field(..., description="Account that owns the node")
    node_type: NodeType = Field(..., description="file or folder")
    name: str = Field(..., min_length=1, description="Display name")
    parent_id: Optional[str] = Field(None, description="Containing folder id")
    size_bytes: Optional[int] = Field(None, ge=0, description="File size (bytes)")
    mime_type: Optional[str] = Field(None, description="File MIME type")
    storage_path: Optional[str] = Field(None, description="Object key in storage")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "owner_id": "user_2abc",
                "node_type": "file",
                "name": "report.pdf",
                "parent_id": "665f1c2b9d1e4a0012ab34cd",
                "size_bytes": 1024000,
                "mime_type": "application/pdf",
                "storage_path": "user_2abc/1718000000000_report.pdf"
            }
        }
    )


class FolderCreateRequest(BaseModel):
    name: str = Field(..., description="Folder name")
    parent_id: Optional[str] = Field(None, description="Parent folder id, omit for root")


class RenameRequest(BaseModel):
    name: str = Field(..., description="New display name")


class MoveRequest(BaseModel):
    target_folder_id: Optional[str] = Field(None, description="Destination folder id")


class CopyRequest(BaseModel):
    parent_id: Optional[str] = Field(None, description="Destination folder, defaults to the source's parent")


class NodeResponse(BaseModel):
    """Schema for returning node information"""
    id: str = Field(..., description="Unique node identifier")
    owner_id: str = Field(..., description="Account that owns the node")
    node_type: NodeType = Field(..., description="file or folder")
    name: str = Field(..., description="Display name")
    parent_id: Optional[str] = Field(None, description="Containing folder id")
    size_bytes: Optional[int] = Field(None, description="File size in bytes")
    mime_type: Optional[str] = Field(None, description="File MIME type")
    storage_path: Optional[str] = Field(None, description="Object key in storage")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
    deleted_at: Optional[datetime] = Field(None, description="Trash timestamp")

    @classmethod
    def from_node(cls, node) -> "NodeResponse":
        return cls(
            id=str(node.id),
            owner_id=node.owner_id,
            node_type=node.node_type,
            name=node.name,
            parent_id=node.parent_id,
            size_bytes=node.size_bytes,
            mime_type=node.mime_type,
            storage_path=node.storage_path,
            created_at=node.created_at,
            updated_at=node.updated_at,
            deleted_at=node.deleted_at,
        )


class DeleteResult(BaseModel):
    node_id: str
    deleted_at: datetime
    affected: int = Field(..., description="Nodes moved to trash, the target included")


class SignedUrlResponse(BaseModel):
    url: str
    expires_in: int = Field(..., description="Validity in seconds")
