from typing import Optional, Annotated
from beanie import Document, Indexed
from pydantic import Field
from pymongo import ASCENDING, DESCENDING, IndexModel

from filevault.consts.node_type import NodeType
from filevault.models.time_mixin import TimeMixin
from filevault.models.soft_delete_mixin import SoftDeleteMixin


class Node(Document, TimeMixin, SoftDeleteMixin):
    """A file or a folder in an owner's tree"""

    owner_id: Annotated[str, Indexed(str)] = Field(..., description="Account that owns the node")
    node_type: NodeType = Field(..., description="file or folder, fixed at creation")
    name: str = Field(..., min_length=1, description="Display name, duplicates allowed among siblings")
    parent_id: Optional[str] = Field(None, description="Containing folder id, None at the root")

    # File-only attributes
    size_bytes: Optional[int] = Field(None, ge=0, description="File size (bytes)")
    mime_type: Optional[str] = Field(None, description="File MIME type")
    storage_path: Optional[str] = Field(None, description="Object key in the storage bucket")

    class Settings:
        name = "nodes"
        indexes = [
            IndexModel([("owner_id", ASCENDING), ("parent_id", ASCENDING), ("is_deleted", ASCENDING)]),
            IndexModel([("owner_id", ASCENDING), ("updated_at", DESCENDING)]),
        ]
