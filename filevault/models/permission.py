from typing import Annotated
from beanie import Document, Indexed
from pydantic import Field

from filevault.consts.node_type import PermissionLevel
from filevault.models.time_mixin import TimeMixin


class Permission(Document, TimeMixin):
    """Recorded share of a node with another account"""

    node_id: Annotated[str, Indexed(str)] = Field(..., description="Shared node")
    owner_id: str = Field(..., description="Account that granted the share")
    shared_with: Annotated[str, Indexed(str)] = Field(..., description="Grantee account")
    level: PermissionLevel = Field(PermissionLevel.READ, description="read, write or comment")

    class Settings:
        name = "permissions"
