from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime

from filevault.consts.node_type import PermissionLevel


class ShareEntry(BaseModel):
    user_id: str = Field(..., min_length=1, description="Grantee account")
    permission: PermissionLevel = Field(PermissionLevel.READ, description="read, write or comment")


class ShareRequest(BaseModel):
    users: List[ShareEntry] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "users": [
                    {"user_id": "user_2xyz", "permission": "read"},
                    {"user_id": "user_3def", "permission": "write"}
                ]
            }
        }
    )


class PermissionCreate(BaseModel):
    node_id: str
    owner_id: str
    shared_with: str
    level: PermissionLevel


class PermissionUpdateRequest(BaseModel):
    permission: PermissionLevel


class PermissionResponse(BaseModel):
    id: str
    node_id: str
    owner_id: str
    shared_with: str
    level: PermissionLevel
    created_at: datetime

    @classmethod
    def from_grant(cls, grant) -> "PermissionResponse":
        return cls(
            id=str(grant.id),
            node_id=grant.node_id,
            owner_id=grant.owner_id,
            shared_with=grant.shared_with,
            level=grant.level,
            created_at=grant.created_at,
        )
