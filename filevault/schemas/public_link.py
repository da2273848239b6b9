from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from filevault.schemas.node import NodeResponse


class PublicLinkCreate(BaseModel):
    node_id: str
    token: str
    owner_id: str


class PublicLinkResponse(BaseModel):
    id: str
    node_id: str
    token: str
    url: str = Field(..., description="Shareable URL for the token")
    created_at: datetime


class PublicResourceResponse(BaseModel):
    node: NodeResponse
    download_url: Optional[str] = Field(None, description="Short-lived signed URL, files only")
