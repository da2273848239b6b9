from typing import Annotated
from beanie import Document, Indexed
from pydantic import Field

from filevault.models.time_mixin import TimeMixin


class PublicLink(Document, TimeMixin):
    node_id: Annotated[str, Indexed(str)] = Field(..., description="Node exposed by the link")
    token: Annotated[str, Indexed(str, unique=True)] = Field(..., description="128-bit hex token")
    owner_id: str = Field(..., description="Account that created the link")

    class Settings:
        name = "public_links"
