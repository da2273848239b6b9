from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel

from filevault.models.time_mixin import TimeMixin


class Star(Document, TimeMixin):
    owner_id: str = Field(..., description="Account that starred the file")
    file_id: str = Field(..., description="Starred file node")

    class Settings:
        name = "stars"
        indexes = [
            IndexModel([("owner_id", ASCENDING), ("file_id", ASCENDING)], unique=True),
        ]
