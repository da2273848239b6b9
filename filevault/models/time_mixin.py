from datetime import datetime
from pydantic import BaseModel, Field


class TimeMixin(BaseModel):
    created_at: datetime = Field(
        default_factory=datetime.utcnow, description="Creation timestamp")
    updated_at: datetime = Field(
        default_factory=datetime.utcnow, description="Last update timestamp")
