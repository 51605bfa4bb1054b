"""Document schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class DocumentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: str
    file_url: str
    file_size: Optional[int] = None


class DocumentRead(DocumentCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime
