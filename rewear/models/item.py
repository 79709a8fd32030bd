from datetime import datetime
from typing import Literal

from beanie import Document, PydanticObjectId
from pydantic import Field

ModerationStatus = Literal["pending", "approved", "rejected"]


class Item(Document):
    owner_id: PydanticObjectId
    title: str
    description: str
    category: str
    type: str
    size: str
    condition: str
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)  # storage keys
    status: ModerationStatus = "pending"
    available: bool = True  # flipped to False by a completed swap
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "items"
        indexes = [
            [("owner_id", 1), ("created_at", -1)],
            [("status", 1), ("available", 1)],
        ]

    @property
    def is_requestable(self) -> bool:
        return self.status == "approved" and self.available
