from datetime import datetime
from typing import Literal

from beanie import Document, PydanticObjectId
from pydantic import Field

SwapType = Literal["points", "direct"]
SwapStatus = Literal["pending", "accepted", "rejected", "completed"]


class SwapRequest(Document):
    """A request to take an item, settled in points when completed."""
    requester_id: PydanticObjectId
    item_id: PydanticObjectId
    swap_type: SwapType
    status: SwapStatus = "pending"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "swap_requests"
        indexes = [
            [("requester_id", 1), ("created_at", -1)],
            [("item_id", 1)],
        ]
