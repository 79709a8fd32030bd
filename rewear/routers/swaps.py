from typing import Literal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from rewear.deps import get_current_user, parse_object_id
from rewear.models.user import User
from rewear.services import swaps as swaps_service

router = APIRouter()


class SwapCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(alias="itemId")
    swap_type: Literal["points", "direct"] = Field(alias="swapType")


class SwapStatusUpdate(BaseModel):
    status: Literal["accepted", "rejected", "completed"]


@router.post("", status_code=status.HTTP_201_CREATED)
async def swap_create(body: SwapCreate, user: User = Depends(get_current_user)):
    """Request an item. Points swaps debit the price immediately."""
    swap = await swaps_service.create_swap(user, parse_object_id(body.item_id, "Item"), body.swap_type)
    return swaps_service.public_swap(swap)


@router.put("/{swap_id}/status")
async def swap_update_status(
    swap_id: str,
    body: SwapStatusUpdate,
    user: User = Depends(get_current_user),
):
    """Item owner or admin: accept, reject or complete a swap. Completion settles points."""
    swap = await swaps_service.update_swap_status(user, parse_object_id(swap_id, "Swap request"), body.status)
    return swaps_service.public_swap(swap)
