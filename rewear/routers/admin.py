from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rewear.deps import parse_object_id, require_admin
from rewear.models.user import User
from rewear.services import items as items_service

router = APIRouter()


class ModerationUpdate(BaseModel):
    status: Literal["approved", "rejected"]


@router.get("/pending-items")
async def admin_pending_items(user: User = Depends(require_admin)):
    """Admin: items awaiting moderation, oldest first."""
    items = await items_service.list_pending_items()
    return [items_service.public_item(i) for i in items]


@router.put("/items/{item_id}/status")
async def admin_item_status(
    item_id: str,
    body: ModerationUpdate,
    user: User = Depends(require_admin),
):
    """Admin: approve or reject a listing."""
    item = await items_service.set_moderation_status(parse_object_id(item_id, "Item"), body.status, user.id)
    return items_service.public_item(item)


@router.delete("/items/{item_id}")
async def admin_item_delete(item_id: str, user: User = Depends(require_admin)):
    """Admin: remove a listing and its images."""
    await items_service.delete_item(parse_object_id(item_id, "Item"), user.id)
    return {"message": "Item removed successfully"}
