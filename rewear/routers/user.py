from fastapi import APIRouter, Depends

from rewear.deps import get_current_user
from rewear.models.user import User
from rewear.services import items as items_service
from rewear.services import swaps as swaps_service
from rewear.services import users as user_service

router = APIRouter()


@router.get("/profile")
async def user_profile(user: User = Depends(get_current_user)):
    """Current user including points balance."""
    return user_service.public_user(user)


@router.get("/items")
async def user_items(user: User = Depends(get_current_user)):
    items = await items_service.list_user_items(user.id)
    return [items_service.public_item(i) for i in items]


@router.get("/swaps")
async def user_swaps(user: User = Depends(get_current_user)):
    """Swaps the current user has requested, newest first."""
    swaps = await swaps_service.list_user_swaps(user.id)
    return [swaps_service.public_swap(s) for s in swaps]


@router.get("/swaps/incoming")
async def user_incoming_swaps(user: User = Depends(get_current_user)):
    """Swaps requested against the current user's items."""
    swaps = await swaps_service.list_incoming_swaps(user.id)
    return [swaps_service.public_swap(s) for s in swaps]
