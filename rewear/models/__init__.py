from rewear.models.user import Role, User
from rewear.models.item import Item
from rewear.models.swap_request import SwapRequest

__all__ = [
    "Role",
    "User",
    "Item",
    "SwapRequest",
]
