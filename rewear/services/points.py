"""User point balances: guarded single-document updates on the users collection."""

from datetime import datetime

from beanie import PydanticObjectId

from rewear.core.exceptions import BadRequestError, NotFoundError
from rewear.models.user import User


async def get_balance(user_id: PydanticObjectId) -> int:
    user = await User.get(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user.points


async def debit(user_id: PydanticObjectId, amount: int) -> bool:
    """
    Subtract `amount` only if the balance covers it.
    Returns False (and changes nothing) when the balance is short or the user is gone.
    """
    if amount < 0:
        raise BadRequestError("Debit amount must be non-negative")
    result = await User.get_motor_collection().update_one(
        {"_id": user_id, "points": {"$gte": amount}},
        {"$inc": {"points": -amount}, "$set": {"updated_at": datetime.utcnow()}},
    )
    return result.modified_count == 1


async def credit(user_id: PydanticObjectId, amount: int) -> None:
    if amount < 0:
        raise BadRequestError("Credit amount must be non-negative")
    result = await User.get_motor_collection().update_one(
        {"_id": user_id},
        {"$inc": {"points": amount}, "$set": {"updated_at": datetime.utcnow()}},
    )
    if result.matched_count != 1:
        raise NotFoundError("User not found")
