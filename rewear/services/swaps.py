"""
Swap requests and their settlement in points.

Status, availability and debit writes are single-document conditional
updates keyed by id, so two requests racing on the same swap or item cannot
both win. Completing a swap claims the swap, then the item, then takes the
debits and credits; if one of those loses a race or its account has vanished,
the steps already taken are handed back before the error is raised. Balances are checked before any write.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable

from beanie import PydanticObjectId
from beanie.operators import In

from rewear.core.config import Settings, get_settings
from rewear.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InsufficientFundsError,
    InvalidTransitionError,
    ItemUnavailableError,
    NotFoundError,
    StatusUnchangedError,
)
from rewear.core.logging import get_logger
from rewear.models.item import Item
from rewear.models.swap_request import SwapRequest
from rewear.models.user import User
from rewear.services import points as points_service
from rewear.services.users import get_platform_admin

log = get_logger(__name__)

SWAP_TYPES = ("points", "direct")
TARGET_STATUSES = ("accepted", "rejected", "completed")

# rejected and completed are terminal
TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"accepted", "rejected", "completed"}),
    "accepted": frozenset({"rejected", "completed"}),
    "rejected": frozenset(),
    "completed": frozenset(),
}


@dataclass(frozen=True)
class Settlement:
    """Point movements for one completed swap."""
    requester_debit: int
    owner_debit: int
    owner_credit: int
    admin_credit: int


def compute_settlement(swap_type: str, settings: Settings | None = None) -> Settlement:
    s = settings or get_settings()
    if swap_type == "points":
        value = s.points_swap_price
        fee = value * s.platform_fee_percent // 100
        return Settlement(
            requester_debit=value,
            owner_debit=0,
            owner_credit=value - fee,
            admin_credit=fee * s.platform_fee_multiplier,
        )
    if swap_type == "direct":
        fee = s.direct_swap_fee
        admin_fee = max(s.direct_swap_min_admin_fee, fee * s.platform_fee_percent // 100)
        return Settlement(
            requester_debit=fee,
            owner_debit=fee,
            owner_credit=0,
            admin_credit=admin_fee * s.platform_fee_multiplier,
        )
    raise BadRequestError(f"Invalid swap type: {swap_type}")


async def create_swap(requester: User, item_id: PydanticObjectId, swap_type: str) -> SwapRequest:
    """Open a pending swap on an item. Points swaps pay the price up front."""
    if swap_type not in SWAP_TYPES:
        raise BadRequestError(f"Invalid swap type: {swap_type}")
    item = await Item.get(item_id)
    if not item:
        raise NotFoundError("Item not found")
    if not item.is_requestable:
        raise ItemUnavailableError()
    if item.owner_id == requester.id:
        raise BadRequestError("Cannot request a swap for your own item")

    charged = 0
    if swap_type == "points":
        price = get_settings().points_swap_price
        if requester.points < price or not await points_service.debit(requester.id, price):
            raise InsufficientFundsError(details={"required": price})
        charged = price

    swap = SwapRequest(requester_id=requester.id, item_id=item.id, swap_type=swap_type)
    try:
        await swap.insert()
    except Exception:
        if charged:
            await points_service.credit(requester.id, charged)
        raise
    log.info(
        "swap_created",
        swap_id=str(swap.id),
        item_id=str(item.id),
        swap_type=swap_type,
        charged=charged,
    )
    return swap


async def get_swap(swap_id: PydanticObjectId) -> SwapRequest:
    swap = await SwapRequest.get(swap_id)
    if not swap:
        raise NotFoundError("Swap request not found")
    return swap


async def list_user_swaps(requester_id: PydanticObjectId) -> list[SwapRequest]:
    return await SwapRequest.find(SwapRequest.requester_id == requester_id).sort(-SwapRequest.created_at).to_list()


async def list_incoming_swaps(owner_id: PydanticObjectId) -> list[SwapRequest]:
    """Swaps requested against items the user owns."""
    items = await Item.find(Item.owner_id == owner_id).to_list()
    if not items:
        return []
    return (
        await SwapRequest.find(In(SwapRequest.item_id, [i.id for i in items]))
        .sort(-SwapRequest.created_at)
        .to_list()
    )


async def update_swap_status(actor: User, swap_id: PydanticObjectId, target: str) -> SwapRequest:
    """
    Move a swap to accepted, rejected or completed.
    Only the item owner or an admin may do this; completing settles points.
    """
    if target not in TARGET_STATUSES:
        raise BadRequestError(f"Invalid status: {target}")
    swap = await get_swap(swap_id)
    item = await Item.get(swap.item_id)
    if not item:
        raise NotFoundError("Item not found")
    if swap.status == target:
        raise StatusUnchangedError(target)
    if actor.id != item.owner_id and not actor.is_admin:
        raise ForbiddenError("Only the item owner or an admin can update this swap")
    if target not in TRANSITIONS[swap.status]:
        raise InvalidTransitionError(swap.status, target)

    if target == "completed":
        await _settle(swap, item)
    else:
        if not await _compare_and_set_status(swap.id, swap.status, target):
            raise ConflictError("Swap was updated concurrently")
    log.info("swap_status_changed", swap_id=str(swap.id), previous=swap.status, status=target, actor_id=str(actor.id))
    return await get_swap(swap.id)


async def _settle(swap: SwapRequest, item: Item) -> None:
    requester = await User.get(swap.requester_id)
    if not requester:
        raise NotFoundError("Requester not found")
    owner = await User.get(item.owner_id)
    if not owner:
        raise NotFoundError("Item owner not found")
    admin = await get_platform_admin()

    if not item.available:
        raise ItemUnavailableError()
    plan = compute_settlement(swap.swap_type)
    if requester.points < plan.requester_debit:
        raise InsufficientFundsError(
            "Requester has insufficient points",
            details={"required": plan.requester_debit, "party": "requester"},
        )
    if owner.points < plan.owner_debit:
        raise InsufficientFundsError(
            "Item owner has insufficient points",
            details={"required": plan.owner_debit, "party": "owner"},
        )

    undo: list[Callable[[], Awaitable]] = []
    try:
        if not await _compare_and_set_status(swap.id, swap.status, "completed"):
            raise ConflictError("Swap was updated concurrently")
        undo.append(lambda: _compare_and_set_status(swap.id, "completed", swap.status))

        if not await _claim_item(item.id):
            raise ItemUnavailableError()
        undo.append(lambda: _release_item(item.id))

        for party, user_id, amount in (
            ("requester", requester.id, plan.requester_debit),
            ("owner", owner.id, plan.owner_debit),
        ):
            if not amount:
                continue
            if not await points_service.debit(user_id, amount):
                raise InsufficientFundsError(details={"required": amount, "party": party})
            undo.append(lambda user_id=user_id, amount=amount: points_service.credit(user_id, amount))

        for user_id, amount in ((owner.id, plan.owner_credit), (admin.id, plan.admin_credit)):
            if not amount:
                continue
            await points_service.credit(user_id, amount)
            undo.append(lambda user_id=user_id, amount=amount: points_service.debit(user_id, amount))
    except (ConflictError, ItemUnavailableError, InsufficientFundsError, NotFoundError) as e:
        for step in reversed(undo):
            await step()
        log.warning("settlement_reverted", swap_id=str(swap.id), reason=e.code, steps=len(undo))
        raise

    log.info(
        "swap_settled",
        swap_id=str(swap.id),
        item_id=str(item.id),
        swap_type=swap.swap_type,
        requester_debit=plan.requester_debit,
        owner_debit=plan.owner_debit,
        owner_credit=plan.owner_credit,
        admin_credit=plan.admin_credit,
    )


async def _compare_and_set_status(swap_id: PydanticObjectId, expected: str, status: str) -> bool:
    result = await SwapRequest.get_motor_collection().update_one(
        {"_id": swap_id, "status": expected},
        {"$set": {"status": status, "updated_at": datetime.utcnow()}},
    )
    return result.modified_count == 1


async def _claim_item(item_id: PydanticObjectId) -> bool:
    result = await Item.get_motor_collection().update_one(
        {"_id": item_id, "available": True},
        {"$set": {"available": False, "updated_at": datetime.utcnow()}},
    )
    return result.modified_count == 1


async def _release_item(item_id: PydanticObjectId) -> None:
    await Item.get_motor_collection().update_one(
        {"_id": item_id},
        {"$set": {"available": True, "updated_at": datetime.utcnow()}},
    )


def public_swap(swap: SwapRequest) -> dict:
    return {
        "id": str(swap.id),
        "requester_id": str(swap.requester_id),
        "item_id": str(swap.item_id),
        "swap_type": swap.swap_type,
        "status": swap.status,
        "created_at": swap.created_at.isoformat(),
        "updated_at": swap.updated_at.isoformat(),
    }
