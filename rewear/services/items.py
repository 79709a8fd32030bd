"""Item listings, image uploads and moderation."""

from dataclasses import dataclass
from datetime import datetime

from beanie import PydanticObjectId

from rewear.core.config import get_settings
from rewear.core.exceptions import BadRequestError, NotFoundError
from rewear.core.logging import get_logger
from rewear.models.item import Item
from rewear.models.user import User
from rewear.storage.base import get_storage, safe_filename

log = get_logger(__name__)

MODERATION_STATUSES = ("approved", "rejected")


@dataclass
class ImageUpload:
    filename: str
    content_type: str | None
    content: bytes


def parse_tags(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def validate_images(images: list[ImageUpload]) -> None:
    settings = get_settings()
    if len(images) > settings.max_images_per_item:
        raise BadRequestError(f"At most {settings.max_images_per_item} images per item")
    for img in images:
        if not (img.content_type or "").startswith("image/"):
            raise BadRequestError("Only image files are allowed!", details={"filename": img.filename})
        if len(img.content) > settings.max_image_bytes:
            raise BadRequestError("File too large", details={"filename": img.filename})


async def create_item(
    owner: User,
    *,
    title: str,
    description: str,
    category: str,
    type: str,
    size: str,
    condition: str,
    tags: str | None = None,
    images: list[ImageUpload] | None = None,
) -> Item:
    """Store uploaded images and create a listing awaiting moderation."""
    images = images or []
    validate_images(images)
    fields = {
        "title": title,
        "description": description,
        "category": category,
        "type": type,
        "size": size,
        "condition": condition,
    }
    fields = {k: (v or "").strip() for k, v in fields.items()}
    missing = [k for k, v in fields.items() if not v]
    if missing:
        raise BadRequestError("Missing required fields", details={"fields": missing})

    storage = get_storage()
    stamp = datetime.utcnow().strftime("%Y%m%d%H%M%S%f")
    keys = []
    for i, img in enumerate(images):
        key = f"items/{owner.id}/{stamp}-{i}-{safe_filename(img.filename)}"
        await storage.put(key, img.content, content_type=img.content_type)
        keys.append(key)

    item = Item(owner_id=owner.id, tags=parse_tags(tags), images=keys, **fields)
    await item.insert()
    log.info("item_created", item_id=str(item.id), images=len(keys))
    return item


async def get_item(item_id: PydanticObjectId) -> Item:
    item = await Item.get(item_id)
    if not item:
        raise NotFoundError("Item not found")
    return item


async def list_available_items(limit: int = 50, offset: int = 0) -> list[Item]:
    """Approved items that can still be requested, newest first."""
    return (
        await Item.find(Item.status == "approved", Item.available == True)  # noqa: E712 (Beanie query expr)
        .sort(-Item.created_at)
        .skip(offset)
        .limit(limit)
        .to_list()
    )


async def list_user_items(owner_id: PydanticObjectId) -> list[Item]:
    return await Item.find(Item.owner_id == owner_id).sort(-Item.created_at).to_list()


async def list_pending_items() -> list[Item]:
    return await Item.find(Item.status == "pending").sort(Item.created_at).to_list()


async def set_moderation_status(item_id: PydanticObjectId, status: str, admin_id: PydanticObjectId) -> Item:
    if status not in MODERATION_STATUSES:
        raise BadRequestError(f"Invalid status: {status}")
    item = await get_item(item_id)
    item.status = status
    item.updated_at = datetime.utcnow()
    await item.save()
    log.info("item_moderated", item_id=str(item.id), status=status, admin_id=str(admin_id))
    return item


async def delete_item(item_id: PydanticObjectId, admin_id: PydanticObjectId) -> None:
    """Remove a listing and its stored images."""
    item = await get_item(item_id)
    storage = get_storage()
    for key in item.images:
        await storage.delete(key)
    await item.delete()
    log.info("item_removed", item_id=str(item_id), admin_id=str(admin_id))


def public_item(item: Item) -> dict:
    return {
        "id": str(item.id),
        "owner_id": str(item.owner_id),
        "title": item.title,
        "description": item.description,
        "category": item.category,
        "type": item.type,
        "size": item.size,
        "condition": item.condition,
        "tags": item.tags,
        "images": item.images,
        "status": item.status,
        "available": item.available,
        "created_at": item.created_at.isoformat(),
    }
