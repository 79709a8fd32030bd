from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from rewear.core.pagination import paginate
from rewear.deps import get_current_user, parse_object_id
from rewear.models.user import User
from rewear.services import items as items_service

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def item_create(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    type: str = Form(...),
    size: str = Form(...),
    condition: str = Form(...),
    tags: str | None = Form(None),
    images: list[UploadFile] = File(default=[]),
    user: User = Depends(get_current_user),
):
    """List an item for swap; it stays pending until an admin approves it."""
    uploads = [
        items_service.ImageUpload(
            filename=f.filename or "image",
            content_type=f.content_type,
            content=await f.read(),
        )
        for f in images
    ]
    item = await items_service.create_item(
        user,
        title=title,
        description=description,
        category=category,
        type=type,
        size=size,
        condition=condition,
        tags=tags,
        images=uploads,
    )
    return items_service.public_item(item)


@router.get("")
async def items_list(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """Approved items still open for swap."""
    limit, offset = paginate(limit, offset)
    items = await items_service.list_available_items(limit=limit, offset=offset)
    return [items_service.public_item(i) for i in items]


@router.get("/{item_id}")
async def item_get(item_id: str):
    item = await items_service.get_item(parse_object_id(item_id, "Item"))
    return items_service.public_item(item)
