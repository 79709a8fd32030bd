import mimetypes

from fastapi import APIRouter, Response

from rewear.core.exceptions import NotFoundError
from rewear.storage.base import get_storage

router = APIRouter()


@router.get("/{key:path}")
async def upload_get(key: str):
    """Serve a stored item image."""
    try:
        content = await get_storage().get(key)
    except FileNotFoundError:
        raise NotFoundError("File not found") from None
    media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return Response(content=content, media_type=media_type)
