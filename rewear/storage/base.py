import re
from abc import ABC, abstractmethod
from typing import BinaryIO

from rewear.core.config import get_settings

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    """Reduce an uploaded filename to a single safe path segment."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_CHARS.sub("-", name).strip(".-")
    return name or "upload"


class StorageBackend(ABC):
    @abstractmethod
    async def put(self, key: str, body: BinaryIO | bytes, content_type: str | None = None) -> str:
        """Store file under key; return path or URI."""
        ...

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Retrieve file bytes. Raises FileNotFoundError for unknown keys."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete file; unknown keys are ignored."""
        ...


def get_storage() -> StorageBackend:
    settings = get_settings()
    if settings.storage_backend != "local":
        raise ValueError(f"Unsupported storage backend: {settings.storage_backend}")
    from rewear.storage.local import LocalStorage
    return LocalStorage(settings.storage_local_path)
