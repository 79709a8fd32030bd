import certifi
from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from rewear.core.config import get_settings
from rewear.models.item import Item
from rewear.models.swap_request import SwapRequest
from rewear.models.user import User

DOCUMENT_MODELS = [
    User,
    Item,
    SwapRequest,
]


def _use_tls(uri: str) -> bool:
    """True if URI uses TLS (Atlas or explicit tls=true). Avoids TLS for plain mongodb:// in CI."""
    return "mongodb+srv://" in uri or "tls=true" in uri.lower()


async def init_db(database=None) -> None:
    """Bind document models to `database`, or to the configured MongoDB when omitted."""
    if database is None:
        settings = get_settings()
        kwargs = {}
        if _use_tls(settings.mongodb_uri):
            kwargs["tlsCAFile"] = certifi.where()
            kwargs["tlsDisableOCSPEndpointCheck"] = True
        client = AsyncIOMotorClient(settings.mongodb_uri, **kwargs)
        database = client[settings.mongodb_db_name]
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
