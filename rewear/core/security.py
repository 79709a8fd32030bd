import hashlib
from typing import Any

import bcrypt
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from rewear.core.config import get_settings


def get_token_serializer() -> URLSafeTimedSerializer:
    settings = get_settings()
    return URLSafeTimedSerializer(
        settings.secret_key,
        salt="rewear-access-token",
        signer_kwargs={"key_derivation": "hmac", "digest_method": hashlib.sha256},
    )


def create_access_token(payload: dict[str, Any]) -> str:
    serializer = get_token_serializer()
    return serializer.dumps(payload)


def load_access_token(token: str) -> dict[str, Any] | None:
    """Return the token payload, or None if the signature is bad or it has expired."""
    serializer = get_token_serializer()
    try:
        return serializer.loads(token, max_age=get_settings().token_max_age_seconds)
    except (BadSignature, SignatureExpired):
        return None


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False
