"""Shared FastAPI dependencies."""

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rewear.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from rewear.core.logging import bind_user_id
from rewear.core.security import load_access_token
from rewear.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """Dependency: verify bearer token and return User."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access token required")
    payload = load_access_token(credentials.credentials)
    if not payload:
        raise UnauthorizedError("Invalid or expired token")
    user_id = payload.get("user_id")
    if not user_id:
        raise UnauthorizedError("Invalid token")
    try:
        user = await User.get(PydanticObjectId(user_id))
    except InvalidId:
        raise UnauthorizedError("Invalid token") from None
    if not user:
        raise UnauthorizedError("User not found")
    bind_user_id(str(user.id))
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency: require current user to have role admin."""
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def parse_object_id(value: str, what: str = "Resource") -> PydanticObjectId:
    """Path ids that are not valid ObjectIds cannot resolve to anything."""
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        raise NotFoundError(f"{what} not found") from None
