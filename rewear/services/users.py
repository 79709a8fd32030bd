from datetime import datetime

from pymongo.errors import DuplicateKeyError

from rewear.core.config import get_settings
from rewear.core.exceptions import BadRequestError, NotFoundError
from rewear.core.logging import get_logger
from rewear.core.security import create_access_token, hash_password, verify_password
from rewear.models.user import Role, User

log = get_logger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def register_user(email: str, password: str, name: str) -> User:
    """Create a user with the starting points allowance."""
    email = normalize_email(email)
    existing = await User.find_one(User.email == email)
    if existing:
        raise BadRequestError("User already exists")
    user = User(
        email=email,
        password_hash=hash_password(password),
        name=name.strip(),
        role=Role.USER,
        points=get_settings().starting_points,
    )
    try:
        await user.insert()
    except DuplicateKeyError as e:
        raise BadRequestError("User already exists") from e
    log.info("user_created", user_id=str(user.id), email=user.email)
    return user


async def authenticate(email: str, password: str) -> User:
    user = await User.find_one(User.email == normalize_email(email))
    if not user or not verify_password(password, user.password_hash):
        raise BadRequestError("Invalid credentials")
    log.info("user_login", user_id=str(user.id))
    return user


def token_for_user(user: User) -> str:
    return create_access_token({"user_id": str(user.id), "role": user.role.value})


def public_user(user: User) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.name,
        "points": user.points,
        "role": user.role.value,
    }


async def get_platform_admin() -> User:
    """The account that collects swap fees, identified by configuration."""
    admin = await User.find_one(User.email == normalize_email(get_settings().platform_admin_email))
    if not admin:
        raise NotFoundError("Platform admin account not found")
    return admin


async def ensure_platform_admin() -> tuple[User, bool]:
    """Create the configured platform admin if missing. Returns (user, created)."""
    settings = get_settings()
    email = normalize_email(settings.platform_admin_email)
    admin = await User.find_one(User.email == email)
    if admin:
        if admin.role != Role.ADMIN:
            admin.role = Role.ADMIN
            admin.updated_at = datetime.utcnow()
            await admin.save()
            log.warning("platform_admin_promoted", user_id=str(admin.id))
        return admin, False
    admin = User(
        email=email,
        password_hash=hash_password(settings.platform_admin_password),
        name=settings.platform_admin_name,
        role=Role.ADMIN,
        points=settings.platform_admin_starting_points,
    )
    await admin.insert()
    log.info("platform_admin_created", user_id=str(admin.id), email=admin.email)
    return admin, True
