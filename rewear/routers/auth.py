from fastapi import APIRouter, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from rewear.services import users as user_service

router = APIRouter()

# bcrypt only looks at the first 72 bytes and bcrypt>=5 refuses longer input
MAX_PASSWORD_BYTES = 72


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return user_service.normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_bytes(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def auth_register(body: RegisterRequest):
    """Create an account with the starting points balance; return a bearer token."""
    user = await user_service.register_user(body.email, body.password, body.name)
    return {"token": user_service.token_for_user(user), "user": user_service.public_user(user)}


@router.post("/login")
async def auth_login(body: LoginRequest):
    user = await user_service.authenticate(body.email, body.password)
    return {"token": user_service.token_for_user(user), "user": user_service.public_user(user)}
