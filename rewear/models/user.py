from datetime import datetime
from enum import Enum

from beanie import Document, Indexed
from pydantic import Field


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(Document):
    email: Indexed(str, unique=True)
    password_hash: str
    name: str = ""
    role: Role = Role.USER
    points: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
