"""Caller identity supplied by the authentication collaborator."""

from enum import Enum

from pydantic import BaseModel


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class Caller(BaseModel):
    """Authenticated caller of a ledger operation."""

    user_id: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
