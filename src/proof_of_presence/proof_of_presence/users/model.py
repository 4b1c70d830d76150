from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Stored account (includes the password hash; never leaves the service layer)."""

    user_id: str
    email: str
    display_name: str
    password_hash: str
    role: str
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class UserProfile:
    """What callers get back after signup/login."""

    user_id: str
    email: str
    display_name: str
    role: str

    @classmethod
    def of(cls, user: User) -> "UserProfile":
        return cls(user_id=user.user_id, email=user.email, display_name=user.display_name, role=user.role)
