from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Identity store interface.

    Note: the service layer depends on this interface, never on a concrete DB.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        display_name: str,
        password_hash: str,
        role: str,
        created_at: datetime,
    ) -> str:
        raise NotImplementedError

    def update_role(self, user_id: str, role: str) -> bool:
        raise NotImplementedError
