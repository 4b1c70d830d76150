from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, NotFound, ValidationError
from .model import UserProfile
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: identity (signup, login, role changes)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def signup(
        self,
        *,
        email: str,
        password: str,
        role: str,
        display_name: str,
        now: Optional[datetime] = None,
    ) -> UserProfile:
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        display_name = require_non_empty(display_name, "Display name")
        role = require_non_empty(role, "Role").lower()

        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        user_id = self._users.create_user(
            email=email,
            display_name=display_name,
            password_hash=generate_password_hash(password),
            role=role,
            created_at=now or now_local(),
        )
        logger.info("Created %s account %s", role, user_id)
        return UserProfile(user_id=user_id, email=email, display_name=display_name, role=role)

    def login(self, email: str, password: str) -> UserProfile:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")
        return UserProfile.of(user)

    def get_profile(self, user_id: str) -> UserProfile:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return UserProfile.of(user)

    def update_role(self, user_id: str, role: str) -> UserProfile:
        role = require_non_empty(role, "Role").lower()
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        self._users.update_role(user_id, role)
        return UserProfile(user_id=user.user_id, email=user.email, display_name=user.display_name, role=role)
