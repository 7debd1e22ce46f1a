"""Signup, login and profile operations."""
from __future__ import annotations

from typing import Any, Dict

from planmap.auth import create_access_token, hash_password, verify_password
from planmap.db.models import Profile, User
from planmap.db.repositories import UserRepository
from planmap.domain.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from planmap.domain.events import UserRegistered, event_publisher


class AuthService:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def signup(self, email: str, password: str, username: str | None = None) -> tuple[User, str]:
        email = email.strip().lower()
        if "@" not in email:
            raise ValidationError("A valid e-mail address is required")
        if self._users.get_user_by_email(email):
            raise ConflictError("An account with this e-mail already exists")
        user = self._users.create_user(email, hash_password(password), username=username)
        event_publisher.publish(UserRegistered(
            event_id="",
            timestamp=None,
            aggregate_id=user.id,
            email=user.email,
        ))
        return user, create_access_token(user.id)

    def login(self, email: str, password: str) -> tuple[User, str]:
        user = self._users.get_user_by_email(email.strip())
        # Same message for unknown e-mail and wrong password
        if not user or not verify_password(password, user.password_hash):
            raise UnauthorizedError("Invalid e-mail or password")
        return user, create_access_token(user.id)

    def get_profile(self, user_id: str) -> Profile:
        profile = self._users.get_profile(user_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def update_profile(self, user_id: str, fields: Dict[str, Any]) -> Profile:
        return self._users.update_profile(self.get_profile(user_id), fields)
