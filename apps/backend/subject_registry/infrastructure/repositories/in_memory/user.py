"""In-memory users (tests / local dev)."""

from __future__ import annotations

from threading import Lock
from typing import Dict, Optional
from uuid import UUID

from ....identity.users import User


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    def add_user(self, user: User) -> None:
        with self._lock:
            self._users[user.id] = user

    def get_user(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)
