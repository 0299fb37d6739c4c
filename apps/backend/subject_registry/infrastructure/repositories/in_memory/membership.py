"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/membership.py
============================================================
Class: InMemoryMembershipRepository

Responsibilities:
  - Pares (user_id, center_id) en memoria.
  - add/remove solo para tests y dev seed (la gestión real es externa).
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import List, Set, Tuple
from uuid import UUID


class InMemoryMembershipRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._pairs: Set[Tuple[UUID, UUID]] = set()

    def add_membership(self, user_id: UUID, center_id: UUID) -> None:
        with self._lock:
            self._pairs.add((user_id, center_id))

    def remove_membership(self, user_id: UUID, center_id: UUID) -> None:
        with self._lock:
            self._pairs.discard((user_id, center_id))

    def list_center_ids_for_user(self, user_id: UUID) -> List[UUID]:
        with self._lock:
            center_ids = [c for u, c in self._pairs if u == user_id]
        return sorted(center_ids, key=str)
