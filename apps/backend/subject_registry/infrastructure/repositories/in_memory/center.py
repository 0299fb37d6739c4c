"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/center.py
============================================================
Class: InMemoryCenterRepository

Responsibilities:
  - Lookup de centros en memoria (tests / local dev / dev seed).
  - Orden por nombre alineado con Postgres.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from ....domain.entities import Center


class InMemoryCenterRepository:
    def __init__(self, centers: Iterable[Center] = ()) -> None:
        self._lock = Lock()
        self._centers: Dict[UUID, Center] = {c.id: c for c in centers}

    def add_center(self, center: Center) -> None:
        with self._lock:
            self._centers[center.id] = center

    def get_center(self, center_id: UUID) -> Optional[Center]:
        with self._lock:
            return self._centers.get(center_id)

    def list_centers_by_ids(self, center_ids: Sequence[UUID]) -> List[Center]:
        wanted = set(center_ids)
        with self._lock:
            found = [c for cid, c in self._centers.items() if cid in wanted]
        return sorted(found, key=lambda c: (c.name, str(c.id)))

    def ping(self) -> bool:
        return True
