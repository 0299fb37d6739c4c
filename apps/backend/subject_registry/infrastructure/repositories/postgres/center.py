"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/center.py
============================================================
Class: PostgresCenterRepository

Responsibilities:
  - Lookups de centros (por id y por conjunto de ids).

Collaborators:
  - domain.entities.Center
  - PostgresRepositoryBase
============================================================
"""

from __future__ import annotations

from typing import List, Optional, Sequence
from uuid import UUID

from ....domain.entities import Center
from .base import PostgresRepositoryBase


class PostgresCenterRepository(PostgresRepositoryBase):
    """Repositorio PostgreSQL de centros (solo lectura)."""

    _SQL_GET = "SELECT id, name FROM centers WHERE id = %s"

    _SQL_LIST_BY_IDS = """
        SELECT id, name
        FROM centers
        WHERE id = ANY(%s)
        ORDER BY name ASC, id ASC
    """

    def get_center(self, center_id: UUID) -> Optional[Center]:
        row = self._fetchone(
            query=self._SQL_GET,
            params=[center_id],
            context_msg="PostgresCenterRepository: Failed to get center",
            extra={"center_id": str(center_id)},
        )
        return Center(id=row[0], name=row[1]) if row else None

    def list_centers_by_ids(self, center_ids: Sequence[UUID]) -> List[Center]:
        if not center_ids:
            return []
        rows = self._fetchall(
            query=self._SQL_LIST_BY_IDS,
            params=[list(center_ids)],
            context_msg="PostgresCenterRepository: Failed to list centers",
            extra={"center_count": len(center_ids)},
        )
        return [Center(id=center_id, name=name) for center_id, name in rows]
