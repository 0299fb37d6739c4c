"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/membership.py
============================================================
Class: PostgresMembershipRepository

Responsibilities:
  - Devolver los centros asignados a un usuario (tabla user_centers).

Collaborators:
  - application/usecases/access (ResolveAccessScopeUseCase)
  - PostgresRepositoryBase

Constraints / Notes:
  - Alta/baja de memberships se gestiona fuera de este servicio.
============================================================
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from .base import PostgresRepositoryBase


class PostgresMembershipRepository(PostgresRepositoryBase):
    """Lookup user -> centers."""

    _SQL_LIST_CENTERS_FOR_USER = """
        SELECT center_id
        FROM user_centers
        WHERE user_id = %s
        ORDER BY center_id ASC
    """

    def list_center_ids_for_user(self, user_id: UUID) -> List[UUID]:
        rows = self._fetchall(
            query=self._SQL_LIST_CENTERS_FOR_USER,
            params=[user_id],
            context_msg="PostgresMembershipRepository: Failed to list user centers",
            extra={"user_id": str(user_id)},
        )
        return [center_id for (center_id,) in rows]
