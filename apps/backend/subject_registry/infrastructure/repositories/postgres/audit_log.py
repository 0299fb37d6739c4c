"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/audit_log.py
============================================================
Class: PostgresAuditLogRepository

Responsibilities:
  - Consultar la historia de un subject en audit_logs (solo lectura).
  - Resolver entradas por claves embebidas en el diff JSONB
    (subject_id / number) para subjects ya borrados.

Collaborators:
  - domain.entities.AuditLogEntry
  - PostgresRepositoryBase (pool + errores)

Constraints / Notes:
  - Append-only: las escrituras viven en PostgresSubjectRepository
    (misma transacción que el subject).
  - Orden estable: created_at + seq (identity) como desempate.
============================================================
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from ....domain.entities import AuditAction, AuditLogEntry
from .base import PostgresRepositoryBase

_AUDIT_COLUMNS = "id, subject_id, user_id, action, diff, created_at"


class PostgresAuditLogRepository(PostgresRepositoryBase):
    """Repositorio PostgreSQL de lectura para audit_logs."""

    _SQL_LIST_FOR_SUBJECT = f"""
        SELECT {_AUDIT_COLUMNS}
        FROM audit_logs
        WHERE subject_id = %s OR diff->>'subject_id' = %s
        ORDER BY created_at DESC, seq DESC
    """

    _SQL_FIRST_BY_NUMBER = f"""
        SELECT {_AUDIT_COLUMNS}
        FROM audit_logs
        WHERE diff->>'number' = %s OR diff->'number'->>'new' = %s
        ORDER BY created_at ASC, seq ASC
        LIMIT 1
    """

    def list_entries_for_subject(self, subject_id: UUID) -> List[AuditLogEntry]:
        rows = self._fetchall(
            query=self._SQL_LIST_FOR_SUBJECT,
            params=[subject_id, str(subject_id)],
            context_msg="PostgresAuditLogRepository: Failed to list audit logs",
            extra={"subject_id": str(subject_id)},
        )
        return [self._row_to_entry(row) for row in rows]

    def find_first_entry_by_number(self, number: str) -> Optional[AuditLogEntry]:
        row = self._fetchone(
            query=self._SQL_FIRST_BY_NUMBER,
            params=[number, number],
            context_msg="PostgresAuditLogRepository: Failed to find audit log by number",
            extra={"number": number},
        )
        return self._row_to_entry(row) if row else None

    @staticmethod
    def _row_to_entry(row: tuple) -> AuditLogEntry:
        entry_id, subject_id, user_id, action, diff, created_at = row
        return AuditLogEntry(
            id=entry_id,
            subject_id=subject_id,
            user_id=user_id,
            action=AuditAction(action),
            diff=diff or {},
            created_at=created_at,
        )
