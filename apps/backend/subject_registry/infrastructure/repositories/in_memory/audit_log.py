"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/audit_log.py
============================================================
Class: InMemoryAuditLogRepository

Responsibilities:
  - Almacenar entradas de auditoría en memoria (tests / local dev).
  - Replicar la semántica de Postgres:
      - created_at asignado por "storage"
      - ON DELETE SET NULL sobre subject_id
      - orden created_at + secuencia de inserción como desempate

Collaborators:
  - domain.entities.AuditLogEntry
  - InMemorySubjectRepository (único que escribe, bajo su transacción)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Append-only hacia afuera: no hay API pública de update/delete.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, List, Optional
from uuid import UUID

from ....domain.diff import payload_number, payload_subject_id
from ....domain.entities import AuditLogEntry


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryAuditLogRepository:
    """Audit log in-memory, ordenado de forma determinística."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._lock = Lock()
        self._clock = clock
        # (seq, entry): seq emula la columna identity de Postgres.
        self._rows: List[tuple[int, AuditLogEntry]] = []
        self._next_seq = 1

    # =========================================================
    # Escritura (solo desde InMemorySubjectRepository)
    # =========================================================
    def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        with self._lock:
            stored = replace(entry, created_at=entry.created_at or self._clock())
            self._rows.append((self._next_seq, stored))
            self._next_seq += 1
            return stored

    def detach_subject(self, subject_id: UUID) -> None:
        """Emula audit_logs.subject_id ON DELETE SET NULL."""
        with self._lock:
            self._rows = [
                (seq, replace(entry, subject_id=None))
                if entry.subject_id == subject_id
                else (seq, entry)
                for seq, entry in self._rows
            ]

    # =========================================================
    # Lecturas
    # =========================================================
    def list_entries_for_subject(self, subject_id: UUID) -> List[AuditLogEntry]:
        with self._lock:
            matches = [
                (seq, entry)
                for seq, entry in self._rows
                if entry.subject_id == subject_id
                or payload_subject_id(entry.diff) == subject_id
            ]
        matches.sort(key=lambda row: (row[1].created_at, row[0]), reverse=True)
        return [entry for _, entry in matches]

    def find_first_entry_by_number(self, number: str) -> Optional[AuditLogEntry]:
        with self._lock:
            matches = [
                (seq, entry)
                for seq, entry in self._rows
                if payload_number(entry.diff) == number
            ]
        if not matches:
            return None
        return min(matches, key=lambda row: (row[1].created_at, row[0]))[1]

    def list_all(self) -> List[AuditLogEntry]:
        """Helper de tests/dev: todas las entradas en orden de inserción."""
        with self._lock:
            return [entry for _, entry in self._rows]
