"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/subject.py
============================================================
Class: InMemorySubjectRepository

Responsibilities:
  - Almacenar subjects en memoria (tests / local dev).
  - Replicar las constraints de Postgres:
      - UNIQUE(number) -> UniqueConstraintError
      - FK center_id -> DatabaseError
  - Escribir subject + audit como una unidad (todo o nada).
  - Orden por number byte-wise (igual que COLLATE "C").

Collaborators:
  - InMemoryCenterRepository (FK + join de center)
  - InMemoryAuditLogRepository (append + ON DELETE SET NULL)

Constraints / Notes:
  - Thread-safe: escrituras serializadas por Lock; las validaciones
    ocurren ANTES de mutar para no dejar escrituras parciales.
  - Copias defensivas: nunca se entrega la instancia almacenada.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from ....crosscutting.exceptions import (
    SUBJECT_NUMBER_CONSTRAINT,
    DatabaseError,
    UniqueConstraintError,
)
from ....domain.entities import AuditLogEntry, Subject
from .audit_log import InMemoryAuditLogRepository
from .center import InMemoryCenterRepository


class InMemorySubjectRepository:
    """Repositorio in-memory de sujetos con auditoría atómica."""

    def __init__(
        self,
        *,
        center_repository: InMemoryCenterRepository,
        audit_repository: InMemoryAuditLogRepository,
    ) -> None:
        self._lock = Lock()
        self._subjects: Dict[UUID, Subject] = {}
        self._centers = center_repository
        self._audit = audit_repository

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _joined(self, subject: Subject) -> Subject:
        """Copia con center resuelto (emula el JOIN)."""
        return replace(subject, center=self._centers.get_center(subject.center_id))

    def _check_constraints(self, subject: Subject) -> None:
        for other in self._subjects.values():
            if other.id != subject.id and other.number == subject.number:
                raise UniqueConstraintError(
                    "InMemorySubjectRepository: unique constraint violated",
                    constraint=SUBJECT_NUMBER_CONSTRAINT,
                )
        if self._centers.get_center(subject.center_id) is None:
            raise DatabaseError(
                f"InMemorySubjectRepository: center {subject.center_id} does not exist"
            )

    # =========================================================
    # Lecturas
    # =========================================================
    def list_subjects_by_centers(self, center_ids: Sequence[UUID]) -> List[Subject]:
        if not center_ids:
            return []
        wanted = set(center_ids)
        with self._lock:
            found = [s for s in self._subjects.values() if s.center_id in wanted]
        return [self._joined(s) for s in sorted(found, key=lambda s: s.number)]

    def get_subject(self, subject_id: UUID) -> Optional[Subject]:
        with self._lock:
            subject = self._subjects.get(subject_id)
        return self._joined(subject) if subject else None

    def get_subject_by_number(self, number: str) -> Optional[Subject]:
        with self._lock:
            subject = next(
                (s for s in self._subjects.values() if s.number == number), None
            )
        return self._joined(subject) if subject else None

    # =========================================================
    # Escrituras
    # =========================================================
    def create_subject(self, subject: Subject, *, audit_entry: AuditLogEntry) -> Subject:
        with self._lock:
            if subject.id in self._subjects:
                raise UniqueConstraintError(
                    "InMemorySubjectRepository: duplicate id", constraint="pk_subjects"
                )
            self._check_constraints(subject)
            now = self._now()
            stored = replace(subject, center=None, created_at=now, updated_at=now)
            self._subjects[stored.id] = stored
            self._audit.append(audit_entry)
        return self._joined(stored)

    def update_subject(
        self, subject: Subject, *, audit_entry: AuditLogEntry
    ) -> Optional[Subject]:
        with self._lock:
            current = self._subjects.get(subject.id)
            if current is None:
                return None
            self._check_constraints(subject)
            stored = replace(
                current,
                number=subject.number,
                name=subject.name,
                birth_date=subject.birth_date,
                center_id=subject.center_id,
                updated_at=self._now(),
            )
            self._subjects[stored.id] = stored
            self._audit.append(audit_entry)
        return self._joined(stored)

    def delete_subject(self, subject_id: UUID, *, audit_entry: AuditLogEntry) -> bool:
        with self._lock:
            if self._subjects.pop(subject_id, None) is None:
                return False
            self._audit.detach_subject(subject_id)
            self._audit.append(replace(audit_entry, subject_id=None))
        return True
