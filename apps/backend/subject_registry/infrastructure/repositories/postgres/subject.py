"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/subject.py
============================================================
Class: PostgresSubjectRepository

Responsibilities:
  - CRUD de subjects en PostgreSQL (tabla subjects + join con centers).
  - Escribir la entrada de audit_logs EN LA MISMA transacción que el subject.
  - Orden determinístico por number con collation "C" (byte-wise).

Collaborators:
  - domain.entities: Subject, Center, AuditLogEntry
  - psycopg.types.json.Json (diff -> JSONB)
  - PostgresRepositoryBase (pool + errores)

Constraints / Notes:
  - Repo puro: NO decide autorización (lo hacen los casos de uso).
  - subjects.number tiene UNIQUE: la violación sale como UniqueConstraintError.
  - DELETE: audit_logs.subject_id es FK ON DELETE SET NULL; la historia
    sigue accesible vía diff->>'subject_id'.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence
from uuid import UUID

from psycopg import Connection
from psycopg.types.json import Json

from ....domain.entities import AuditLogEntry, Center, Subject
from .base import PostgresRepositoryBase

_SUBJECT_COLUMNS = """
    s.id, s.number, s.name, s.birth_date, s.center_id,
    s.created_at, s.updated_at, c.id, c.name
"""


class PostgresSubjectRepository(PostgresRepositoryBase):
    """Repositorio PostgreSQL de sujetos con auditoría transaccional."""

    # =========================================================
    # SQL Constantes (Privadas)
    # =========================================================
    _SQL_LIST_BY_CENTERS = f"""
        SELECT {_SUBJECT_COLUMNS}
        FROM subjects s
        JOIN centers c ON c.id = s.center_id
        WHERE s.center_id = ANY(%s)
        ORDER BY s.number COLLATE "C" ASC
    """

    _SQL_GET_BY_ID = f"""
        SELECT {_SUBJECT_COLUMNS}
        FROM subjects s
        JOIN centers c ON c.id = s.center_id
        WHERE s.id = %s
    """

    _SQL_GET_BY_NUMBER = f"""
        SELECT {_SUBJECT_COLUMNS}
        FROM subjects s
        JOIN centers c ON c.id = s.center_id
        WHERE s.number = %s
    """

    _SQL_INSERT = """
        INSERT INTO subjects (id, number, name, birth_date, center_id)
        VALUES (%s, %s, %s, %s, %s)
    """

    _SQL_UPDATE = """
        UPDATE subjects
        SET number = %s, name = %s, birth_date = %s, center_id = %s,
            updated_at = now()
        WHERE id = %s
        RETURNING id
    """

    _SQL_DELETE = "DELETE FROM subjects WHERE id = %s RETURNING id"

    _SQL_INSERT_AUDIT = """
        INSERT INTO audit_logs (id, subject_id, user_id, action, diff)
        VALUES (%s, %s, %s, %s, %s)
    """

    # =========================================================
    # Lecturas
    # =========================================================
    def list_subjects_by_centers(self, center_ids: Sequence[UUID]) -> List[Subject]:
        if not center_ids:
            return []
        rows = self._fetchall(
            query=self._SQL_LIST_BY_CENTERS,
            params=[list(center_ids)],
            context_msg="PostgresSubjectRepository: Failed to list subjects",
            extra={"center_count": len(center_ids)},
        )
        return [self._row_to_subject(row) for row in rows]

    def get_subject(self, subject_id: UUID) -> Optional[Subject]:
        row = self._fetchone(
            query=self._SQL_GET_BY_ID,
            params=[subject_id],
            context_msg="PostgresSubjectRepository: Failed to get subject",
            extra={"subject_id": str(subject_id)},
        )
        return self._row_to_subject(row) if row else None

    def get_subject_by_number(self, number: str) -> Optional[Subject]:
        row = self._fetchone(
            query=self._SQL_GET_BY_NUMBER,
            params=[number],
            context_msg="PostgresSubjectRepository: Failed to get subject by number",
            extra={"number": number},
        )
        return self._row_to_subject(row) if row else None

    # =========================================================
    # Escrituras (subject + audit en una transacción)
    # =========================================================
    def create_subject(self, subject: Subject, *, audit_entry: AuditLogEntry) -> Subject:
        extra = {"subject_id": str(subject.id), "number": subject.number}
        with self._connection(
            context_msg="PostgresSubjectRepository: Failed to create subject",
            extra=extra,
        ) as conn:
            with conn.transaction():
                conn.execute(
                    self._SQL_INSERT,
                    (
                        subject.id,
                        subject.number,
                        subject.name,
                        subject.birth_date,
                        subject.center_id,
                    ),
                )
                self._insert_audit(conn, audit_entry)
                row = conn.execute(self._SQL_GET_BY_ID, (subject.id,)).fetchone()
        return self._row_to_subject(row)

    def update_subject(
        self, subject: Subject, *, audit_entry: AuditLogEntry
    ) -> Optional[Subject]:
        extra = {"subject_id": str(subject.id)}
        with self._connection(
            context_msg="PostgresSubjectRepository: Failed to update subject",
            extra=extra,
        ) as conn:
            with conn.transaction():
                updated = conn.execute(
                    self._SQL_UPDATE,
                    (
                        subject.number,
                        subject.name,
                        subject.birth_date,
                        subject.center_id,
                        subject.id,
                    ),
                ).fetchone()
                if updated is None:
                    # Race condition: borrado entre la lectura y la escritura.
                    return None
                self._insert_audit(conn, audit_entry)
                row = conn.execute(self._SQL_GET_BY_ID, (subject.id,)).fetchone()
        return self._row_to_subject(row)

    def delete_subject(self, subject_id: UUID, *, audit_entry: AuditLogEntry) -> bool:
        extra = {"subject_id": str(subject_id)}
        with self._connection(
            context_msg="PostgresSubjectRepository: Failed to delete subject",
            extra=extra,
        ) as conn:
            with conn.transaction():
                deleted = conn.execute(self._SQL_DELETE, (subject_id,)).fetchone()
                if deleted is None:
                    return False
                # La fila ya no existe: la referencia directa queda NULL
                # (igual que ON DELETE SET NULL) y el id vive en el diff.
                self._insert_audit(conn, replace(audit_entry, subject_id=None))
        return True

    # =========================================================
    # Helpers
    # =========================================================
    def _insert_audit(self, conn: Connection, entry: AuditLogEntry) -> None:
        conn.execute(
            self._SQL_INSERT_AUDIT,
            (
                entry.id,
                entry.subject_id,
                entry.user_id,
                entry.action.value,
                Json(entry.diff or {}),
            ),
        )

    @staticmethod
    def _row_to_subject(row: tuple) -> Subject:
        (
            subject_id,
            number,
            name,
            birth_date,
            center_id,
            created_at,
            updated_at,
            joined_center_id,
            center_name,
        ) = row
        return Subject(
            id=subject_id,
            number=number,
            name=name,
            birth_date=birth_date,
            center_id=center_id,
            center=Center(id=joined_center_id, name=center_name),
            created_at=created_at,
            updated_at=updated_at,
        )
