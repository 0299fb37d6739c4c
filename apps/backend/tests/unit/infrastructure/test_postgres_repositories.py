"""
Name: Postgres Repository Unit Tests (mocked pool)

Responsibilities:
  - Verify error translation (UniqueViolation -> UniqueConstraintError)
  - Verify subject writes and audit inserts share one transaction
  - Offline: the pool and connection are MagicMocks
"""

from datetime import date
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from psycopg.errors import UniqueViolation

from subject_registry.crosscutting.exceptions import (
    DatabaseError,
    UniqueConstraintError,
)
from subject_registry.domain.entities import AuditAction, AuditLogEntry, Subject
from subject_registry.infrastructure.repositories import (
    PostgresCenterRepository,
    PostgresSubjectRepository,
)

pytestmark = pytest.mark.unit


def _conn() -> MagicMock:
    conn = MagicMock()
    # MagicMock.__exit__ devuelve un mock truthy: suprimiría las excepciones
    conn.transaction.return_value.__exit__.return_value = False
    return conn


def _pool_with(conn: MagicMock) -> MagicMock:
    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    pool.connection.return_value.__exit__.return_value = False
    return pool


def _subject() -> Subject:
    return Subject(
        id=uuid4(),
        number="SUB-001",
        name="John Doe",
        birth_date=date(1980, 5, 17),
        center_id=uuid4(),
    )


def _entry(subject_id) -> AuditLogEntry:
    return AuditLogEntry(
        id=uuid4(),
        action=AuditAction.UPDATE,
        diff={"subject_id": str(subject_id)},
        subject_id=subject_id,
    )


def test_repository_uses_injected_pool():
    pool = MagicMock()
    assert PostgresCenterRepository(pool=pool)._get_pool() is pool


def test_unique_violation_is_translated():
    conn = _conn()
    conn.execute.side_effect = UniqueViolation("duplicate key")
    repo = PostgresSubjectRepository(pool=_pool_with(conn))
    subject = _subject()

    with pytest.raises(UniqueConstraintError):
        repo.create_subject(subject, audit_entry=_entry(subject.id))


def test_generic_failure_becomes_database_error():
    conn = _conn()
    conn.execute.side_effect = RuntimeError("connection lost")
    repo = PostgresCenterRepository(pool=_pool_with(conn))

    with pytest.raises(DatabaseError) as exc:
        repo.get_center(uuid4())

    assert not isinstance(exc.value, UniqueConstraintError)


def test_update_of_vanished_subject_skips_audit_insert():
    conn = _conn()
    conn.execute.return_value.fetchone.return_value = None
    repo = PostgresSubjectRepository(pool=_pool_with(conn))
    subject = _subject()

    assert repo.update_subject(subject, audit_entry=_entry(subject.id)) is None

    conn.transaction.assert_called_once()
    # Solo el UPDATE ... RETURNING; nunca el INSERT en audit_logs
    assert conn.execute.call_count == 1


def test_delete_writes_detached_audit_row():
    conn = _conn()
    subject = _subject()
    conn.execute.return_value.fetchone.return_value = (subject.id,)
    repo = PostgresSubjectRepository(pool=_pool_with(conn))

    assert repo.delete_subject(subject.id, audit_entry=_entry(subject.id)) is True

    audit_call = conn.execute.call_args_list[-1]
    sql, params = audit_call.args
    assert "INSERT INTO audit_logs" in sql
    assert params[1] is None


def test_ping_runs_select_one():
    conn = _conn()
    conn.execute.return_value.fetchone.return_value = (1,)

    assert PostgresCenterRepository(pool=_pool_with(conn)).ping() is True
