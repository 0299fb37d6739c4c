"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/base.py
============================================================
Class: PostgresRepositoryBase

Responsibilities:
  - Resolver el pool (inyectado en tests / global en prod).
  - Ejecutar SELECTs con logging y errores consistentes.
  - Traducir UniqueViolation -> UniqueConstraintError y el resto -> DatabaseError.

Collaborators:
  - psycopg_pool.ConnectionPool
  - crosscutting.exceptions (DatabaseError / UniqueConstraintError)
  - crosscutting.logger

Constraints / Notes:
  - Queries SIEMPRE parametrizadas.
============================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from psycopg import Connection
from psycopg.errors import UniqueViolation
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, UniqueConstraintError
from ....crosscutting.logger import logger


class PostgresRepositoryBase:
    """Helpers comunes (pool lazy + fetch + traducción de errores)."""

    def __init__(self, pool: ConnectionPool | None = None):
        # Pool inyectable: tests pueden pasar su pool; prod usa el pool global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    @contextmanager
    def _connection(self, *, context_msg: str, extra: dict) -> Iterator[Connection]:
        """
        Conexión del pool con traducción de errores.

        UniqueViolation no se loguea como excepción: es un CONFLICT de negocio.
        """
        try:
            with self._get_pool().connection() as conn:
                yield conn
        except UniqueViolation as exc:
            constraint = getattr(exc.diag, "constraint_name", None)
            logger.warning(
                context_msg,
                extra={**extra, "constraint": constraint, "error": "unique_violation"},
            )
            raise UniqueConstraintError(
                f"{context_msg}: unique constraint violated",
                constraint=constraint,
                cause=exc,
            ) from exc
        except DatabaseError:
            raise
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", cause=exc) from exc

    def _fetchall(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> list[tuple]:
        with self._connection(context_msg=context_msg, extra=extra) as conn:
            return conn.execute(query, tuple(params)).fetchall()

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        with self._connection(context_msg=context_msg, extra=extra) as conn:
            return conn.execute(query, tuple(params)).fetchone()

    def ping(self) -> bool:
        """Healthcheck: SELECT 1 contra el pool."""
        row = self._fetchone(
            query="SELECT 1", params=(), context_msg="DB ping failed", extra={}
        )
        return row is not None
