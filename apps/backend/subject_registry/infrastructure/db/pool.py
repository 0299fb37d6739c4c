"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  Pool de conexiones PostgreSQL (singleton)

Responsabilidades:
  - Inicializar, exponer y cerrar el pool de conexiones.
  - Configurar conexiones: UTC, application_name, statement_timeout.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - crosscutting/config.py (timeout)
  - api/main.py (lifespan: init/close)

Principios:
  - Fail-fast (doble init, uso sin init)
  - Encapsulación (pool global único)
===============================================================================
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError

if TYPE_CHECKING:
    from psycopg_pool import ConnectionPool

_pool: Optional["ConnectionPool"] = None
_pool_lock = threading.Lock()


APPLICATION_NAME = "subject-registry"


def _configure_connection(conn) -> None:
    """
    Se ejecuta cuando el pool crea una conexión nueva.

    - TIME ZONE UTC: created_at/updated_at y el orden de auditoría no dependen
      de la configuración del servidor.
    - statement_timeout: solo si es > 0.
    """
    from ...crosscutting.config import get_settings

    conn.execute("SET TIME ZONE 'UTC'")
    conn.execute(f"SET application_name = '{APPLICATION_NAME}'")
    timeout_ms = int(get_settings().db_statement_timeout_ms)
    if timeout_ms > 0:
        conn.execute(f"SET statement_timeout = {timeout_ms}")
    conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int) -> "ConnectionPool":
    """Inicializa el pool (una vez por proceso)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("El pool ya fue inicializado.")

        # Lazy import: los tests unitarios importan la app sin DB.
        from psycopg_pool import ConnectionPool

        logger.info(
            "Inicializando pool DB",
            extra={"min_size": min_size, "max_size": max_size},
        )

        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_configure_connection,
            open=True,
        )

        logger.info(
            "Pool DB inicializado",
            extra={"min_size": min_size, "max_size": max_size},
        )
        return _pool


def get_pool() -> "ConnectionPool":
    """Retorna el pool singleton."""
    if _pool is None:
        raise PoolNotInitializedError(
            "Pool no inicializado. Llamar init_pool() primero."
        )
    return _pool


def close_pool() -> None:
    """Cierra el pool (idempotente)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            logger.info("Cerrando pool DB")
            try:
                _pool.close()
            finally:
                _pool = None
            logger.info("Pool DB cerrado")
