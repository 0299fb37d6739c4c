"""
============================================================
TARJETA CRC
============================================================
Package: subject_registry.infrastructure.repositories

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.

Collaborators:
- Repositorios Postgres (SQL crudo, psycopg)
- Repositorios InMemory (testing / local dev)
============================================================
"""

from .in_memory import (
    InMemoryAuditLogRepository,
    InMemoryCenterRepository,
    InMemoryMembershipRepository,
    InMemorySubjectRepository,
    InMemoryUserRepository,
)
from .postgres import (
    PostgresAuditLogRepository,
    PostgresCenterRepository,
    PostgresMembershipRepository,
    PostgresSubjectRepository,
    PostgresUserRepository,
)

__all__ = [
    # Postgres
    "PostgresSubjectRepository",
    "PostgresCenterRepository",
    "PostgresMembershipRepository",
    "PostgresUserRepository",
    "PostgresAuditLogRepository",
    # In-memory
    "InMemorySubjectRepository",
    "InMemoryCenterRepository",
    "InMemoryMembershipRepository",
    "InMemoryUserRepository",
    "InMemoryAuditLogRepository",
]
