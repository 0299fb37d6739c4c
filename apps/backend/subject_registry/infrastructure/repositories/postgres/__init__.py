"""
PostgreSQL Repository Implementations.

Production implementations using psycopg + psycopg_pool (raw SQL).
"""

from .audit_log import PostgresAuditLogRepository
from .center import PostgresCenterRepository
from .membership import PostgresMembershipRepository
from .subject import PostgresSubjectRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresSubjectRepository",
    "PostgresCenterRepository",
    "PostgresMembershipRepository",
    "PostgresUserRepository",
    "PostgresAuditLogRepository",
]
