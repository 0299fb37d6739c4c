"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .audit_log import InMemoryAuditLogRepository
from .center import InMemoryCenterRepository
from .membership import InMemoryMembershipRepository
from .subject import InMemorySubjectRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemorySubjectRepository",
    "InMemoryCenterRepository",
    "InMemoryMembershipRepository",
    "InMemoryUserRepository",
    "InMemoryAuditLogRepository",
]
