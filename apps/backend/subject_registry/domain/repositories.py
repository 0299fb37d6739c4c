"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep the application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing (fake repositories).

Collaborators
- domain.entities: Subject, Center, AuditLogEntry
- identity.users: User
- infrastructure.repositories: postgres_*, in_memory_* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Every Subject write carries its audit entry: implementations MUST persist
  both in the same transaction (both succeed or both fail).
- The audit log is append-only: there is no update/delete contract for it.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- Outputs are concrete lists for predictable iteration/serialization.
- Inputs can be empty lists; implementations return [] without querying.
"""

from typing import List, Optional, Protocol, Sequence
from uuid import UUID

from ..identity.users import User
from .entities import AuditLogEntry, Center, Subject


class SubjectRepository(Protocol):
    """
    R: Interface for Subject persistence with atomic audit append.

    Implementations must provide:
      - Scoped listing ordered by number (byte-wise, case-sensitive)
      - Lookups by id (with center joined) and by number
      - Create/update/delete paired with one AuditLogEntry in one transaction
      - UniqueConstraintError when number collides at write time
    """

    def list_subjects_by_centers(self, center_ids: Sequence[UUID]) -> List[Subject]:
        """R: Subjects whose center is in center_ids, ordered by number ASC."""
        ...

    def get_subject(self, subject_id: UUID) -> Optional[Subject]:
        """R: Subject by id with its Center joined, or None."""
        ...

    def get_subject_by_number(self, number: str) -> Optional[Subject]:
        """R: Live Subject with exactly this number (case-sensitive), or None."""
        ...

    def create_subject(self, subject: Subject, *, audit_entry: AuditLogEntry) -> Subject:
        """R: Atomically insert subject + CREATE audit entry; returns stored row."""
        ...

    def update_subject(
        self, subject: Subject, *, audit_entry: AuditLogEntry
    ) -> Optional[Subject]:
        """
        R: Atomically persist all mutable fields + UPDATE audit entry.

        Returns None (and writes nothing) if the subject no longer exists.
        """
        ...

    def delete_subject(self, subject_id: UUID, *, audit_entry: AuditLogEntry) -> bool:
        """
        R: Atomically append DELETE audit entry and remove the subject.

        Existing audit rows keep their history (subject_id set to NULL).
        Returns False if the subject did not exist.
        """
        ...


class CenterRepository(Protocol):
    """R: Read-only Center lookups."""

    def get_center(self, center_id: UUID) -> Optional[Center]:
        ...

    def list_centers_by_ids(self, center_ids: Sequence[UUID]) -> List[Center]:
        """R: Centers in center_ids ordered by name ASC."""
        ...

    def ping(self) -> bool:
        """R: Storage reachable (healthcheck)."""
        ...


class MembershipRepository(Protocol):
    """R: User-to-center memberships (managed outside this service)."""

    def list_center_ids_for_user(self, user_id: UUID) -> List[UUID]:
        ...


class UserRepository(Protocol):
    """R: User existence lookups (distinguishes NotFound from empty scope)."""

    def get_user(self, user_id: UUID) -> Optional[User]:
        ...


class AuditLogRepository(Protocol):
    """
    R: Append-only audit log queries.

    Writes happen through SubjectRepository so that they share the
    Subject's transaction.
    """

    def list_entries_for_subject(self, subject_id: UUID) -> List[AuditLogEntry]:
        """
        R: Entries whose subject_id OR embedded diff subject_id match,
        ordered by created_at DESC (ties: newest insert first).
        """
        ...

    def find_first_entry_by_number(self, number: str) -> Optional[AuditLogEntry]:
        """
        R: Earliest entry whose diff number (flat value or "new" half)
        equals number, or None.
        """
        ...
