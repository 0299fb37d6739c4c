"""
===============================================================================
SUBJECT ACCESS HELPERS (Scope / Load / Audit building)
===============================================================================

Name:
    Subject Access Helpers

Business Goal:
    Centralizar la resolución de acceso a sujetos para todos los casos de uso,
    garantizando el mismo orden de chequeos:
      1) el sujeto existe (NOT_FOUND)
      2) el usuario existe (NOT_FOUND "User")
      3) el centro del sujeto está en su scope (FORBIDDEN)

Why (Context / Intención):
    - Duplicar checks en cada use case genera inconsistencias (403 vs 404).
    - El lookup de centros para el diff NUNCA debe abortar una escritura:
      si falla, el diff usa el nombre centinela.

-------------------------------------------------------------------------------
CRC CARD (Functions-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    subject_access helpers (module-level functions)

Responsibilities:
    - resolve_scope(): user_id -> (AccessScope | None, SubjectError | None)
    - load_subject_for_access(): findOne semantics compartida
    - make_center_lookup(): lookup tolerante a fallas para domain.diff
    - build_audit_entry(): SubjectDiff -> AuditLogEntry
    - factories de SubjectError

Collaborators:
    - ResolveAccessScopeUseCase (inyectado por el caller)
    - SubjectRepository / CenterRepository
    - domain.diff (CenterLookup, SubjectDiff)
===============================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Iterable, Optional, Tuple
from uuid import UUID, uuid4

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.access_scope import AccessScope, can_access_subject
from ....domain.diff import CenterLookup, SubjectDiff
from ....domain.entities import AuditAction, AuditLogEntry, Center, Subject
from ....domain.repositories import CenterRepository, SubjectRepository
from .subject_results import SubjectError, SubjectErrorCode

if TYPE_CHECKING:
    from ..access.resolve_access_scope import ResolveAccessScopeUseCase

# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
RESOURCE_SUBJECT: Final[str] = "Subject"
RESOURCE_CENTER: Final[str] = "Center"
_MSG_FORBIDDEN: Final[str] = "Access denied: center outside of user scope."


# -----------------------------------------------------------------------------
# Error factories
# -----------------------------------------------------------------------------
def not_found_error(resource: str, identifier: object) -> SubjectError:
    return SubjectError(
        code=SubjectErrorCode.NOT_FOUND,
        message=f"{resource} '{identifier}' not found.",
        resource=resource,
    )


def forbidden_error(message: str = _MSG_FORBIDDEN) -> SubjectError:
    return SubjectError(code=SubjectErrorCode.FORBIDDEN, message=message)


def conflict_error(number: str) -> SubjectError:
    return SubjectError(
        code=SubjectErrorCode.CONFLICT,
        message=f"Subject number '{number}' already exists.",
        resource=RESOURCE_SUBJECT,
    )


def validation_error(message: str, field: str | None = None) -> SubjectError:
    return SubjectError(
        code=SubjectErrorCode.VALIDATION_ERROR, message=message, field=field
    )


# -----------------------------------------------------------------------------
# Scope / load
# -----------------------------------------------------------------------------
def resolve_scope(
    user_id: UUID, *, scope_resolver: "ResolveAccessScopeUseCase"
) -> Tuple[AccessScope | None, SubjectError | None]:
    result = scope_resolver.execute(user_id)
    return result.scope, result.error


def load_subject_for_access(
    *,
    subject_id: UUID,
    user_id: UUID,
    subject_repository: SubjectRepository,
    scope_resolver: "ResolveAccessScopeUseCase",
) -> Tuple[Subject | None, AccessScope | None, SubjectError | None]:
    """
    Semántica findOne: NOT_FOUND antes que FORBIDDEN.

    Devuelve también el scope para que el caller valide cambios de centro.
    """
    subject = subject_repository.get_subject(subject_id)
    if subject is None:
        return None, None, not_found_error(RESOURCE_SUBJECT, subject_id)

    scope, error = resolve_scope(user_id, scope_resolver=scope_resolver)
    if error is not None:
        return None, None, error

    if not can_access_subject(subject, scope):
        logger.info(
            "Subject access denied",
            extra={"subject_id": str(subject_id), "center_id": str(subject.center_id)},
        )
        return None, scope, forbidden_error()

    return subject, scope, None


# -----------------------------------------------------------------------------
# Diff collaborators
# -----------------------------------------------------------------------------
def make_center_lookup(
    center_repository: CenterRepository, *, known: Iterable[Optional[Center]] = ()
) -> CenterLookup:
    """
    Lookup para domain.diff.

    - Usa primero centros ya cargados (evita queries repetidas).
    - Errores de storage -> None (el diff usará el nombre centinela).
    """
    cache = {center.id: center for center in known if center is not None}

    def lookup(center_id: UUID) -> Optional[Center]:
        if center_id in cache:
            return cache[center_id]
        try:
            center = center_repository.get_center(center_id)
        except DatabaseError:
            logger.warning(
                "Center lookup failed; using sentinel name in audit diff",
                extra={"center_id": str(center_id)},
            )
            return None
        if center is not None:
            cache[center_id] = center
        return center

    return lookup


def build_audit_entry(
    action: AuditAction, diff: SubjectDiff, *, user_id: UUID
) -> AuditLogEntry:
    return AuditLogEntry(
        id=uuid4(),
        action=action,
        diff=diff.to_payload(),
        subject_id=diff.subject_id,
        user_id=user_id,
    )
