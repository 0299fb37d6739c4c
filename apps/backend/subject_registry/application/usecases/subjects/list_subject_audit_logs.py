"""
===============================================================================
USE CASE: List Subject Audit Logs (alternate-key lookup)
===============================================================================

Name:
    List Subject Audit Logs Use Case

Business Goal:
    Devolver la historia de auditoría de un sujeto (más nuevo primero),
    identificándolo por id o por number, incluso si el sujeto ya fue borrado.

Why (Context / Intención):
    - Un sujeto borrado ya no se encuentra por number en `subjects`; su
      historia se recupera desde el number embebido en los diffs.
    - La historia nunca se filtra a usuarios sin acceso al centro del sujeto
      (actual o último conocido).

Algoritmo:
    1) Resolver scope (usuario inexistente -> NOT_FOUND "User").
    2) Resolver subject_id:
         ByIdentifier -> directo
         ByNumber     -> sujeto vivo por number
                      -> primera entrada (más antigua) cuyo diff tenga ese number
         sin resolución -> []
    3) Listar entradas por subject_id directo o embebido.
    4) Centro autorizante: el del sujeto vivo, o el último conocido en la
       historia. Fuera de scope o indeterminable -> FORBIDDEN.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ListSubjectAuditLogsUseCase

Collaborators:
    - SubjectRepository.get_subject / get_subject_by_number
    - AuditLogRepository.list_entries_for_subject / find_first_entry_by_number
    - ResolveAccessScopeUseCase
    - domain.diff.payload_subject_id / payload_center_id
===============================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.diff import payload_center_id, payload_subject_id
from ....domain.entities import AuditLogEntry, Subject
from ....domain.repositories import AuditLogRepository, SubjectRepository
from ....domain.value_objects import ByIdentifier, ByNumber, SubjectRef
from .subject_access import forbidden_error, resolve_scope
from .subject_results import AuditLogListResult

if TYPE_CHECKING:
    from ..access.resolve_access_scope import ResolveAccessScopeUseCase


class ListSubjectAuditLogsUseCase:
    """Use Case (Query): historia de auditoría por id o number."""

    def __init__(
        self,
        subject_repository: SubjectRepository,
        audit_log_repository: AuditLogRepository,
        scope_resolver: "ResolveAccessScopeUseCase",
    ) -> None:
        self._subjects = subject_repository
        self._audit = audit_log_repository
        self._scope_resolver = scope_resolver

    def execute(self, subject_ref: SubjectRef, user_id: UUID) -> AuditLogListResult:
        # ---------------------------------------------------------------------
        # 1) Scope del usuario.
        # ---------------------------------------------------------------------
        scope, error = resolve_scope(user_id, scope_resolver=self._scope_resolver)
        if error is not None:
            return AuditLogListResult(error=error)

        # ---------------------------------------------------------------------
        # 2) Resolver el subject_id (y el sujeto vivo, si existe).
        # ---------------------------------------------------------------------
        subject_id, live = self._resolve_subject(subject_ref)
        if subject_id is None:
            return AuditLogListResult(entries=[])

        # ---------------------------------------------------------------------
        # 3) Historia (directa o embebida), más nuevo primero.
        # ---------------------------------------------------------------------
        entries = self._audit.list_entries_for_subject(subject_id)
        if live is None and not entries:
            return AuditLogListResult(entries=[])

        # ---------------------------------------------------------------------
        # 4) Autorización por centro actual o último conocido.
        # ---------------------------------------------------------------------
        center_id = live.center_id if live is not None else _last_known_center(entries)
        if not scope.allows(center_id):
            logger.info(
                "Audit history access denied",
                extra={
                    "subject_id": str(subject_id),
                    "center_id": str(center_id) if center_id else None,
                },
            )
            return AuditLogListResult(error=forbidden_error())

        return AuditLogListResult(entries=entries)

    # =========================================================================
    # Helpers privados
    # =========================================================================

    def _resolve_subject(
        self, subject_ref: SubjectRef
    ) -> tuple[Optional[UUID], Optional[Subject]]:
        if isinstance(subject_ref, ByIdentifier):
            return subject_ref.subject_id, self._subjects.get_subject(
                subject_ref.subject_id
            )

        if isinstance(subject_ref, ByNumber):
            live = self._subjects.get_subject_by_number(subject_ref.number)
            if live is not None:
                return live.id, live

            first = self._audit.find_first_entry_by_number(subject_ref.number)
            if first is None:
                return None, None
            return first.subject_id or payload_subject_id(first.diff), None

        raise TypeError(f"Unsupported subject reference: {subject_ref!r}")


def _last_known_center(entries: List[AuditLogEntry]) -> Optional[UUID]:
    """Primer centro encontrado recorriendo la historia de más nuevo a más viejo."""
    for entry in entries:
        center_id = payload_center_id(entry.diff)
        if center_id is not None:
            return center_id
    return None
