"""
===============================================================================
USE CASE: Delete Subject
===============================================================================

Name:
    Delete Subject Use Case

Business Goal:
    Borrar físicamente un sujeto accesible dejando una entrada DELETE con el
    estado previo completo, de modo que su historia siga siendo consultable
    por id o por number.

Reglas:
    - Misma autorización que findOne (NOT_FOUND antes que FORBIDDEN).
    - DELETE + borrado en una sola transacción.
    - Las entradas previas conservan el subject_id embebido en su diff.

Collaborators:
    - SubjectRepository.get_subject / delete_subject
    - CenterRepository (nombre del centro para el diff)
    - domain.diff.build_delete_diff
===============================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.diff import UNKNOWN_CENTER_NAME, build_delete_diff
from ....domain.entities import AuditAction
from ....domain.repositories import CenterRepository, SubjectRepository
from .subject_access import (
    RESOURCE_SUBJECT,
    build_audit_entry,
    load_subject_for_access,
    make_center_lookup,
    not_found_error,
)
from .subject_results import DeleteSubjectResult

if TYPE_CHECKING:
    from ..access.resolve_access_scope import ResolveAccessScopeUseCase


class DeleteSubjectUseCase:
    def __init__(
        self,
        subject_repository: SubjectRepository,
        center_repository: CenterRepository,
        scope_resolver: "ResolveAccessScopeUseCase",
        *,
        unknown_center_name: str = UNKNOWN_CENTER_NAME,
    ) -> None:
        self._subjects = subject_repository
        self._centers = center_repository
        self._scope_resolver = scope_resolver
        self._unknown_center_name = unknown_center_name

    def execute(self, subject_id: UUID, user_id: UUID) -> DeleteSubjectResult:
        subject, _, error = load_subject_for_access(
            subject_id=subject_id,
            user_id=user_id,
            subject_repository=self._subjects,
            scope_resolver=self._scope_resolver,
        )
        if error is not None:
            return DeleteSubjectResult(error=error)

        diff = build_delete_diff(
            subject,
            make_center_lookup(self._centers, known=[subject.center]),
            unknown_center_name=self._unknown_center_name,
        )
        entry = build_audit_entry(AuditAction.DELETE, diff, user_id=user_id)

        if not self._subjects.delete_subject(subject_id, audit_entry=entry):
            # Race condition: borrado concurrente entre read y write.
            return DeleteSubjectResult(
                error=not_found_error(RESOURCE_SUBJECT, subject_id)
            )

        logger.info(
            "Subject deleted",
            extra={"subject_id": str(subject_id), "audit_entry_id": str(entry.id)},
        )
        return DeleteSubjectResult(deleted=True)
