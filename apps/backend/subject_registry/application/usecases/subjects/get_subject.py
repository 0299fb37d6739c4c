"""
===============================================================================
USE CASE: Get Subject (findOne)
===============================================================================

Business Goal:
    Devolver un sujeto (con su centro) si el usuario tiene acceso a su centro.

Reglas (orden):
    1) id inexistente -> NOT_FOUND
    2) usuario inexistente -> NOT_FOUND ("User")
    3) centro fuera de scope -> FORBIDDEN

Collaborators:
    - subject_access.load_subject_for_access
===============================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from ....domain.repositories import SubjectRepository
from .subject_access import load_subject_for_access
from .subject_results import SubjectResult

if TYPE_CHECKING:
    from ..access.resolve_access_scope import ResolveAccessScopeUseCase


class GetSubjectUseCase:
    def __init__(
        self,
        subject_repository: SubjectRepository,
        scope_resolver: "ResolveAccessScopeUseCase",
    ) -> None:
        self._subjects = subject_repository
        self._scope_resolver = scope_resolver

    def execute(self, subject_id: UUID, user_id: UUID) -> SubjectResult:
        subject, _, error = load_subject_for_access(
            subject_id=subject_id,
            user_id=user_id,
            subject_repository=self._subjects,
            scope_resolver=self._scope_resolver,
        )
        if error is not None:
            return SubjectResult(error=error)
        return SubjectResult(subject=subject)
