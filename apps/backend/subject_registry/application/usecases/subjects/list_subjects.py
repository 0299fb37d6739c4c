"""
===============================================================================
USE CASE: List Subjects (findAll)
===============================================================================

Business Goal:
    Listar los sujetos de los centros visibles para el usuario, ordenados por
    number ascendente (byte-wise, case-sensitive).

Reglas:
    - Usuario inexistente -> NOT_FOUND ("User").
    - Scope vacío -> lista vacía (nunca error, sin consultar storage).

Collaborators:
    - ResolveAccessScopeUseCase
    - SubjectRepository.list_subjects_by_centers
===============================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from ....domain.repositories import SubjectRepository
from .subject_access import resolve_scope
from .subject_results import SubjectListResult

if TYPE_CHECKING:
    from ..access.resolve_access_scope import ResolveAccessScopeUseCase


class ListSubjectsUseCase:
    """Use Case (Query): sujetos visibles para el usuario."""

    def __init__(
        self,
        subject_repository: SubjectRepository,
        scope_resolver: "ResolveAccessScopeUseCase",
    ) -> None:
        self._subjects = subject_repository
        self._scope_resolver = scope_resolver

    def execute(self, user_id: UUID) -> SubjectListResult:
        scope, error = resolve_scope(user_id, scope_resolver=self._scope_resolver)
        if error is not None:
            return SubjectListResult(error=error)

        if scope.is_empty:
            return SubjectListResult(subjects=[])

        subjects = self._subjects.list_subjects_by_centers(scope.sorted_center_ids())
        return SubjectListResult(subjects=subjects)
