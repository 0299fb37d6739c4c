"""
===============================================================================
USE CASE: List Centers (in scope)
===============================================================================

Business Goal:
    Listar los centros sobre los que el usuario puede operar (para elegir el
    centro al crear/mover sujetos).

Reglas:
    - Usuario inexistente -> NOT_FOUND ("User").
    - Scope vacío -> lista vacía.
    - Orden por nombre.
===============================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from ....domain.repositories import CenterRepository
from ..subjects.subject_access import resolve_scope
from ..subjects.subject_results import CenterListResult

if TYPE_CHECKING:
    from ..access.resolve_access_scope import ResolveAccessScopeUseCase


class ListCentersUseCase:
    def __init__(
        self,
        center_repository: CenterRepository,
        scope_resolver: "ResolveAccessScopeUseCase",
    ) -> None:
        self._centers = center_repository
        self._scope_resolver = scope_resolver

    def execute(self, user_id: UUID) -> CenterListResult:
        scope, error = resolve_scope(user_id, scope_resolver=self._scope_resolver)
        if error is not None:
            return CenterListResult(error=error)
        if scope.is_empty:
            return CenterListResult(centers=[])
        return CenterListResult(
            centers=self._centers.list_centers_by_ids(scope.sorted_center_ids())
        )
