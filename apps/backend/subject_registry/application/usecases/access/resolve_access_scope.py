"""
===============================================================================
USE CASE: Resolve Access Scope
===============================================================================

Name:
    Resolve Access Scope Use Case

Business Goal:
    Dado un user_id, devolver el conjunto de centros sobre los que puede
    leer/escribir sujetos.

Why (Context / Intención):
    - Es el pre-filtro de TODAS las operaciones sobre sujetos.
    - Usuario inexistente y usuario sin centros son casos distintos:
        * inexistente -> NOT_FOUND (resource "User")
        * sin memberships -> scope vacío (éxito)

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ResolveAccessScopeUseCase

Responsibilities:
    - Verificar existencia del usuario.
    - Cargar memberships y construir AccessScope inmutable.

Collaborators:
    - UserRepository.get_user(user_id)
    - MembershipRepository.list_center_ids_for_user(user_id)
    - domain.access_scope.AccessScope
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....domain.access_scope import AccessScope
from ....domain.repositories import MembershipRepository, UserRepository
from ..subjects.subject_results import (
    AccessScopeResult,
    SubjectError,
    SubjectErrorCode,
)


class ResolveAccessScopeUseCase:
    """Use Case (Query): user_id -> AccessScope."""

    def __init__(
        self,
        user_repository: UserRepository,
        membership_repository: MembershipRepository,
    ) -> None:
        self._users = user_repository
        self._memberships = membership_repository

    def execute(self, user_id: UUID) -> AccessScopeResult:
        if self._users.get_user(user_id) is None:
            return AccessScopeResult(
                error=SubjectError(
                    code=SubjectErrorCode.NOT_FOUND,
                    message=f"User '{user_id}' not found.",
                    resource="User",
                )
            )

        center_ids = self._memberships.list_center_ids_for_user(user_id)
        return AccessScopeResult(scope=AccessScope.of(user_id, center_ids))
