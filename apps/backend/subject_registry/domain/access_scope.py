"""
===============================================================================
TARJETA CRC — domain/access_scope.py
===============================================================================

Módulo:
    Política de Acceso por Centro (AccessScope)

Responsabilidades:
    - Representar el conjunto de centros sobre los que un usuario puede actuar.
    - Ser el ÚNICO predicado de autorización de los casos de uso de sujetos.
    - Ser 100% testeable: funciones puras, inputs explícitos.

Colaboradores:
    - application/usecases/access: ResolveAccessScopeUseCase construye el scope.
    - application/usecases/subjects: consultan allows() antes de leer/escribir.

Reglas:
    - Scope vacío NO es error: el usuario simplemente no ve nada.
    - Usuario inexistente NO es scope vacío (lo decide el caso de uso).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable
from uuid import UUID

from .entities import Subject


@dataclass(frozen=True, slots=True)
class AccessScope:
    """Centros accesibles para un usuario."""

    user_id: UUID
    center_ids: frozenset[UUID] = field(default_factory=frozenset)

    @classmethod
    def of(cls, user_id: UUID, center_ids: Iterable[UUID]) -> "AccessScope":
        return cls(user_id=user_id, center_ids=frozenset(center_ids))

    @property
    def is_empty(self) -> bool:
        return not self.center_ids

    def allows(self, center_id: UUID | None) -> bool:
        return center_id is not None and center_id in self.center_ids

    def sorted_center_ids(self) -> list[UUID]:
        """Orden estable para queries parametrizadas y tests."""
        return sorted(self.center_ids, key=str)


def can_access_subject(subject: Subject, scope: AccessScope) -> bool:
    return scope.allows(subject.center_id)
