"""
===============================================================================
USE CASE: Create Subject
===============================================================================

Name:
    Create Subject Use Case

Business Goal:
    Registrar un nuevo sujeto en un centro del scope del usuario, dejando una
    entrada de auditoría CREATE con el set completo de campos iniciales.

Why (Context / Intención):
    - Invariantes:
        * number único global (aunque sea en otro centro)
        * center_id dentro del scope del usuario
        * center_id referencia un centro existente
        * subject + auditoría se escriben juntos (todo o nada)

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateSubjectUseCase

Responsibilities:
    - Normalizar y validar input.
    - Resolver scope y autorizar el centro destino.
    - Verificar existencia del centro y unicidad del number.
    - Construir diff CREATE y persistir de forma atómica.

Collaborators:
    - SubjectRepository.get_subject_by_number / create_subject
    - CenterRepository.get_center
    - ResolveAccessScopeUseCase
    - domain.diff.build_create_diff
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from ....crosscutting.exceptions import UniqueConstraintError
from ....crosscutting.logger import logger
from ....domain.diff import UNKNOWN_CENTER_NAME, build_create_diff
from ....domain.entities import AuditAction, Subject
from ....domain.repositories import CenterRepository, SubjectRepository
from ....domain.value_objects import (
    NAME_MAX_LENGTH,
    InvalidValueError,
    normalize_birth_date,
    normalize_center_id,
    normalize_name,
    normalize_number,
)
from .subject_access import (
    RESOURCE_CENTER,
    build_audit_entry,
    conflict_error,
    forbidden_error,
    make_center_lookup,
    not_found_error,
    resolve_scope,
    validation_error,
)
from .subject_results import SubjectResult

if TYPE_CHECKING:
    from ..access.resolve_access_scope import ResolveAccessScopeUseCase


@dataclass(frozen=True)
class CreateSubjectInput:
    """
    DTO de entrada.

    birth_date acepta date o string ISO; center_id acepta UUID o string.
    """

    number: str
    name: str
    birth_date: date | str
    center_id: UUID | str


class CreateSubjectUseCase:
    """Use Case (Command): alta de sujeto + auditoría CREATE."""

    def __init__(
        self,
        subject_repository: SubjectRepository,
        center_repository: CenterRepository,
        scope_resolver: "ResolveAccessScopeUseCase",
        *,
        max_name_chars: int = NAME_MAX_LENGTH,
        unknown_center_name: str = UNKNOWN_CENTER_NAME,
    ) -> None:
        self._subjects = subject_repository
        self._centers = center_repository
        self._scope_resolver = scope_resolver
        self._max_name_chars = max_name_chars
        self._unknown_center_name = unknown_center_name

    def execute(self, input_data: CreateSubjectInput, user_id: UUID) -> SubjectResult:
        # ---------------------------------------------------------------------
        # 1) Normalizar y validar input.
        # ---------------------------------------------------------------------
        try:
            number = normalize_number(input_data.number)
            name = normalize_name(input_data.name, max_length=self._max_name_chars)
            birth_date = normalize_birth_date(input_data.birth_date)
            center_id = normalize_center_id(input_data.center_id)
        except InvalidValueError as exc:
            return SubjectResult(error=validation_error(exc.message, exc.field))

        # ---------------------------------------------------------------------
        # 2) Resolver scope (usuario inexistente -> NOT_FOUND).
        # ---------------------------------------------------------------------
        scope, error = resolve_scope(user_id, scope_resolver=self._scope_resolver)
        if error is not None:
            return SubjectResult(error=error)

        # ---------------------------------------------------------------------
        # 3) Autorización: el centro destino debe estar en scope.
        # ---------------------------------------------------------------------
        if not scope.allows(center_id):
            return SubjectResult(error=forbidden_error())

        # ---------------------------------------------------------------------
        # 4) El centro debe existir.
        # ---------------------------------------------------------------------
        center = self._centers.get_center(center_id)
        if center is None:
            return SubjectResult(error=not_found_error(RESOURCE_CENTER, center_id))

        # ---------------------------------------------------------------------
        # 5) Unicidad de number (pre-check; storage es el backstop).
        # ---------------------------------------------------------------------
        if self._subjects.get_subject_by_number(number) is not None:
            return SubjectResult(error=conflict_error(number))

        # ---------------------------------------------------------------------
        # 6) Persistir subject + auditoría CREATE.
        # ---------------------------------------------------------------------
        subject = Subject(
            id=uuid4(),
            number=number,
            name=name,
            birth_date=birth_date,
            center_id=center_id,
        )
        diff = build_create_diff(
            subject,
            make_center_lookup(self._centers, known=[center]),
            unknown_center_name=self._unknown_center_name,
        )
        entry = build_audit_entry(AuditAction.CREATE, diff, user_id=user_id)

        try:
            created = self._subjects.create_subject(subject, audit_entry=entry)
        except UniqueConstraintError as exc:
            if not exc.is_subject_number:
                raise
            return SubjectResult(error=conflict_error(number))

        logger.info(
            "Subject created",
            extra={
                "subject_id": str(created.id),
                "center_id": str(center_id),
                "audit_entry_id": str(entry.id),
            },
        )
        return SubjectResult(subject=created)
