"""
===============================================================================
USE CASE: Update Subject (partial)
===============================================================================

Name:
    Update Subject Use Case

Business Goal:
    Aplicar un update PARCIAL sobre un sujeto accesible y registrar una entrada
    UPDATE con el diff campo a campo, solo si algún valor realmente cambió.

Why (Context / Intención):
    - Invariantes:
        * solo se aplican las claves presentes en `changes`
        * claves desconocidas o null explícito -> VALIDATION_ERROR
          (ningún campo editable es nullable)
        * mover de centro requiere que el centro nuevo esté en scope y exista
        * number nuevo no puede colisionar con otro sujeto
        * diff vacío -> no se escribe nada (ni subject ni auditoría)
        * subject + auditoría se escriben juntos (todo o nada)

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateSubjectUseCase

Responsibilities:
    - Validar/normalizar `changes`.
    - Cargar y autorizar el sujeto (semántica findOne).
    - Validar centro destino y unicidad del number.
    - Calcular diff por igualdad de valor y persistir de forma atómica.

Collaborators:
    - SubjectRepository.get_subject / get_subject_by_number / update_subject
    - CenterRepository.get_center
    - ResolveAccessScopeUseCase
    - domain.diff.compute_update_diff
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Final, Mapping
from uuid import UUID

from ....crosscutting.exceptions import UniqueConstraintError
from ....crosscutting.logger import logger
from ....domain.diff import UNKNOWN_CENTER_NAME, compute_update_diff
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
    RESOURCE_SUBJECT,
    build_audit_entry,
    conflict_error,
    forbidden_error,
    load_subject_for_access,
    make_center_lookup,
    not_found_error,
    validation_error,
)
from .subject_results import SubjectResult

if TYPE_CHECKING:
    from ..access.resolve_access_scope import ResolveAccessScopeUseCase

UPDATABLE_FIELDS: Final[tuple[str, ...]] = ("number", "name", "birth_date", "center_id")


@dataclass(frozen=True)
class UpdateSubjectInput:
    """
    DTO de entrada: SOLO las claves provistas por el caller.

    Ej: {"name": "Jane Doe"} deja number/birth_date/center_id intactos.
    """

    changes: Mapping[str, Any] = field(default_factory=dict)


class UpdateSubjectUseCase:
    """Use Case (Command): update parcial + auditoría UPDATE si hay diff."""

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

    def execute(
        self, subject_id: UUID, input_data: UpdateSubjectInput, user_id: UUID
    ) -> SubjectResult:
        # ---------------------------------------------------------------------
        # 1) Validar y normalizar solo los campos provistos.
        # ---------------------------------------------------------------------
        try:
            normalized = self._normalize_changes(input_data.changes)
        except InvalidValueError as exc:
            return SubjectResult(error=validation_error(exc.message, exc.field))

        # ---------------------------------------------------------------------
        # 2) Cargar sujeto + autorización (NOT_FOUND antes que FORBIDDEN).
        # ---------------------------------------------------------------------
        before, scope, error = load_subject_for_access(
            subject_id=subject_id,
            user_id=user_id,
            subject_repository=self._subjects,
            scope_resolver=self._scope_resolver,
        )
        if error is not None:
            return SubjectResult(error=error)

        after = before.with_changes(center=None, **normalized)

        # ---------------------------------------------------------------------
        # 3) Cambio de centro: en scope y existente.
        # ---------------------------------------------------------------------
        new_center = None
        if after.center_id != before.center_id:
            if not scope.allows(after.center_id):
                return SubjectResult(error=forbidden_error())
            new_center = self._centers.get_center(after.center_id)
            if new_center is None:
                return SubjectResult(
                    error=not_found_error(RESOURCE_CENTER, after.center_id)
                )

        # ---------------------------------------------------------------------
        # 4) Cambio de number: pre-check de unicidad.
        # ---------------------------------------------------------------------
        if after.number != before.number and self._number_taken(
            after.number, subject_id
        ):
            return SubjectResult(error=conflict_error(after.number))

        # ---------------------------------------------------------------------
        # 5) Diff por igualdad de valor; vacío -> no-op.
        # ---------------------------------------------------------------------
        diff = compute_update_diff(
            before,
            after,
            make_center_lookup(self._centers, known=[before.center, new_center]),
            unknown_center_name=self._unknown_center_name,
        )
        if diff.is_empty:
            logger.info(
                "Subject update without changes; audit entry skipped",
                extra={"subject_id": str(subject_id)},
            )
            return SubjectResult(subject=before)

        # ---------------------------------------------------------------------
        # 6) Persistir subject + auditoría UPDATE.
        # ---------------------------------------------------------------------
        entry = build_audit_entry(AuditAction.UPDATE, diff, user_id=user_id)
        try:
            updated = self._subjects.update_subject(after, audit_entry=entry)
        except UniqueConstraintError as exc:
            if not exc.is_subject_number:
                raise
            return SubjectResult(error=conflict_error(after.number))

        if updated is None:
            # Race condition: puede desaparecer entre read y write.
            return SubjectResult(error=not_found_error(RESOURCE_SUBJECT, subject_id))

        logger.info(
            "Subject updated",
            extra={
                "subject_id": str(subject_id),
                "changed_fields": sorted(diff.changes),
                "audit_entry_id": str(entry.id),
            },
        )
        return SubjectResult(subject=updated)

    # =========================================================================
    # Helpers privados
    # =========================================================================

    def _normalize_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise InvalidValueError(
                unknown[0], f"Unknown field(s): {', '.join(unknown)}"
            )

        normalizers: dict[str, Callable[[Any], Any]] = {
            "number": normalize_number,
            "name": lambda v: normalize_name(v, max_length=self._max_name_chars),
            "birth_date": normalize_birth_date,
            "center_id": normalize_center_id,
        }

        normalized: dict[str, Any] = {}
        for name, value in changes.items():
            if value is None:
                raise InvalidValueError(name, f"{name} cannot be null")
            normalized[name] = normalizers[name](value)
        return normalized

    def _number_taken(self, number: str, subject_id: UUID) -> bool:
        existing: Subject | None = self._subjects.get_subject_by_number(number)
        return existing is not None and existing.id != subject_id
