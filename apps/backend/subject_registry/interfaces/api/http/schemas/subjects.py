"""
===============================================================================
TARJETA CRC — schemas/subjects.py
===============================================================================

Módulo:
    Schemas HTTP para Subjects y su historia de auditoría

Responsabilidades:
    - Definir DTOs de request/response para endpoints de sujetos.
    - Distinguir "campo ausente" de "campo enviado" en PATCH
      (model_dump(exclude_unset=True)).
    - Rechazar claves desconocidas en el borde (extra="forbid").

Colaboradores:
    - domain.entities.AuditAction
    - schemas.centers.CenterRes
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .....domain.entities import AuditAction
from .centers import CenterRes


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateSubjectReq(BaseModel):
    """Request para registrar un sujeto."""

    model_config = ConfigDict(extra="forbid")

    number: str = Field(..., description="Identificador de negocio (ej. SUB-001)")
    name: str = Field(..., description="Nombre del sujeto")
    birth_date: date = Field(..., description="Fecha de nacimiento (YYYY-MM-DD)")
    center_id: UUID = Field(..., description="Centro al que pertenece")


class UpdateSubjectReq(BaseModel):
    """
    Request para actualizar un sujeto (patch).

    Solo las claves enviadas se aplican; un null explícito se rechaza
    en el caso de uso (ningún campo es nullable).
    """

    model_config = ConfigDict(extra="forbid")

    number: str | None = None
    name: str | None = None
    birth_date: date | None = None
    center_id: UUID | None = None

    def to_changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class SubjectRes(BaseModel):
    """Sujeto con su centro resuelto."""

    id: UUID
    number: str
    name: str
    birth_date: date
    center_id: UUID
    center: CenterRes | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SubjectsListRes(BaseModel):
    subjects: list[SubjectRes]


class AuditLogRes(BaseModel):
    """Entrada de auditoría (diff tal como se persistió)."""

    id: UUID
    action: AuditAction
    subject_id: UUID | None = None
    user_id: UUID | None = None
    diff: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None


class AuditLogsListRes(BaseModel):
    audit_logs: list[AuditLogRes]
