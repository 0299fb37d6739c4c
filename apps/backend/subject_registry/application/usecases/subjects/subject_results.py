"""
===============================================================================
SUBJECT USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Subject Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para los casos de uso
    de sujetos, scope de acceso y auditoría, con un contrato estable para:
      - validaciones
      - autorización por centro (FORBIDDEN, distinto de NOT_FOUND)
      - recursos no encontrados (Subject / Center / User)
      - conflictos de unicidad (number)

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de lanzar excepciones
      “hacia afuera”: la capa HTTP mapea code -> status.
    - Los caminos “no-error” (scope vacío -> [], diff vacío -> sin auditoría)
      se expresan como éxito, nunca como error.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    subject_results models (module)

Responsibilities:
    - SubjectErrorCode: set acotado de categorías de error.
    - SubjectError: code + message + resource (+ field en validaciones).
    - Resultados: SubjectResult, SubjectListResult, DeleteSubjectResult,
      AuditLogListResult, AccessScopeResult, CenterListResult.

Collaborators:
    - domain.entities (Subject, Center, AuditLogEntry)
    - domain.access_scope.AccessScope
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.access_scope import AccessScope
from ....domain.entities import AuditLogEntry, Center, Subject


class SubjectErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: inputs inválidos o incompletos.
      - FORBIDDEN: el centro del recurso no está en el scope del usuario.
      - NOT_FOUND: el recurso no existe (Subject, Center o User).
      - CONFLICT: number duplicado.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class SubjectError:
    """
    Error de caso de uso.

    Campos:
      - code: categoría estable
      - message: descripción humana
      - resource: "Subject" | "Center" | "User" (para NOT_FOUND)
      - field: campo inválido (para VALIDATION_ERROR)
    """

    code: SubjectErrorCode
    message: str
    resource: str | None = None
    field: str | None = None


@dataclass
class SubjectResult:
    """Si error is None => subject presente."""

    subject: Subject | None = None
    error: SubjectError | None = None


@dataclass
class SubjectListResult:
    subjects: List[Subject] = field(default_factory=list)
    error: SubjectError | None = None


@dataclass
class DeleteSubjectResult:
    deleted: bool = False
    error: SubjectError | None = None


@dataclass
class AuditLogListResult:
    """entries: más nuevo primero; lista vacía si no se pudo resolver el sujeto."""

    entries: List[AuditLogEntry] = field(default_factory=list)
    error: SubjectError | None = None


@dataclass
class AccessScopeResult:
    scope: AccessScope | None = None
    error: SubjectError | None = None


@dataclass
class CenterListResult:
    centers: List[Center] = field(default_factory=list)
    error: SubjectError | None = None
