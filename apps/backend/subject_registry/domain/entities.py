"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (Center, Subject, AuditLogEntry)

Responsabilidades:
    - Definir estructuras centrales del negocio (sin infraestructura).
    - Brindar helpers mínimos para mantener invariantes simples.
    - Mantener tipos claros para casos de uso y repositorios.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - domain.diff: compara snapshots de Subject.
    - application/usecases: construyen/consumen estas entidades.

Principios:
    - Sin dependencias a DB/FastAPI.
    - AuditLogEntry es inmutable (append-only): frozen.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID


# ---------------------------------------------------------------------------
# Center
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Center:
    """Unidad organizacional dueña de sujetos (solo lookup en este core)."""

    id: UUID
    name: str


# ---------------------------------------------------------------------------
# Subject
# ---------------------------------------------------------------------------


@dataclass
class Subject:
    """
    Participante de un ensayo clínico.

    Invariantes:
      - number es único globalmente (lo garantiza storage + pre-check).
      - center_id referencia un Center existente.
      - birth_date es fecha calendario (sin hora).

    Notas:
      - center se completa solo en lecturas (join); no se persiste.
    """

    id: UUID
    number: str
    name: str
    birth_date: date
    center_id: UUID
    center: Optional[Center] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def with_changes(self, **changes: Any) -> "Subject":
        """Copia con campos reemplazados (el original no se modifica)."""
        return replace(self, **changes)


# ---------------------------------------------------------------------------
# Audit log
# ---------------------------------------------------------------------------


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True, slots=True)
class AuditLogEntry:
    """
    Registro inmutable de una escritura sobre un Subject.

    Notas:
      - subject_id / user_id son nullable para tolerar borrados posteriores.
      - diff es el payload serializado por domain.diff.SubjectDiff.to_payload().
      - created_at lo asigna storage; None antes de persistir.
    """

    id: UUID
    action: AuditAction
    diff: Dict[str, Any] = field(default_factory=dict)
    subject_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
