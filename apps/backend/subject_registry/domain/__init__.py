"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Mantener estable el “surface area” del dominio.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .access_scope import AccessScope, can_access_subject
from .diff import (
    UNKNOWN_CENTER_NAME,
    CenterRef,
    FieldChange,
    RelationalChange,
    ScalarChange,
    SubjectDiff,
    build_create_diff,
    build_delete_diff,
    compute_update_diff,
)
from .entities import AuditAction, AuditLogEntry, Center, Subject
from .repositories import (
    AuditLogRepository,
    CenterRepository,
    MembershipRepository,
    SubjectRepository,
    UserRepository,
)
from .value_objects import ByIdentifier, ByNumber, SubjectRef, parse_subject_ref

__all__ = [
    # Entities
    "Center",
    "Subject",
    "AuditAction",
    "AuditLogEntry",
    # Access
    "AccessScope",
    "can_access_subject",
    # Diff
    "UNKNOWN_CENTER_NAME",
    "CenterRef",
    "FieldChange",
    "ScalarChange",
    "RelationalChange",
    "SubjectDiff",
    "compute_update_diff",
    "build_create_diff",
    "build_delete_diff",
    # Value objects
    "ByIdentifier",
    "ByNumber",
    "SubjectRef",
    "parse_subject_ref",
    # Repository Interfaces (Ports)
    "SubjectRepository",
    "CenterRepository",
    "MembershipRepository",
    "UserRepository",
    "AuditLogRepository",
]
