"""
===============================================================================
SUBJECT USE CASES PACKAGE (Public API / Exports)
===============================================================================

Responsibilities:
    - Re-exportar casos de uso de sujetos y auditoría.
    - Re-exportar DTOs/resultados y errores compartidos.
    - Definir __all__ como contrato de API pública del paquete.
===============================================================================
"""

from .create_subject import CreateSubjectInput, CreateSubjectUseCase
from .delete_subject import DeleteSubjectUseCase
from .get_subject import GetSubjectUseCase
from .list_subject_audit_logs import ListSubjectAuditLogsUseCase
from .list_subjects import ListSubjectsUseCase
from .subject_access import make_center_lookup
from .subject_results import (
    AccessScopeResult,
    AuditLogListResult,
    CenterListResult,
    DeleteSubjectResult,
    SubjectError,
    SubjectErrorCode,
    SubjectListResult,
    SubjectResult,
)
from .update_subject import UpdateSubjectInput, UpdateSubjectUseCase

__all__ = [
    # Use cases
    "CreateSubjectUseCase",
    "ListSubjectsUseCase",
    "GetSubjectUseCase",
    "UpdateSubjectUseCase",
    "DeleteSubjectUseCase",
    "ListSubjectAuditLogsUseCase",
    # DTOs
    "CreateSubjectInput",
    "UpdateSubjectInput",
    # Results
    "SubjectError",
    "SubjectErrorCode",
    "SubjectResult",
    "SubjectListResult",
    "DeleteSubjectResult",
    "AuditLogListResult",
    "AccessScopeResult",
    "CenterListResult",
    # Helpers
    "make_center_lookup",
]
