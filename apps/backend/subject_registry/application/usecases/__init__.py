"""
===============================================================================
APPLICATION USE CASES (Public API / Exports)
===============================================================================

Expone los casos de uso por subdominio:
  - access: resolución de AccessScope (user -> centers)
  - subjects: CRUD scoped de sujetos + historia de auditoría
  - centers: centros visibles para el usuario
===============================================================================
"""

from .access import ResolveAccessScopeUseCase
from .centers import ListCentersUseCase
from .subjects import (
    CreateSubjectInput,
    CreateSubjectUseCase,
    DeleteSubjectUseCase,
    GetSubjectUseCase,
    ListSubjectAuditLogsUseCase,
    ListSubjectsUseCase,
    SubjectError,
    SubjectErrorCode,
    UpdateSubjectInput,
    UpdateSubjectUseCase,
)

__all__ = [
    "ResolveAccessScopeUseCase",
    "ListCentersUseCase",
    "CreateSubjectInput",
    "CreateSubjectUseCase",
    "DeleteSubjectUseCase",
    "GetSubjectUseCase",
    "ListSubjectAuditLogsUseCase",
    "ListSubjectsUseCase",
    "SubjectError",
    "SubjectErrorCode",
    "UpdateSubjectInput",
    "UpdateSubjectUseCase",
]
