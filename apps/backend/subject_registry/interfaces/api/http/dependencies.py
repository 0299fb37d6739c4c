"""
===============================================================================
TARJETA CRC — dependencies.py (Dependencias y helpers comunes)
===============================================================================

Responsabilidades:
  - Centralizar helpers que se repiten en routers:
      * parseo del path param subject_ref -> SubjectRef (id | number)
      * mapeo entidad de dominio -> DTO HTTP

Colaboradores:
  - domain.value_objects.parse_subject_ref
  - schemas.* (DTOs de respuesta)
===============================================================================
"""

from __future__ import annotations

from fastapi import Path

from ....domain.entities import AuditLogEntry, Center, Subject
from ....domain.value_objects import SubjectRef, parse_subject_ref
from .schemas.centers import CenterRes
from .schemas.subjects import AuditLogRes, SubjectRes


def get_subject_ref(
    subject_ref: str = Path(..., min_length=1, description="UUID o number del sujeto"),
) -> SubjectRef:
    """La variante (ByIdentifier/ByNumber) se decide acá, no en el core."""
    return parse_subject_ref(subject_ref)


def to_center_res(center: Center) -> CenterRes:
    return CenterRes(id=center.id, name=center.name)


def to_subject_res(subject: Subject) -> SubjectRes:
    return SubjectRes(
        id=subject.id,
        number=subject.number,
        name=subject.name,
        birth_date=subject.birth_date,
        center_id=subject.center_id,
        center=to_center_res(subject.center) if subject.center else None,
        created_at=subject.created_at,
        updated_at=subject.updated_at,
    )


def to_audit_log_res(entry: AuditLogEntry) -> AuditLogRes:
    return AuditLogRes(
        id=entry.id,
        action=entry.action,
        subject_id=entry.subject_id,
        user_id=entry.user_id,
        diff=dict(entry.diff),
        created_at=entry.created_at,
    )
