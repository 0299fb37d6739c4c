"""
===============================================================================
TARJETA CRC — subject_registry/interfaces/api/http/routers/subjects.py
===============================================================================

Class/Module:
    Subject Router

Responsibilities:
    - Exponer endpoints HTTP para sujetos (CRUD scoped) y su historia.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir SubjectError -> RFC7807 (error_mapping).
    - Enforce de autenticación en el borde (Bearer JWT -> user_id).

Collaborators:
    - application.usecases (Create/List/Get/Update/Delete/ListSubjectAuditLogs)
    - identity.auth.require_user_id
    - container (factories DI)
    - schemas.subjects (DTOs Pydantic)

Patterns:
    - Controller / Router
    - Adapter (HTTP -> UseCase)
    - Error Mapping
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response

from .....application.usecases import (
    CreateSubjectInput,
    CreateSubjectUseCase,
    DeleteSubjectUseCase,
    GetSubjectUseCase,
    ListSubjectAuditLogsUseCase,
    ListSubjectsUseCase,
    UpdateSubjectInput,
    UpdateSubjectUseCase,
)
from .....container import (
    get_create_subject_use_case,
    get_delete_subject_use_case,
    get_get_subject_use_case,
    get_list_subject_audit_logs_use_case,
    get_list_subjects_use_case,
    get_update_subject_use_case,
)
from .....crosscutting.error_responses import internal_error
from .....domain.value_objects import SubjectRef
from .....identity.auth import require_user_id
from ..dependencies import get_subject_ref, to_audit_log_res, to_subject_res
from ..error_mapping import raise_subject_error
from ..schemas.subjects import (
    AuditLogsListRes,
    CreateSubjectReq,
    SubjectRes,
    SubjectsListRes,
    UpdateSubjectReq,
)

router = APIRouter()


@router.get("/subjects", response_model=SubjectsListRes, tags=["subjects"])
def list_subjects(
    use_case: ListSubjectsUseCase = Depends(get_list_subjects_use_case),
    user_id: UUID = Depends(require_user_id),
):
    result = use_case.execute(user_id)
    if result.error is not None:
        raise_subject_error(result.error)
    return SubjectsListRes(subjects=[to_subject_res(s) for s in result.subjects])


@router.post(
    "/subjects",
    response_model=SubjectRes,
    status_code=201,
    tags=["subjects"],
)
def create_subject(
    req: CreateSubjectReq,
    use_case: CreateSubjectUseCase = Depends(get_create_subject_use_case),
    user_id: UUID = Depends(require_user_id),
):
    input_data = CreateSubjectInput(
        number=req.number,
        name=req.name,
        birth_date=req.birth_date,
        center_id=req.center_id,
    )
    result = use_case.execute(input_data, user_id)
    if result.error is not None:
        raise_subject_error(result.error)
    if result.subject is None:
        raise internal_error()
    return to_subject_res(result.subject)


@router.get(
    "/subjects/{subject_id}",
    response_model=SubjectRes,
    tags=["subjects"],
)
def get_subject(
    subject_id: UUID,
    use_case: GetSubjectUseCase = Depends(get_get_subject_use_case),
    user_id: UUID = Depends(require_user_id),
):
    result = use_case.execute(subject_id, user_id)
    if result.error is not None:
        raise_subject_error(result.error)
    if result.subject is None:
        raise internal_error()
    return to_subject_res(result.subject)


@router.patch(
    "/subjects/{subject_id}",
    response_model=SubjectRes,
    tags=["subjects"],
)
def update_subject(
    subject_id: UUID,
    req: UpdateSubjectReq,
    use_case: UpdateSubjectUseCase = Depends(get_update_subject_use_case),
    user_id: UUID = Depends(require_user_id),
):
    result = use_case.execute(
        subject_id, UpdateSubjectInput(changes=req.to_changes()), user_id
    )
    if result.error is not None:
        raise_subject_error(result.error)
    if result.subject is None:
        raise internal_error()
    return to_subject_res(result.subject)


@router.delete(
    "/subjects/{subject_id}",
    status_code=204,
    tags=["subjects"],
)
def delete_subject(
    subject_id: UUID,
    use_case: DeleteSubjectUseCase = Depends(get_delete_subject_use_case),
    user_id: UUID = Depends(require_user_id),
):
    result = use_case.execute(subject_id, user_id)
    if result.error is not None:
        raise_subject_error(result.error)
    return Response(status_code=204)


@router.get(
    "/subjects/{subject_ref}/audit-logs",
    response_model=AuditLogsListRes,
    tags=["audit"],
)
def list_subject_audit_logs(
    subject_ref: SubjectRef = Depends(get_subject_ref),
    use_case: ListSubjectAuditLogsUseCase = Depends(
        get_list_subject_audit_logs_use_case
    ),
    user_id: UUID = Depends(require_user_id),
):
    """Historia del sujeto (más nuevo primero), por UUID o por number."""
    result = use_case.execute(subject_ref, user_id)
    if result.error is not None:
        raise_subject_error(result.error)
    return AuditLogsListRes(audit_logs=[to_audit_log_res(e) for e in result.entries])
