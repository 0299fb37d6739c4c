"""Router de Centers: centros visibles para el usuario autenticado."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from .....application.usecases import ListCentersUseCase
from .....container import get_list_centers_use_case
from .....identity.auth import require_user_id
from ..dependencies import to_center_res
from ..error_mapping import raise_subject_error
from ..schemas.centers import CentersListRes

router = APIRouter()


@router.get("/centers", response_model=CentersListRes, tags=["centers"])
def list_centers(
    use_case: ListCentersUseCase = Depends(get_list_centers_use_case),
    user_id: UUID = Depends(require_user_id),
):
    result = use_case.execute(user_id)
    if result.error is not None:
        raise_subject_error(result.error)
    return CentersListRes(centers=[to_center_res(c) for c in result.centers])
