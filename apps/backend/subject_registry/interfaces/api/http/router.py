"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por bounded context (subjects/centers).

Patrones aplicados:
  - Feature-based modular routing.
  - Factory: build_router() para testear composición y evitar side-effects al importar.

Notas:
  - Este router se incluye desde subject_registry/api/main.py con prefix="/v1".
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.centers import router as centers_router
from .routers.subjects import router as subjects_router


def build_router() -> APIRouter:
    """Construye el router raíz v1."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(subjects_router)
    api_router.include_router(centers_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
