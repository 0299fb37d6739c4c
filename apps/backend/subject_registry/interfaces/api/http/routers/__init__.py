"""
===============================================================================
TARJETA CRC — subject_registry/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer routers segmentados por bounded context para ser incluidos por el
      router principal.

Collaborators:
    - routers.subjects
    - routers.centers

Notas:
    - Este archivo NO define endpoints. Solo re-exporta routers.
===============================================================================
"""

from .centers import router as centers_router
from .subjects import router as subjects_router

__all__ = [
    "centers_router",
    "subjects_router",
]
