# apps/backend/subject_registry/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores internos)
===============================================================================

Objetivo
--------
Excepciones internas coherentes, con error_code estable, error_id para
correlación con logs y un message “humano” (sin filtrar secretos).

Los errores de NEGOCIO (forbidden/not found/conflict) NO son excepciones:
los casos de uso los devuelven tipados en sus Result.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  RegistryError + subclases

Responsabilidades:
  - Estandarizar errores de infraestructura que luego se mapean a HTTP
  - Distinguir la violación de unicidad (para mapearla a CONFLICT)

Colaboradores:
  - infrastructure/repositories/postgres/* (las lanzan)
  - application/usecases/subjects/* (capturan UniqueConstraintError)
  - api/exception_handlers.py (mapea a AppHTTPException)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4

# Nombre de la constraint de unicidad de subjects.number (ver migración 001).
SUBJECT_NUMBER_CONSTRAINT = "uq_subjects_number"


class RegistryError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      RegistryError

    Responsabilidades:
      - Base de errores de infraestructura del registro
      - Generar error_id para cruzar respuesta HTTP y logs
      - Conservar la excepción de origen (cause) sin exponerla

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "REGISTRY_ERROR"

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.error_id = uuid4().hex


class DatabaseError(RegistryError):
    """Postgres no disponible, timeout o query fallida."""

    error_code: str = "DATABASE_ERROR"


class UniqueConstraintError(DatabaseError):
    """Violación de unicidad en storage (Postgres o in-memory)."""

    error_code: str = "CONFLICT"

    def __init__(
        self,
        message: str,
        *,
        constraint: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.constraint = constraint

    @property
    def is_subject_number(self) -> bool:
        return self.constraint == SUBJECT_NUMBER_CONSTRAINT
