"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir SubjectError (casos de uso) a HTTP Exceptions RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener el dominio libre de HTTP.

Reglas:
  - Los use cases devuelven errores tipados (code + message [+ resource/field]).
  - NOT_FOUND conserva el mensaje del caso de uso (ya nombra recurso e id).
  - Un código desconocido cae a 500.

Colaboradores:
  - application.usecases.SubjectError / SubjectErrorCode
  - crosscutting.error_responses (validation_error, forbidden, etc.)
===============================================================================
"""

from __future__ import annotations

from ....application.usecases import SubjectError, SubjectErrorCode
from ....crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    conflict,
    forbidden,
    internal_error,
    validation_error,
)


def to_http_error(error: SubjectError) -> AppHTTPException:
    """Traduce SubjectError -> AppHTTPException (sin lanzarla)."""
    if error.code == SubjectErrorCode.VALIDATION_ERROR:
        errors = [{"field": error.field, "msg": error.message}] if error.field else None
        return validation_error(error.message, errors)
    if error.code == SubjectErrorCode.FORBIDDEN:
        return forbidden(error.message)
    if error.code == SubjectErrorCode.CONFLICT:
        return conflict(error.message)
    if error.code == SubjectErrorCode.NOT_FOUND:
        return AppHTTPException(404, ErrorCode.NOT_FOUND, error.message)
    return internal_error(error.message)


def raise_subject_error(error: SubjectError) -> None:
    raise to_http_error(error)
