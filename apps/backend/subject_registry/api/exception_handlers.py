"""
===============================================================================
TARJETA CRC — subject_registry/api/exception_handlers.py (Errores -> RFC7807)
===============================================================================

Responsabilidades:
  - Traducir excepciones de infraestructura (RegistryError y derivadas) a
    problem+json con un detalle público fijo.
  - Loguear el mensaje interno junto al error_id que recibe el cliente.
  - Fallback para excepciones no tipadas (500).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, handlers
  - crosscutting.exceptions: RegistryError, DatabaseError, UniqueConstraintError
  - crosscutting.config.get_settings (detalle visible fuera de producción)

Notas:
  - Los errores de negocio (403/404/409/422) NO pasan por acá: los routers
    los traducen desde SubjectError (interfaces/api/http/error_mapping.py).
===============================================================================
"""

from __future__ import annotations

from typing import NamedTuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    problem_response,
    request_validation_exception_handler,
)
from ..crosscutting.exceptions import DatabaseError, RegistryError, UniqueConstraintError
from ..crosscutting.logger import logger


class _ServiceErrorRule(NamedTuple):
    code: ErrorCode
    status_code: int
    public_detail: str
    log_level: str


# Orden: de la clase más específica a la más general.
_SERVICE_ERROR_RULES: tuple[tuple[type[RegistryError], _ServiceErrorRule], ...] = (
    (
        UniqueConstraintError,
        _ServiceErrorRule(ErrorCode.CONFLICT, 409, "El recurso ya existe.", "warning"),
    ),
    (
        DatabaseError,
        _ServiceErrorRule(
            ErrorCode.DATABASE_ERROR, 503, "Servicio de datos no disponible.", "error"
        ),
    ),
    (
        RegistryError,
        _ServiceErrorRule(ErrorCode.INTERNAL_ERROR, 500, "Error interno.", "error"),
    ),
)


def _rule_for(exc: RegistryError) -> _ServiceErrorRule:
    for exc_type, rule in _SERVICE_ERROR_RULES:
        if isinstance(exc, exc_type):
            return rule
    return _SERVICE_ERROR_RULES[-1][1]


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    """RegistryError y subclases -> status según _SERVICE_ERROR_RULES."""
    rule = _rule_for(exc)

    # El mensaje interno puede contener SQL o valores: solo va a logs.
    getattr(logger, rule.log_level)(
        "Error de servicio",
        extra={
            "code": rule.code.value,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "constraint": getattr(exc, "constraint", None),
        },
    )

    app_exc = AppHTTPException(
        rule.status_code,
        rule.code,
        rule.public_detail,
        errors=[{"error_id": exc.error_id}],
    )
    return problem_response(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Cualquier otra excepción: log con stacktrace + 500."""
    logger.error("Excepción no controlada", exc_info=exc)

    detail = "Error interno." if get_settings().is_production() else str(exc)
    return problem_response(
        request, AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Registra handlers en la app FastAPI.

    Starlette resuelve por MRO, así que un único handler para RegistryError
    cubre sus subclases; Exception queda como fallback.
    """
    app.add_exception_handler(RegistryError, registry_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
