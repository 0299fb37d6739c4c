# apps/backend/subject_registry/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Problem Details (RFC 7807) para la API de sujetos
===============================================================================

Objetivo
--------
Toda respuesta de error sale como application/problem+json con un "code"
estable (para clientes) y, si existe, el request_id (para soporte).

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  ErrorCode + AppHTTPException + problem_response()

Responsabilidades:
  - Catálogo de códigos con su status HTTP y título
  - Serializar ErrorDetail como problem+json
  - Factories usadas por routers, auth y exception handlers

Colaboradores:
  - crosscutting/middleware.py (request.state.request_id)
  - api/exception_handlers.py
  - interfaces/api/http/error_mapping.py
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"
PROBLEM_TYPE_PREFIX = "urn:subject-registry:problem:"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    @property
    def problem_type(self) -> str:
        return PROBLEM_TYPE_PREFIX + self.value.lower().replace("_", "-")


# code -> (status por defecto, título)
_CATALOG: dict[ErrorCode, tuple[int, str]] = {
    ErrorCode.VALIDATION_ERROR: (422, "Datos inválidos"),
    ErrorCode.UNAUTHORIZED: (401, "No autenticado"),
    ErrorCode.FORBIDDEN: (403, "Fuera del alcance del usuario"),
    ErrorCode.NOT_FOUND: (404, "Recurso inexistente"),
    ErrorCode.CONFLICT: (409, "Conflicto"),
    ErrorCode.INTERNAL_ERROR: (500, "Error interno"),
    ErrorCode.DATABASE_ERROR: (503, "Base de datos no disponible"),
}


class ErrorDetail(BaseModel):
    """Payload problem+json (RFC 7807) + extensiones code/errors."""

    type: str
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


def _openapi_error(description: str) -> dict[str, Any]:
    return {
        "description": description,
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }


OPENAPI_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: _openapi_error("Token ausente o inválido"),
    403: _openapi_error("Centro fuera del scope del usuario"),
    404: _openapi_error("Sujeto, centro o usuario inexistente"),
    409: _openapi_error("Número de sujeto duplicado"),
    422: _openapi_error("Payload inválido"),
    "default": _openapi_error("Error inesperado"),
}


class AppHTTPException(HTTPException):
    """
    HTTPException con ErrorCode estable y errores por campo opcionales.

    Si status_code es None se usa el status del catálogo para el code.
    """

    def __init__(
        self,
        status_code: int | None,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(
            status_code=status_code or _CATALOG[code][0],
            detail=detail,
            headers=headers,
        )
        self.code = code
        self.errors = errors

    def to_problem(self, *, instance: str | None = None) -> ErrorDetail:
        return ErrorDetail(
            type=self.code.problem_type,
            title=_CATALOG[self.code][1],
            status=self.status_code,
            detail=str(self.detail),
            code=self.code,
            instance=instance,
            errors=self.errors or None,
        )


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(None, ErrorCode.VALIDATION_ERROR, detail, errors)


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(None, ErrorCode.CONFLICT, detail)


def unauthorized(detail: str = "Autenticación requerida") -> AppHTTPException:
    return AppHTTPException(
        None, ErrorCode.UNAUTHORIZED, detail, headers={"WWW-Authenticate": "Bearer"}
    )


def forbidden(detail: str = "Acceso denegado") -> AppHTTPException:
    return AppHTTPException(None, ErrorCode.FORBIDDEN, detail)


def internal_error(detail: str = "Ocurrió un error inesperado") -> AppHTTPException:
    return AppHTTPException(None, ErrorCode.INTERNAL_ERROR, detail)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
def problem_response(request: Request, exc: AppHTTPException) -> JSONResponse:
    problem = exc.to_problem(instance=request.url.path)

    request_id = getattr(request.state, "request_id", None)
    if request_id:
        problem.errors = [*(problem.errors or []), {"request_id": request_id}]

    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(mode="json", exclude_none=True),
        headers=exc.headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    return problem_response(request, exc)


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Errores de pydantic (body/query/path) -> VALIDATION_ERROR por campo."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return problem_response(request, validation_error("Request inválido", errors))
