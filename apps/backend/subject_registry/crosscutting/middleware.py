# apps/backend/subject_registry/crosscutting/middleware.py
"""
===============================================================================
MÓDULO: Middleware HTTP de correlación
===============================================================================

Objetivo
--------
Cada request de la API de sujetos lleva un X-Request-Id (propio o generado)
que aparece en la respuesta, en los logs y en los errores RFC7807.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  RequestContextMiddleware

Responsabilidades:
  - Resolver el request_id entrante o generar uno
  - Abrir/cerrar el contexto de logging del request
  - Un log de acceso por request (salvo /healthz)

Colaboradores:
  - subject_registry/context.py
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

import re
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"

# Ids de clientes: imprimibles, sin espacios, acotados.
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")

_UNLOGGED_PATHS = frozenset({"/healthz"})


def resolve_request_id(raw: str | None) -> str:
    candidate = (raw or "").strip()
    if _REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return str(uuid.uuid4())


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Propaga X-Request-Id y emite el log de acceso."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request sin respuesta", extra={"latency_ms": _elapsed_ms(started)}
            )
            clear_context()
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        if request.url.path not in _UNLOGGED_PATHS:
            logger.info(
                "request completado",
                extra={
                    "status_code": response.status_code,
                    "latency_ms": _elapsed_ms(started),
                },
            )
        clear_context()
        return response
