"""
===============================================================================
TARJETA CRC — subject_registry/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar el contexto del request actual (request_id, método, path, usuario)
    en un único ContextVar inmutable.
  - Exponerlo a logs sin pasar parámetros por casos de uso ni repositorios.

Colaboradores:
  - crosscutting.middleware: abre el contexto al inicio del request.
  - identity.auth: agrega el user_id cuando el token es válido.
  - crosscutting.logger: lee get_context_dict() en cada registro.

Restricciones:
  - Cada set_* reemplaza el snapshot completo (dataclass frozen).
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import asdict, dataclass, replace


@dataclass(frozen=True)
class RequestContext:
    request_id: str = ""
    method: str = ""
    path: str = ""
    user_id: str = ""


_EMPTY = RequestContext()

_current: ContextVar[RequestContext] = ContextVar("request_context", default=_EMPTY)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    """Abre un contexto nuevo (descarta el usuario del request anterior)."""
    _current.set(RequestContext(request_id=request_id, method=method, path=path))


def set_user_context(user_id: str = "") -> None:
    _current.set(replace(_current.get(), user_id=user_id or ""))


def get_context_dict() -> dict[str, str]:
    """Contexto actual como dict, sin claves vacías."""
    return {key: value for key, value in asdict(_current.get()).items() if value}


def clear_context() -> None:
    _current.set(_EMPTY)
