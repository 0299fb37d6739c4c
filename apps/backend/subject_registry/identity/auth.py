"""
===============================================================================
TARJETA CRC — identity/auth.py
===============================================================================

Módulo:
    Identidad por JWT (Bearer) -> user_id

Responsabilidades:
    - Emitir JWT de acceso firmado (HS256) para un user_id (dev/tests).
    - Decodificar y validar JWT (firma, exp, claims mínimos).
    - Exponer la dependencia FastAPI require_user_id().
    - Extraer token desde Authorization: Bearer.

Colaboradores:
    - crosscutting.config.get_settings: secreto y TTL.
    - crosscutting.error_responses: unauthorized estándar (401).
    - subject_registry.context: user_id para logs.

Decisiones de diseño:
    - Este borde SOLO autentica: que el usuario exista y qué centros ve lo
      deciden los casos de uso (NotFound vs scope vacío).
    - Claims mínimos: sub (UUID), exp, iat, typ.
    - No loguear secretos ni tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Final
from uuid import UUID

import jwt
from fastapi import Header, Request

from ..context import set_user_context
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.error_responses import AppHTTPException, unauthorized
from ..crosscutting.logger import logger

JWT_ALGORITHM: Final[str] = "HS256"
TOKEN_TYPE_ACCESS: Final[str] = "access"

CLAIM_SUB: Final[str] = "sub"
CLAIM_EXP: Final[str] = "exp"
CLAIM_IAT: Final[str] = "iat"
CLAIM_TYP: Final[str] = "typ"


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """Payload mínimo que esperamos de un access token."""

    user_id: UUID
    expires_at: datetime


# ---------------------------------------------------------------------------
# Tokens JWT (emitir / decodificar)
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: UUID, settings: Settings | None = None
) -> tuple[str, int]:
    """Crea un JWT de acceso firmado.

    Retorna:
        (token, expires_in_seconds)
    """
    s = settings or get_settings()

    now = datetime.now(timezone.utc)
    expires_in = int(s.jwt_access_ttl_minutes * 60)

    payload: dict[str, object] = {
        CLAIM_SUB: str(user_id),
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(seconds=expires_in)).timestamp()),
        CLAIM_TYP: TOKEN_TYPE_ACCESS,
    }

    token = jwt.encode(payload, s.jwt_secret, algorithm=JWT_ALGORITHM)
    return token, expires_in


def decode_access_token(token: str, settings: Settings | None = None) -> TokenPayload:
    """Decodifica y valida un JWT de acceso.

    Errores:
        - 401 si expiró o firma inválida.
        - 401 si faltan claims mínimos o sub no es UUID.
    """
    s = settings or get_settings()

    try:
        payload = jwt.decode(
            token,
            s.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_SUB, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise unauthorized("Token expirado.") from exc
    except jwt.InvalidTokenError as exc:
        raise unauthorized("Token inválido.") from exc

    token_type = payload.get(CLAIM_TYP)
    if token_type is not None and token_type != TOKEN_TYPE_ACCESS:
        raise unauthorized("Tipo de token inválido.")

    try:
        user_id = UUID(str(payload.get(CLAIM_SUB)))
    except ValueError as exc:
        raise unauthorized("Token inválido.") from exc

    return TokenPayload(
        user_id=user_id,
        expires_at=datetime.fromtimestamp(int(payload[CLAIM_EXP]), tz=timezone.utc),
    )


# ---------------------------------------------------------------------------
# Extracción de token
# ---------------------------------------------------------------------------


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


# ---------------------------------------------------------------------------
# Dependencia FastAPI
# ---------------------------------------------------------------------------


async def require_user_id(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
) -> UUID:
    """Dependency FastAPI: requiere Bearer JWT válido y devuelve user_id."""
    token = _extract_bearer_token(authorization)
    if not token:
        raise unauthorized("Falta token Bearer.")

    try:
        payload = decode_access_token(token)
    except AppHTTPException as exc:
        logger.info("Auth falló: token rechazado", extra={"reason": exc.detail})
        raise

    request.state.user_id = payload.user_id
    set_user_context(str(payload.user_id))
    return payload.user_id
