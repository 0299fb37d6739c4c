# apps/backend/subject_registry/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logging JSON del registro de sujetos
===============================================================================

Objetivo
--------
Una línea JSON por evento, correlacionable por request_id/user_id, sin datos
personales de sujetos (nombre, fecha de nacimiento, valores de diffs).

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JsonLogFormatter + configure_logger()

Responsabilidades:
  - Serializar LogRecord -> JSON con el contexto del request
  - Enmascarar secretos y PII en los campos "extra"
  - Resumir diffs de auditoría a sus claves (nunca valores old/new)

Colaboradores:
  - subject_registry/context.py (ContextVars)
  - crosscutting/config.py (LOG_LEVEL / LOG_JSON)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Mapping

LOGGER_NAME = "subject-registry"

MASK = "***"

# Atributos estándar de LogRecord: no son "extra".
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_SECRET_KEYS = frozenset(
    {"password", "secret", "token", "authorization", "jwt_secret", "database_url"}
)
_PII_KEYS = frozenset({"subject_name", "birth_date", "old", "new"})

# Claves de diff seguras para loguear con valor (identificadores).
_DIFF_ID_KEYS = frozenset({"subject_id", "center_id"})

_MAX_VALUE_CHARS = 2_000


def summarize_diff(diff: Mapping[str, Any]) -> dict[str, Any]:
    """
    Reduce un diff de auditoría a algo loguable.

    {"subject_id": "...", "name": {"old": "John", "new": "Jane"}}
      -> {"subject_id": "...", "fields": ["name"]}
    """
    summary: dict[str, Any] = {
        key: str(diff[key]) for key in sorted(_DIFF_ID_KEYS) if key in diff
    }
    summary["fields"] = sorted(k for k in diff if k not in _DIFF_ID_KEYS)
    return summary


def mask_value(key: str, value: Any) -> Any:
    lowered = key.lower()
    if lowered in _SECRET_KEYS or lowered in _PII_KEYS:
        return MASK
    if lowered == "diff" and isinstance(value, Mapping):
        return summarize_diff(value)
    if isinstance(value, str) and len(value) > _MAX_VALUE_CHARS:
        return value[:_MAX_VALUE_CHARS] + "…"
    return value


class JsonLogFormatter(logging.Formatter):
    """Formatter JSON (una línea por registro)."""

    def format(self, record: logging.LogRecord) -> str:
        from ..context import get_context_dict

        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(get_context_dict())

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS:
                entry[key] = mask_value(key, value)

        if record.exc_info and record.exc_info[0] is not None:
            entry["exc"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "trace": "".join(traceback.format_exception(*record.exc_info)),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logger(
    name: str = LOGGER_NAME, *, level: str = "INFO", json_output: bool = True
) -> logging.Logger:
    """
    Configura (idempotente) el logger de la app.

    Reconfigurar reemplaza el formatter del handler existente en lugar de
    agregar otro handler.
    """
    log = logging.getLogger(name)
    log.setLevel(getattr(logging, level, logging.INFO))

    formatter = (
        JsonLogFormatter() if json_output else logging.Formatter("%(levelname)s %(message)s")
    )
    if not log.handlers:
        log.addHandler(logging.StreamHandler(sys.stdout))
    for handler in log.handlers:
        handler.setFormatter(formatter)

    return log


def _logger_from_settings() -> logging.Logger:
    from .config import get_settings

    settings = get_settings()
    return configure_logger(level=settings.log_level, json_output=settings.log_json)


logger = _logger_from_settings()
