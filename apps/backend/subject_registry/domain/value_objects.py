"""
===============================================================================
TARJETA CRC — domain/value_objects.py
===============================================================================

Módulo:
    Objetos de valor del dominio de sujetos

Responsabilidades:
    - SubjectRef: clave alternativa explícita (ByIdentifier | ByNumber).
    - Normalizar y validar number / name / birth_date sin depender de HTTP.

Colaboradores:
    - interfaces/api/http: parsea el path param con parse_subject_ref().
    - application/usecases/subjects: valida payloads con normalize_*.

Reglas:
    - number: 3..50 chars, alfanumérico + "-" / "_" (mayúsculas o minúsculas).
    - name: no vacío tras strip, longitud máxima configurable.
    - birth_date: fecha calendario ISO (YYYY-MM-DD), sin hora.
===============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Final, Union
from uuid import UUID

NUMBER_MIN_LENGTH: Final[int] = 3
NUMBER_MAX_LENGTH: Final[int] = 50
NAME_MAX_LENGTH: Final[int] = 200

_NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[A-Za-z0-9_-]{%d,%d}$" % (NUMBER_MIN_LENGTH, NUMBER_MAX_LENGTH)
)
_UUID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


class InvalidValueError(ValueError):
    """Valor de dominio inválido (se traduce a VALIDATION_ERROR)."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


# ---------------------------------------------------------------------------
# SubjectRef (clave alternativa)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ByIdentifier:
    subject_id: UUID


@dataclass(frozen=True, slots=True)
class ByNumber:
    number: str


SubjectRef = Union[ByIdentifier, ByNumber]


def parse_subject_ref(raw: str) -> SubjectRef:
    """
    Decide la variante en el borde (HTTP), no dentro del core.

    - Forma canónica de UUID (8-4-4-4-12) -> ByIdentifier
    - Cualquier otra cosa -> ByNumber (se busca tal cual, sin normalizar)
    """
    value = (raw or "").strip()
    if _UUID_PATTERN.match(value):
        return ByIdentifier(UUID(value))
    return ByNumber(value)


# ---------------------------------------------------------------------------
# Normalizadores
# ---------------------------------------------------------------------------


def normalize_number(value: object) -> str:
    if not isinstance(value, str):
        raise InvalidValueError("number", "number debe ser texto")
    number = value.strip()
    if not _NUMBER_PATTERN.match(number):
        raise InvalidValueError(
            "number",
            f"number debe tener {NUMBER_MIN_LENGTH}-{NUMBER_MAX_LENGTH} caracteres "
            "alfanuméricos, '-' o '_'",
        )
    return number


def normalize_name(value: object, *, max_length: int = NAME_MAX_LENGTH) -> str:
    if not isinstance(value, str):
        raise InvalidValueError("name", "name debe ser texto")
    name = value.strip()
    if not name:
        raise InvalidValueError("name", "name es requerido")
    if len(name) > max_length:
        raise InvalidValueError("name", f"name excede {max_length} caracteres")
    return name


def normalize_birth_date(value: object) -> date:
    """
    Acepta date o string ISO. Un datetime se trunca a su fecha calendario.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            if len(raw) == 10:
                return date.fromisoformat(raw)
            return datetime.fromisoformat(raw).date()
        except ValueError as exc:
            raise InvalidValueError(
                "birth_date", "birth_date debe ser una fecha YYYY-MM-DD"
            ) from exc
    raise InvalidValueError("birth_date", "birth_date debe ser una fecha YYYY-MM-DD")


def normalize_center_id(value: object) -> UUID:
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value.strip())
        except ValueError as exc:
            raise InvalidValueError("center_id", "center_id debe ser un UUID") from exc
    raise InvalidValueError("center_id", "center_id debe ser un UUID")


def canonical_date(value: date) -> str:
    """Representación canónica para comparar/auditar fechas: YYYY-MM-DD."""
    return value.isoformat()
