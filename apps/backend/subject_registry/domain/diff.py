"""
===============================================================================
TARJETA CRC — domain/diff.py
===============================================================================

Módulo:
    Motor de diff para auditoría de sujetos

Responsabilidades:
    - Comparar dos snapshots de Subject campo a campo por DESIGUALDAD DE VALOR
      (no por presencia en el payload).
    - Modelar cada cambio como unión etiquetada: ScalarChange | RelationalChange.
    - Serializar/reconstruir el payload JSON que se persiste en audit_logs.diff.
    - Leer claves conocidas de payloads históricos (subject_id, number, center).

Colaboradores:
    - domain.entities: Subject, Center, AuditAction
    - application/usecases/subjects: construyen diffs y entradas de auditoría
    - infrastructure/repositories: buscan por claves embebidas en el payload

Formato del payload (JSON):
    {
      "subject_id": "<uuid>",                       # plano, no es un cambio
      "name": {"old": "John Doe", "new": "Jane Doe"},
      "birth_date": {"old": "1990-01-15", "new": "1990-01-16"},
      "center_id": {"old": {"id": "...", "name": "..."},
                    "new": {"id": "...", "name": "..."}}
    }

Reglas:
    - Fechas se comparan y guardan como YYYY-MM-DD.
    - Si el lookup de un centro falla se usa un nombre centinela ("Unknown");
      nunca se aborta la escritura por eso.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Final, Mapping, Optional, Union
from uuid import UUID

from .entities import Center, Subject
from .value_objects import canonical_date

UNKNOWN_CENTER_NAME: Final[str] = "Unknown"

# Orden estable de los campos auditables (también es el orden del payload).
SCALAR_FIELDS: Final[tuple[str, ...]] = ("number", "name", "birth_date")
RELATIONAL_FIELDS: Final[tuple[str, ...]] = ("center_id",)
AUDITED_FIELDS: Final[tuple[str, ...]] = SCALAR_FIELDS + RELATIONAL_FIELDS

SUBJECT_ID_KEY: Final[str] = "subject_id"

# Lookup de centros inyectado: devuelve None si no existe o falló.
CenterLookup = Callable[[UUID], Optional[Center]]


# ---------------------------------------------------------------------------
# Tipos del diff (unión etiquetada)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CenterRef:
    """Centro embebido en el diff: id + nombre al momento del cambio."""

    id: UUID
    name: str

    def to_payload(self) -> dict[str, str]:
        return {"id": str(self.id), "name": self.name}

    @classmethod
    def from_payload(cls, raw: Any) -> Optional["CenterRef"]:
        if not isinstance(raw, Mapping):
            return None
        center_id = _parse_uuid(raw.get("id"))
        if center_id is None:
            return None
        return cls(id=center_id, name=str(raw.get("name") or UNKNOWN_CENTER_NAME))


@dataclass(frozen=True, slots=True)
class ScalarChange:
    """Cambio de un campo escalar (valores JSON crudos)."""

    old: Any
    new: Any

    def to_payload(self) -> dict[str, Any]:
        return {"old": self.old, "new": self.new}


@dataclass(frozen=True, slots=True)
class RelationalChange:
    """Cambio de un campo relacional (referencia a Center)."""

    old: Optional[CenterRef]
    new: Optional[CenterRef]

    def to_payload(self) -> dict[str, Any]:
        return {
            "old": self.old.to_payload() if self.old else None,
            "new": self.new.to_payload() if self.new else None,
        }


FieldChange = Union[ScalarChange, RelationalChange]


@dataclass(frozen=True)
class SubjectDiff:
    """
    Conjunto de cambios de un Subject + su id embebido.

    is_empty solo mira los cambios: subject_id no cuenta como cambio.
    """

    subject_id: UUID
    changes: dict[str, FieldChange] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.changes

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {SUBJECT_ID_KEY: str(self.subject_id)}
        for name in AUDITED_FIELDS:
            change = self.changes.get(name)
            if change is not None:
                payload[name] = change.to_payload()
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SubjectDiff":
        """
        Reconstruye un diff persistido.

        Valores planos (no {old,new}) se interpretan como {old: None, new: valor}.

        Raises:
            ValueError: si el payload no trae un subject_id válido.
        """
        subject_id = payload_subject_id(payload)
        if subject_id is None:
            raise ValueError("audit diff payload without subject_id")

        changes: dict[str, FieldChange] = {}
        for name in SCALAR_FIELDS:
            if name in payload:
                changes[name] = _scalar_from_payload(payload[name])
        for name in RELATIONAL_FIELDS:
            if name in payload:
                changes[name] = _relational_from_payload(payload[name])
        return cls(subject_id=subject_id, changes=changes)


# ---------------------------------------------------------------------------
# Construcción de diffs
# ---------------------------------------------------------------------------


def compute_update_diff(
    before: Subject,
    after: Subject,
    lookup: CenterLookup,
    *,
    unknown_center_name: str = UNKNOWN_CENTER_NAME,
) -> SubjectDiff:
    """
    Diff de UPDATE: solo campos cuyo valor normalizado cambió.

    El lookup de centros solo se invoca si center_id cambió.
    """
    changes: dict[str, FieldChange] = {}

    for name in SCALAR_FIELDS:
        old = _normalize(getattr(before, name))
        new = _normalize(getattr(after, name))
        if old != new:
            changes[name] = ScalarChange(old=old, new=new)

    if str(before.center_id) != str(after.center_id):
        changes["center_id"] = RelationalChange(
            old=_center_ref(before.center_id, lookup, unknown_center_name),
            new=_center_ref(after.center_id, lookup, unknown_center_name),
        )

    return SubjectDiff(subject_id=before.id, changes=changes)


def build_create_diff(
    subject: Subject,
    lookup: CenterLookup,
    *,
    unknown_center_name: str = UNKNOWN_CENTER_NAME,
) -> SubjectDiff:
    """Diff de CREATE: todos los campos con old=None."""
    changes: dict[str, FieldChange] = {
        name: ScalarChange(old=None, new=_normalize(getattr(subject, name)))
        for name in SCALAR_FIELDS
    }
    changes["center_id"] = RelationalChange(
        old=None, new=_center_ref(subject.center_id, lookup, unknown_center_name)
    )
    return SubjectDiff(subject_id=subject.id, changes=changes)


def build_delete_diff(
    subject: Subject,
    lookup: CenterLookup,
    *,
    unknown_center_name: str = UNKNOWN_CENTER_NAME,
) -> SubjectDiff:
    """Diff de DELETE: todos los campos con new=None (estado previo completo)."""
    changes: dict[str, FieldChange] = {
        name: ScalarChange(old=_normalize(getattr(subject, name)), new=None)
        for name in SCALAR_FIELDS
    }
    changes["center_id"] = RelationalChange(
        old=_center_ref(subject.center_id, lookup, unknown_center_name), new=None
    )
    return SubjectDiff(subject_id=subject.id, changes=changes)


# ---------------------------------------------------------------------------
# Lectores de payloads persistidos
# ---------------------------------------------------------------------------


def payload_subject_id(payload: Mapping[str, Any]) -> Optional[UUID]:
    return _parse_uuid(payload.get(SUBJECT_ID_KEY))


def payload_number(payload: Mapping[str, Any]) -> Optional[str]:
    """number plano o la mitad "new" de un diff CREATE/UPDATE."""
    raw = payload.get("number")
    if isinstance(raw, Mapping):
        raw = raw.get("new")
    return raw if isinstance(raw, str) else None


def payload_center_id(payload: Mapping[str, Any]) -> Optional[UUID]:
    """
    Centro conocido según el payload.

    - Valor plano (id) o {"old","new"} con CenterRef o id crudo.
    - Prefiere "new"; usa "old" cuando "new" es null (DELETE).
    """
    raw = payload.get("center_id")
    if isinstance(raw, Mapping):
        side = raw.get("new")
        if side is None:
            side = raw.get("old")
        raw = side
    if isinstance(raw, Mapping):
        raw = raw.get("id")
    return _parse_uuid(raw)


# ---------------------------------------------------------------------------
# Helpers internos
# ---------------------------------------------------------------------------


def _normalize(value: Any) -> Any:
    if isinstance(value, date):
        return canonical_date(value)
    if isinstance(value, UUID):
        return str(value)
    return value


def _center_ref(
    center_id: UUID, lookup: CenterLookup, unknown_center_name: str
) -> CenterRef:
    center = lookup(center_id)
    return CenterRef(
        id=center_id, name=center.name if center is not None else unknown_center_name
    )


def _parse_uuid(raw: Any) -> Optional[UUID]:
    if isinstance(raw, UUID):
        return raw
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


def _scalar_from_payload(raw: Any) -> ScalarChange:
    if isinstance(raw, Mapping) and ("old" in raw or "new" in raw):
        return ScalarChange(old=raw.get("old"), new=raw.get("new"))
    return ScalarChange(old=None, new=raw)


def _relational_from_payload(raw: Any) -> RelationalChange:
    if isinstance(raw, Mapping) and ("old" in raw or "new" in raw):
        return RelationalChange(
            old=_center_side(raw.get("old")), new=_center_side(raw.get("new"))
        )
    return RelationalChange(old=None, new=_center_side(raw))


def _center_side(raw: Any) -> Optional[CenterRef]:
    if isinstance(raw, Mapping):
        return CenterRef.from_payload(raw)
    center_id = _parse_uuid(raw)
    if center_id is None:
        return None
    return CenterRef(id=center_id, name=UNKNOWN_CENTER_NAME)
