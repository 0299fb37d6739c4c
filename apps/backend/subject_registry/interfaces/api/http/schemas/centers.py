"""Schemas HTTP para Centers."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel


class CenterRes(BaseModel):
    """Centro (id + nombre)."""

    id: UUID
    name: str


class CentersListRes(BaseModel):
    centers: list[CenterRes]
