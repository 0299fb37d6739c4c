"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelo de Usuario

Responsabilidades:
    - Definir el dataclass User que distingue "usuario inexistente" de
      "usuario sin centros".

Colaboradores:
    - domain/repositories.py: UserRepository devuelve User.
    - infrastructure/repositories/*/user.py: mapean filas -> User.
    - application/usecases/access: valida existencia antes de resolver scope.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
    - Alta/baja de usuarios vive fuera de este servicio.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class User:
    """Usuario conocido por el sistema (identidad emitida por el IdP)."""

    id: UUID
    email: str
    created_at: datetime | None = None
