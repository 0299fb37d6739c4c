"""
===============================================================================
TARJETA CRC — schemas/__init__.py
===============================================================================

Módulo:
    Paquete de Schemas HTTP (DTOs Pydantic)

Responsabilidades:
    - Agrupar contratos HTTP por bounded context (subjects/centers).
    - Mantener separados DTOs (schemas) de controladores (routers).

Reglas:
    - Schemas NO deben importar infraestructura.
    - Schemas NO deben ejecutar casos de uso.
    - Solo tipos y validación de forma; las reglas de negocio
      (formato de number, largo de name) viven en el dominio.
===============================================================================
"""

__all__ = []
