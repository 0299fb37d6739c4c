"""Center use cases."""

from .list_centers import ListCentersUseCase

__all__ = ["ListCentersUseCase"]
