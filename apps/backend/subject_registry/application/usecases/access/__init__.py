"""Access scope use cases (user -> centers)."""

from .resolve_access_scope import ResolveAccessScopeUseCase

__all__ = ["ResolveAccessScopeUseCase"]
