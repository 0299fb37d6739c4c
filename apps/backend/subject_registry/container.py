"""
===============================================================================
TARJETA CRC — subject_registry/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache) SOLO para repositorios.
  - Centralizar la decisión in-memory vs Postgres basada en Settings.

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* (puertos)
  - infrastructure.repositories.* (implementaciones)
  - application.usecases.* (casos de uso)

Patrones aplicados:
  - Composition Root
  - Dependency Inversion (use cases dependen de puertos)
  - Lazy singletons con lru_cache

Notas:
  - Los casos de uso se construyen POR REQUEST con sus colaboradores
    explícitos (scope resolver incluido); no hay registro global mutable.
  - Este archivo NO contiene lógica de negocio ni depende de FastAPI.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .application.usecases import (
    CreateSubjectUseCase,
    DeleteSubjectUseCase,
    GetSubjectUseCase,
    ListCentersUseCase,
    ListSubjectAuditLogsUseCase,
    ListSubjectsUseCase,
    ResolveAccessScopeUseCase,
    UpdateSubjectUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    AuditLogRepository,
    CenterRepository,
    MembershipRepository,
    SubjectRepository,
    UserRepository,
)
from .infrastructure.repositories import (
    InMemoryAuditLogRepository,
    InMemoryCenterRepository,
    InMemoryMembershipRepository,
    InMemorySubjectRepository,
    InMemoryUserRepository,
    PostgresAuditLogRepository,
    PostgresCenterRepository,
    PostgresMembershipRepository,
    PostgresSubjectRepository,
    PostgresUserRepository,
)

# =============================================================================
# Helpers internos
# =============================================================================


def uses_in_memory_storage() -> bool:
    """
    Regla:
      - APP_ENV=test o USE_IN_MEMORY_STORAGE=1 => adapters in-memory.
    """
    return get_settings().uses_in_memory_storage()


@dataclass(frozen=True)
class InMemoryStore:
    """Repos in-memory compartidos (el de subjects escribe en audit/centers)."""

    centers: InMemoryCenterRepository
    users: InMemoryUserRepository
    memberships: InMemoryMembershipRepository
    audit_logs: InMemoryAuditLogRepository
    subjects: InMemorySubjectRepository


@lru_cache(maxsize=1)
def get_in_memory_store() -> InMemoryStore:
    centers = InMemoryCenterRepository()
    audit_logs = InMemoryAuditLogRepository()
    return InMemoryStore(
        centers=centers,
        users=InMemoryUserRepository(),
        memberships=InMemoryMembershipRepository(),
        audit_logs=audit_logs,
        subjects=InMemorySubjectRepository(
            center_repository=centers, audit_repository=audit_logs
        ),
    )


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_subject_repository() -> SubjectRepository:
    if uses_in_memory_storage():
        return get_in_memory_store().subjects
    return PostgresSubjectRepository()


@lru_cache(maxsize=1)
def get_center_repository() -> CenterRepository:
    if uses_in_memory_storage():
        return get_in_memory_store().centers
    return PostgresCenterRepository()


@lru_cache(maxsize=1)
def get_membership_repository() -> MembershipRepository:
    if uses_in_memory_storage():
        return get_in_memory_store().memberships
    return PostgresMembershipRepository()


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    if uses_in_memory_storage():
        return get_in_memory_store().users
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_audit_log_repository() -> AuditLogRepository:
    if uses_in_memory_storage():
        return get_in_memory_store().audit_logs
    return PostgresAuditLogRepository()


def reset_container() -> None:
    """Limpia singletons (tests)."""
    for factory in (
        get_in_memory_store,
        get_subject_repository,
        get_center_repository,
        get_membership_repository,
        get_user_repository,
        get_audit_log_repository,
    ):
        factory.cache_clear()


# =============================================================================
# Casos de uso (por request)
# =============================================================================


def get_resolve_access_scope_use_case() -> ResolveAccessScopeUseCase:
    return ResolveAccessScopeUseCase(
        user_repository=get_user_repository(),
        membership_repository=get_membership_repository(),
    )


def get_create_subject_use_case() -> CreateSubjectUseCase:
    settings = get_settings()
    return CreateSubjectUseCase(
        subject_repository=get_subject_repository(),
        center_repository=get_center_repository(),
        scope_resolver=get_resolve_access_scope_use_case(),
        max_name_chars=settings.max_subject_name_chars,
        unknown_center_name=settings.unknown_center_label,
    )


def get_list_subjects_use_case() -> ListSubjectsUseCase:
    return ListSubjectsUseCase(
        subject_repository=get_subject_repository(),
        scope_resolver=get_resolve_access_scope_use_case(),
    )


def get_get_subject_use_case() -> GetSubjectUseCase:
    return GetSubjectUseCase(
        subject_repository=get_subject_repository(),
        scope_resolver=get_resolve_access_scope_use_case(),
    )


def get_update_subject_use_case() -> UpdateSubjectUseCase:
    settings = get_settings()
    return UpdateSubjectUseCase(
        subject_repository=get_subject_repository(),
        center_repository=get_center_repository(),
        scope_resolver=get_resolve_access_scope_use_case(),
        max_name_chars=settings.max_subject_name_chars,
        unknown_center_name=settings.unknown_center_label,
    )


def get_delete_subject_use_case() -> DeleteSubjectUseCase:
    return DeleteSubjectUseCase(
        subject_repository=get_subject_repository(),
        center_repository=get_center_repository(),
        scope_resolver=get_resolve_access_scope_use_case(),
        unknown_center_name=get_settings().unknown_center_label,
    )


def get_list_subject_audit_logs_use_case() -> ListSubjectAuditLogsUseCase:
    return ListSubjectAuditLogsUseCase(
        subject_repository=get_subject_repository(),
        audit_log_repository=get_audit_log_repository(),
        scope_resolver=get_resolve_access_scope_use_case(),
    )


def get_list_centers_use_case() -> ListCentersUseCase:
    return ListCentersUseCase(
        center_repository=get_center_repository(),
        scope_resolver=get_resolve_access_scope_use_case(),
    )
