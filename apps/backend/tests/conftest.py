"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test => in-memory storage)
  - Provide an isolated in-memory registry (centers/users/memberships/audit)
  - Provide use case factories wired to that registry

Collaborators:
  - pytest: Test framework
  - subject_registry.infrastructure.repositories.in_memory
  - subject_registry.application.usecases

Notes:
  - Fixtures are auto-discovered by pytest
  - Every test gets a fresh registry (function scope)
"""

import os
import sys
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable
from uuid import UUID, uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "unit-test-jwt-secret-0123456789abcdef")

from subject_registry.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None
app_config.get_settings.cache_clear()

from subject_registry.application.usecases import (  # noqa: E402
    CreateSubjectInput,
    CreateSubjectUseCase,
    DeleteSubjectUseCase,
    GetSubjectUseCase,
    ListCentersUseCase,
    ListSubjectAuditLogsUseCase,
    ListSubjectsUseCase,
    ResolveAccessScopeUseCase,
    UpdateSubjectUseCase,
)
from subject_registry.domain.entities import Center, Subject  # noqa: E402
from subject_registry.identity.users import User  # noqa: E402
from subject_registry.infrastructure.repositories import (  # noqa: E402
    InMemoryAuditLogRepository,
    InMemoryCenterRepository,
    InMemoryMembershipRepository,
    InMemorySubjectRepository,
    InMemoryUserRepository,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Tests that need a real Postgres (RUN_INTEGRATION=1)"
    )


# ============================================================================
# Helpers
# ============================================================================


class TickingClock:
    """Reloj determinístico: cada llamada avanza un segundo."""

    def __init__(self, start: datetime | None = None):
        self._now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


@dataclass
class InMemoryRegistry:
    """Repos in-memory cableados entre sí + helpers de alta de datos."""

    centers: InMemoryCenterRepository
    users: InMemoryUserRepository
    memberships: InMemoryMembershipRepository
    audit: InMemoryAuditLogRepository
    subjects: InMemorySubjectRepository
    _counter: list[int] = field(default_factory=lambda: [0])

    def add_center(self, name: str) -> Center:
        center = Center(id=uuid4(), name=name)
        self.centers.add_center(center)
        return center

    def add_user(self, center_ids: Iterable[UUID] = ()) -> UUID:
        self._counter[0] += 1
        user_id = uuid4()
        self.users.add_user(User(id=user_id, email=f"user{self._counter[0]}@test"))
        for center_id in center_ids:
            self.memberships.add_membership(user_id, center_id)
        return user_id

    @property
    def scope_resolver(self) -> ResolveAccessScopeUseCase:
        return ResolveAccessScopeUseCase(
            user_repository=self.users, membership_repository=self.memberships
        )

    # -- use cases ---------------------------------------------------------

    def create_use_case(self) -> CreateSubjectUseCase:
        return CreateSubjectUseCase(self.subjects, self.centers, self.scope_resolver)

    def list_use_case(self) -> ListSubjectsUseCase:
        return ListSubjectsUseCase(self.subjects, self.scope_resolver)

    def get_use_case(self) -> GetSubjectUseCase:
        return GetSubjectUseCase(self.subjects, self.scope_resolver)

    def update_use_case(self) -> UpdateSubjectUseCase:
        return UpdateSubjectUseCase(self.subjects, self.centers, self.scope_resolver)

    def delete_use_case(self) -> DeleteSubjectUseCase:
        return DeleteSubjectUseCase(self.subjects, self.centers, self.scope_resolver)

    def audit_use_case(self) -> ListSubjectAuditLogsUseCase:
        return ListSubjectAuditLogsUseCase(
            self.subjects, self.audit, self.scope_resolver
        )

    def centers_use_case(self) -> ListCentersUseCase:
        return ListCentersUseCase(self.centers, self.scope_resolver)

    def create_subject(
        self,
        user_id: UUID,
        center_id: UUID,
        *,
        number: str = "SUB-001",
        name: str = "John Doe",
        birth_date: date = date(1980, 5, 17),
    ) -> Subject:
        result = self.create_use_case().execute(
            CreateSubjectInput(
                number=number, name=name, birth_date=birth_date, center_id=center_id
            ),
            user_id,
        )
        assert result.error is None, result.error
        return result.subject


def build_in_memory_registry() -> InMemoryRegistry:
    centers = InMemoryCenterRepository()
    audit = InMemoryAuditLogRepository(clock=TickingClock())
    return InMemoryRegistry(
        centers=centers,
        users=InMemoryUserRepository(),
        memberships=InMemoryMembershipRepository(),
        audit=audit,
        subjects=InMemorySubjectRepository(
            center_repository=centers, audit_repository=audit
        ),
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def registry() -> InMemoryRegistry:
    """R: Fresh in-memory registry per test."""
    return build_in_memory_registry()


@pytest.fixture
def center_a(registry: InMemoryRegistry) -> Center:
    return registry.add_center("Center A")


@pytest.fixture
def center_b(registry: InMemoryRegistry) -> Center:
    return registry.add_center("Center B")


@pytest.fixture
def investigator(registry: InMemoryRegistry, center_a: Center) -> UUID:
    """R: User with access to Center A only."""
    return registry.add_user([center_a.id])


@pytest.fixture
def outsider(registry: InMemoryRegistry, center_b: Center) -> UUID:
    """R: User with access to Center B only."""
    return registry.add_user([center_b.id])
