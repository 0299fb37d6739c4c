"""
Name: Dev Seed Demo (Local-only)

Responsibilities:
  - Provision a local demo environment (centers + demo user + memberships)
  - Enforce safety guard: only allowed in local/development environments
  - Keep operations idempotent (safe to run multiple times)

Architecture:
  - Layer: Application task (wired by the composition root at startup)
  - Depends on abstractions (duck-typed ports), not concrete repositories

CRC:
  Component: ensure_dev_demo
  Responsibilities:
    - Validate environment guard
    - Ensure demo centers and demo user exist
    - Ensure the demo user is member of the "open" demo centers only
  Collaborators:
    - center_repo (get_center/add_center)
    - user_repo (get_user/add_user)
    - membership_repo (list_center_ids_for_user/add_membership)
    - Settings (dev_seed_demo/app_env)
  Constraints:
    - Must NEVER run in production or tests
    - Must be idempotent
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from uuid import NAMESPACE_URL, UUID, uuid5

from ..crosscutting.config import Settings
from ..crosscutting.logger import logger
from ..domain.entities import Center
from ..identity.users import User

_ALLOWED_ENVS = frozenset({"local", "development"})

# -----------------------------
# Ports (duck-typed protocols)
# -----------------------------


class CenterSeedPort(Protocol):
    def get_center(self, center_id: UUID) -> Center | None: ...

    def add_center(self, center: Center) -> None: ...


class UserSeedPort(Protocol):
    def get_user(self, user_id: UUID) -> User | None: ...

    def add_user(self, user: User) -> None: ...


class MembershipSeedPort(Protocol):
    def list_center_ids_for_user(self, user_id: UUID) -> list[UUID]: ...

    def add_membership(self, user_id: UUID, center_id: UUID) -> None: ...


# -----------------------------
# Seed specs
# -----------------------------


def _stable_id(label: str) -> UUID:
    """R: Deterministic ids so tokens/urls survive restarts."""
    return uuid5(NAMESPACE_URL, f"subject-registry:demo:{label}")


@dataclass(frozen=True, slots=True)
class _SeedCenterSpec:
    label: str
    name: str
    member: bool

    @property
    def id(self) -> UUID:
        return _stable_id(f"center:{self.label}")


_DEMO_CENTERS: tuple[_SeedCenterSpec, ...] = (
    _SeedCenterSpec(label="north", name="North Clinical Center", member=True),
    _SeedCenterSpec(label="south", name="South Clinical Center", member=True),
    # Centro fuera de scope: sirve para probar FORBIDDEN a mano.
    _SeedCenterSpec(label="east", name="East Clinical Center", member=False),
)

DEMO_USER_ID: UUID = _stable_id("user:investigator")
DEMO_USER_EMAIL = "investigator@local"


def _assert_local_env(settings: Settings) -> None:
    """
    R: Safety guard: DEV_SEED_DEMO must only run locally.
    Fail-fast to prevent accidental seeding in real environments.
    """
    env = (settings.app_env or "").strip().lower()
    if env not in _ALLOWED_ENVS:
        raise RuntimeError(
            f"FATAL: DEV_SEED_DEMO is enabled but APP_ENV is '{env}' "
            f"(must be one of {sorted(_ALLOWED_ENVS)})."
        )


def ensure_dev_demo(
    settings: Settings,
    *,
    center_repo: CenterSeedPort,
    user_repo: UserSeedPort,
    membership_repo: MembershipSeedPort,
) -> UUID | None:
    """
    R: Seed demo data if enabled. Returns the demo user id (or None if disabled).
    """
    if not settings.dev_seed_demo:
        return None

    _assert_local_env(settings)

    for spec in _DEMO_CENTERS:
        if center_repo.get_center(spec.id) is None:
            center_repo.add_center(Center(id=spec.id, name=spec.name))
            logger.info(
                "Dev seed demo: center created",
                extra={"center_id": str(spec.id), "center_name": spec.name},
            )

    if user_repo.get_user(DEMO_USER_ID) is None:
        user_repo.add_user(User(id=DEMO_USER_ID, email=DEMO_USER_EMAIL))
        logger.info("Dev seed demo: user created", extra={"email": DEMO_USER_EMAIL})

    current = set(membership_repo.list_center_ids_for_user(DEMO_USER_ID))
    for spec in _DEMO_CENTERS:
        if spec.member and spec.id not in current:
            membership_repo.add_membership(DEMO_USER_ID, spec.id)

    logger.info(
        "Dev seed demo: ready",
        extra={"user_id": str(DEMO_USER_ID), "email": DEMO_USER_EMAIL},
    )
    return DEMO_USER_ID
