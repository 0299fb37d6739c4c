"""Tests de ResolveAccessScopeUseCase y ListCentersUseCase."""

from uuid import uuid4

import pytest

from subject_registry.application.usecases import SubjectErrorCode

pytestmark = pytest.mark.unit


def test_scope_contains_member_centers(registry, center_a, center_b):
    user_id = registry.add_user([center_a.id, center_b.id])

    result = registry.scope_resolver.execute(user_id)

    assert result.error is None
    assert result.scope.user_id == user_id
    assert result.scope.center_ids == frozenset({center_a.id, center_b.id})


def test_user_without_memberships_has_empty_scope(registry):
    user_id = registry.add_user()

    result = registry.scope_resolver.execute(user_id)

    assert result.error is None
    assert result.scope.is_empty


def test_unknown_user_is_not_found(registry):
    result = registry.scope_resolver.execute(uuid4())

    assert result.scope is None
    assert result.error.code == SubjectErrorCode.NOT_FOUND
    assert result.error.resource == "User"


def test_scope_reflects_membership_changes(registry, center_a):
    user_id = registry.add_user([center_a.id])
    registry.memberships.remove_membership(user_id, center_a.id)

    assert registry.scope_resolver.execute(user_id).scope.is_empty


def test_list_centers_returns_scope_centers_by_name(registry, center_a, center_b):
    zeta = registry.add_center("Zeta Center")
    registry.add_center("Hidden Center")
    user_id = registry.add_user([zeta.id, center_b.id, center_a.id])

    result = registry.centers_use_case().execute(user_id)

    assert [c.name for c in result.centers] == ["Center A", "Center B", "Zeta Center"]
