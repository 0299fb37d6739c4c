"""Tests de AccessScope (centros accesibles por usuario)."""

from datetime import date
from uuid import uuid4

import pytest

from subject_registry.domain.access_scope import AccessScope, can_access_subject
from subject_registry.domain.entities import Subject

pytestmark = pytest.mark.unit


def test_empty_scope_allows_nothing():
    scope = AccessScope.of(uuid4(), [])

    assert scope.is_empty
    assert not scope.allows(uuid4())
    assert not scope.allows(None)


def test_scope_allows_only_member_centers():
    a, b = uuid4(), uuid4()
    scope = AccessScope.of(uuid4(), [a, a])

    assert scope.center_ids == frozenset({a})
    assert scope.allows(a)
    assert not scope.allows(b)


def test_sorted_center_ids_is_stable():
    ids = [uuid4() for _ in range(5)]
    scope = AccessScope.of(uuid4(), ids)

    assert scope.sorted_center_ids() == sorted(ids, key=str)


def test_can_access_subject_uses_subject_center():
    center_id = uuid4()
    subject = Subject(
        id=uuid4(),
        number="SUB-001",
        name="John",
        birth_date=date(1990, 1, 1),
        center_id=center_id,
    )

    assert can_access_subject(subject, AccessScope.of(uuid4(), [center_id]))
    assert not can_access_subject(subject, AccessScope.of(uuid4(), [uuid4()]))
