"""
Name: Subject Use Case Tests

Responsibilities:
  - Validate scoped create/list/get/update/delete semantics
  - Verify the error precedence (VALIDATION -> NOT_FOUND -> FORBIDDEN -> CONFLICT)
  - Verify audit entries written alongside each mutation
"""

from datetime import date
from uuid import uuid4

import pytest

from subject_registry.application.usecases import (
    CreateSubjectInput,
    SubjectErrorCode,
    UpdateSubjectInput,
)
from subject_registry.crosscutting.exceptions import UniqueConstraintError
from subject_registry.domain.entities import AuditAction

pytestmark = pytest.mark.unit


def _input(center_id, /, **overrides) -> CreateSubjectInput:
    data = {
        "number": "SUB-001",
        "name": "John Doe",
        "birth_date": "1980-05-17",
        "center_id": center_id,
    }
    data.update(overrides)
    return CreateSubjectInput(**data)


# =============================================================================
# Create
# =============================================================================


class TestCreateSubject:
    def test_create_persists_subject_and_create_entry(
        self, registry, center_a, investigator
    ):
        result = registry.create_use_case().execute(_input(center_a.id), investigator)

        assert result.error is None
        subject = result.subject
        assert subject.number == "SUB-001"
        assert subject.birth_date == date(1980, 5, 17)
        assert subject.center == center_a

        entries = registry.audit.list_all()
        assert [e.action for e in entries] == [AuditAction.CREATE]
        assert entries[0].subject_id == subject.id
        assert entries[0].user_id == investigator
        assert entries[0].diff["center_id"]["new"] == {
            "id": str(center_a.id),
            "name": "Center A",
        }

    def test_create_in_foreign_center_is_forbidden(
        self, registry, center_b, investigator
    ):
        result = registry.create_use_case().execute(_input(center_b.id), investigator)

        assert result.error.code == SubjectErrorCode.FORBIDDEN
        assert registry.audit.list_all() == []

    def test_create_with_unknown_user_is_not_found(self, registry, center_a):
        result = registry.create_use_case().execute(_input(center_a.id), uuid4())

        assert result.error.code == SubjectErrorCode.NOT_FOUND
        assert result.error.resource == "User"

    def test_create_with_member_but_missing_center_is_not_found(self, registry):
        ghost_center = uuid4()
        user_id = registry.add_user([ghost_center])

        result = registry.create_use_case().execute(_input(ghost_center), user_id)

        assert result.error.code == SubjectErrorCode.NOT_FOUND
        assert result.error.resource == "Center"

    def test_create_duplicate_number_is_conflict(self, registry, center_a, investigator):
        registry.create_subject(investigator, center_a.id)

        result = registry.create_use_case().execute(_input(center_a.id), investigator)

        assert result.error.code == SubjectErrorCode.CONFLICT
        assert len(registry.audit.list_all()) == 1

    def test_duplicate_number_in_another_center_is_conflict(
        self, registry, center_a, center_b
    ):
        user_id = registry.add_user([center_a.id, center_b.id])
        registry.create_subject(user_id, center_a.id, number="SUB-001")

        result = registry.create_use_case().execute(
            _input(center_b.id, number="SUB-001"), user_id
        )

        assert result.error.code == SubjectErrorCode.CONFLICT
        stored = registry.subjects.list_subjects_by_centers([center_a.id, center_b.id])
        assert [s.center_id for s in stored] == [center_a.id]
        assert len(registry.audit.list_all()) == 1

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"number": "x"}, "number"),
            ({"name": "   "}, "name"),
            ({"birth_date": "17-05-1980"}, "birth_date"),
            ({"center_id": "not-a-uuid"}, "center_id"),
        ],
    )
    def test_create_validation_errors(
        self, registry, center_a, investigator, overrides, field
    ):
        result = registry.create_use_case().execute(
            _input(center_a.id, **overrides), investigator
        )

        assert result.error.code == SubjectErrorCode.VALIDATION_ERROR
        assert result.error.field == field

    def test_storage_unique_violation_maps_to_conflict(
        self, registry, center_a, investigator, monkeypatch
    ):
        # Simula la carrera: el pre-check no ve al otro sujeto.
        monkeypatch.setattr(
            registry.subjects, "get_subject_by_number", lambda number: None
        )

        def _raise(*_args, **_kwargs):
            raise UniqueConstraintError("dup", constraint="uq_subjects_number")

        monkeypatch.setattr(registry.subjects, "create_subject", _raise)

        result = registry.create_use_case().execute(_input(center_a.id), investigator)

        assert result.error.code == SubjectErrorCode.CONFLICT


# =============================================================================
# List / Get
# =============================================================================


class TestListAndGetSubjects:
    def test_list_only_returns_subjects_in_scope_ordered_by_number(
        self, registry, center_a, center_b, investigator, outsider
    ):
        registry.create_subject(investigator, center_a.id, number="SUB-010")
        registry.create_subject(investigator, center_a.id, number="SUB-002")
        registry.create_subject(outsider, center_b.id, number="SUB-001")

        result = registry.list_use_case().execute(investigator)

        assert result.error is None
        assert [s.number for s in result.subjects] == ["SUB-002", "SUB-010"]
        assert all(s.center == center_a for s in result.subjects)

    def test_list_order_is_case_sensitive(self, registry, center_a, investigator):
        for number in ("sub-002", "SUB-010", "Sub-005"):
            registry.create_subject(investigator, center_a.id, number=number)

        result = registry.list_use_case().execute(investigator)

        # Orden por bytes: mayúsculas antes que minúsculas.
        assert [s.number for s in result.subjects] == [
            "SUB-010",
            "Sub-005",
            "sub-002",
        ]

    def test_list_with_empty_scope_is_empty(self, registry, center_a, investigator):
        registry.create_subject(investigator, center_a.id)
        lonely = registry.add_user()

        result = registry.list_use_case().execute(lonely)

        assert result.error is None
        assert result.subjects == []

    def test_get_missing_subject_is_not_found(self, registry, investigator):
        result = registry.get_use_case().execute(uuid4(), investigator)

        assert result.error.code == SubjectErrorCode.NOT_FOUND
        assert result.error.resource == "Subject"

    def test_get_subject_outside_scope_is_forbidden(
        self, registry, center_a, investigator, outsider
    ):
        subject = registry.create_subject(investigator, center_a.id)

        result = registry.get_use_case().execute(subject.id, outsider)

        assert result.error.code == SubjectErrorCode.FORBIDDEN

    def test_get_subject_in_scope(self, registry, center_a, investigator):
        subject = registry.create_subject(investigator, center_a.id)

        result = registry.get_use_case().execute(subject.id, investigator)

        assert result.subject.id == subject.id
        assert result.subject.center.name == "Center A"


# =============================================================================
# Update
# =============================================================================


class TestUpdateSubject:
    def test_rename_writes_single_field_diff(self, registry, center_a, investigator):
        subject = registry.create_subject(investigator, center_a.id)

        result = registry.update_use_case().execute(
            subject.id, UpdateSubjectInput(changes={"name": "Jane Doe"}), investigator
        )

        assert result.error is None
        assert result.subject.name == "Jane Doe"
        assert result.subject.number == "SUB-001"

        update_entry = registry.audit.list_all()[-1]
        assert update_entry.action == AuditAction.UPDATE
        assert update_entry.diff == {
            "subject_id": str(subject.id),
            "name": {"old": "John Doe", "new": "Jane Doe"},
        }

    def test_rename_keeps_other_fields_in_storage(
        self, registry, center_a, investigator
    ):
        subject = registry.create_subject(
            investigator, center_a.id, birth_date=date(1990, 1, 15)
        )

        registry.update_use_case().execute(
            subject.id, UpdateSubjectInput(changes={"name": "Jane Doe"}), investigator
        )

        stored = registry.subjects.get_subject(subject.id)
        assert stored.name == "Jane Doe"
        assert stored.number == "SUB-001"
        assert stored.birth_date == date(1990, 1, 15)
        assert stored.center_id == center_a.id

    def test_update_without_effective_change_skips_audit(
        self, registry, center_a, investigator
    ):
        subject = registry.create_subject(investigator, center_a.id)

        result = registry.update_use_case().execute(
            subject.id,
            UpdateSubjectInput(
                changes={"name": " John Doe ", "birth_date": "1980-05-17"}
            ),
            investigator,
        )

        assert result.error is None
        assert result.subject.name == "John Doe"
        assert [e.action for e in registry.audit.list_all()] == [AuditAction.CREATE]

    def test_move_to_center_in_scope_records_center_names(self, registry, center_a):
        center_c = registry.add_center("Center C")
        user_id = registry.add_user([center_a.id, center_c.id])
        subject = registry.create_subject(user_id, center_a.id)

        result = registry.update_use_case().execute(
            subject.id, UpdateSubjectInput(changes={"center_id": center_c.id}), user_id
        )

        assert result.subject.center == center_c
        assert registry.audit.list_all()[-1].diff["center_id"] == {
            "old": {"id": str(center_a.id), "name": "Center A"},
            "new": {"id": str(center_c.id), "name": "Center C"},
        }

    def test_move_to_center_outside_scope_is_forbidden(
        self, registry, center_a, center_b, investigator
    ):
        subject = registry.create_subject(investigator, center_a.id)

        result = registry.update_use_case().execute(
            subject.id,
            UpdateSubjectInput(changes={"center_id": str(center_b.id)}),
            investigator,
        )

        assert result.error.code == SubjectErrorCode.FORBIDDEN
        current = registry.get_use_case().execute(subject.id, investigator).subject
        assert current.center_id == center_a.id

    def test_number_collision_is_conflict(self, registry, center_a, investigator):
        registry.create_subject(investigator, center_a.id, number="SUB-001")
        other = registry.create_subject(investigator, center_a.id, number="SUB-002")

        result = registry.update_use_case().execute(
            other.id, UpdateSubjectInput(changes={"number": "SUB-001"}), investigator
        )

        assert result.error.code == SubjectErrorCode.CONFLICT

    def test_unknown_and_null_fields_are_rejected(
        self, registry, center_a, investigator
    ):
        subject = registry.create_subject(investigator, center_a.id)
        use_case = registry.update_use_case()

        unknown = use_case.execute(
            subject.id, UpdateSubjectInput(changes={"email": "x"}), investigator
        )
        null = use_case.execute(
            subject.id, UpdateSubjectInput(changes={"name": None}), investigator
        )

        assert unknown.error.code == SubjectErrorCode.VALIDATION_ERROR
        assert null.error.code == SubjectErrorCode.VALIDATION_ERROR
        assert null.error.field == "name"

    def test_update_missing_subject_is_not_found(self, registry, investigator):
        result = registry.update_use_case().execute(
            uuid4(), UpdateSubjectInput(changes={"name": "X"}), investigator
        )

        assert result.error.code == SubjectErrorCode.NOT_FOUND

    def test_update_subject_outside_scope_is_forbidden(
        self, registry, center_a, investigator, outsider
    ):
        subject = registry.create_subject(investigator, center_a.id)

        result = registry.update_use_case().execute(
            subject.id, UpdateSubjectInput(changes={"name": "X"}), outsider
        )

        assert result.error.code == SubjectErrorCode.FORBIDDEN


# =============================================================================
# Delete
# =============================================================================


class TestDeleteSubject:
    def test_delete_removes_subject_and_writes_delete_entry(
        self, registry, center_a, investigator
    ):
        subject = registry.create_subject(investigator, center_a.id)

        result = registry.delete_use_case().execute(subject.id, investigator)

        assert result.error is None
        assert result.deleted is True
        assert registry.subjects.get_subject(subject.id) is None

        entries = registry.audit.list_all()
        assert [e.action for e in entries] == [AuditAction.CREATE, AuditAction.DELETE]
        # FK a subjects ya no existe: subject_id queda en NULL
        assert all(e.subject_id is None for e in entries)
        assert entries[-1].diff["subject_id"] == str(subject.id)
        assert entries[-1].diff["number"] == {"old": "SUB-001", "new": None}

    def test_delete_outside_scope_is_forbidden(
        self, registry, center_a, investigator, outsider
    ):
        subject = registry.create_subject(investigator, center_a.id)

        result = registry.delete_use_case().execute(subject.id, outsider)

        assert result.error.code == SubjectErrorCode.FORBIDDEN
        assert registry.subjects.get_subject(subject.id) is not None

    def test_delete_missing_subject_is_not_found(self, registry, investigator):
        result = registry.delete_use_case().execute(uuid4(), investigator)

        assert result.error.code == SubjectErrorCode.NOT_FOUND
        assert result.deleted is False

    def test_number_is_reusable_after_delete(self, registry, center_a, investigator):
        subject = registry.create_subject(investigator, center_a.id)
        registry.delete_use_case().execute(subject.id, investigator)

        again = registry.create_use_case().execute(_input(center_a.id), investigator)

        assert again.error is None
        assert again.subject.id != subject.id
