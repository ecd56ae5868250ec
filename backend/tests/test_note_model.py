"""
Notes API: Note Entity Unit Tests
=====================================

What:  Tests for title/content validation and the Note value type.
Why:   Every route relies on these rules; boundaries are easy to get off by one.

What we test:
    ✅ Length boundaries (200/201, 10000/10001) counted before trimming
    ✅ Blank, missing and non-string values rejected with the right message
    ✅ create() trims and stamps equal timestamps
    ✅ copy_with() keeps id/createdAt and strictly advances updatedAt
    ✅ Equality and hashing by id only
"""

from datetime import timezone

import pytest

from notes_api.exceptions import ValidationError
from notes_api.models.note import (
    CONTENT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Note,
    utc_now,
    validate_content,
    validate_title,
)
from notes_api.schemas.note import serialize_note


class TestValidateTitle:

    def test_accepts_exactly_max_length(self):
        validate_title("x" * TITLE_MAX_LENGTH)

    def test_rejects_one_over_max_length(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_title("x" * (TITLE_MAX_LENGTH + 1))
        assert exc_info.value.message == "Title must be 200 characters or less"
        assert exc_info.value.field == "title"
        assert exc_info.value.reason == "too_long"

    def test_length_counts_surrounding_whitespace(self):
        """The limit applies to the value as sent, not the trimmed value."""
        with pytest.raises(ValidationError):
            validate_title(" " + "x" * TITLE_MAX_LENGTH)

    def test_length_counts_code_points(self):
        validate_title("é" * TITLE_MAX_LENGTH)

    @pytest.mark.parametrize("blank", ["", "   ", "\n\t"])
    def test_rejects_blank(self, blank):
        with pytest.raises(ValidationError) as exc_info:
            validate_title(blank)
        assert exc_info.value.message == "Title is required"
        assert exc_info.value.details == {"field": "title", "value": blank}

    def test_rejects_none(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_title(None)
        assert exc_info.value.message == "Title is required"
        assert exc_info.value.details == {"field": "title"}

    def test_rejects_non_string(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_title(42)
        assert exc_info.value.reason == "invalid_type"
        assert exc_info.value.details == {"field": "title", "value": 42}

    @pytest.mark.parametrize("value", [float("inf"), float("nan"), object()])
    def test_details_leave_out_values_json_cannot_encode(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_title(value)
        assert exc_info.value.reason == "invalid_type"
        assert exc_info.value.details == {"field": "title"}


class TestValidateContent:

    def test_accepts_exactly_max_length(self):
        validate_content("y" * CONTENT_MAX_LENGTH)

    def test_rejects_one_over_max_length(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_content("y" * (CONTENT_MAX_LENGTH + 1))
        assert exc_info.value.message == "Content must be 10,000 characters or less"
        assert exc_info.value.field == "content"

    def test_rejects_whitespace_only(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_content("   ")
        assert exc_info.value.message == "Content is required"


class TestNote:

    def test_create_trims_and_stamps(self):
        note = Note.create(title="  Shopping  ", content="\tmilk\n")

        assert note.title == "Shopping"
        assert note.content == "milk"
        assert note.created_at == note.updated_at
        assert note.created_at.tzinfo is not None
        assert len(note.id) == 36

    def test_create_assigns_unique_ids(self):
        ids = {Note.create(title="t", content="c").id for _ in range(50)}
        assert len(ids) == 50

    def test_copy_with_partial(self):
        note = Note.create(title="Old", content="Body")
        updated = note.copy_with(title="  New ")

        assert updated.id == note.id
        assert updated.title == "New"
        assert updated.content == "Body"
        assert updated.created_at == note.created_at

    def test_copy_with_always_advances_updated_at(self):
        """Even an empty update moves updatedAt strictly forward."""
        note = Note.create(title="t", content="c")
        first = note.copy_with()
        second = first.copy_with()

        assert note.updated_at < first.updated_at < second.updated_at

    def test_equality_is_by_id(self):
        note = Note.create(title="t", content="c")
        changed = note.copy_with(title="other")
        different = Note.create(title="t", content="c")

        assert note == changed
        assert hash(note) == hash(changed)
        assert note != different

    def test_is_immutable(self):
        note = Note.create(title="t", content="c")
        with pytest.raises(AttributeError):
            note.title = "changed"

    def test_serialized_shape_uses_camel_case_and_utc(self):
        note = Note.create(title="t", content="c")
        data = serialize_note(note)

        assert set(data) == {"id", "title", "content", "createdAt", "updatedAt"}
        assert data["createdAt"].endswith("Z")
        assert data["createdAt"] == data["updatedAt"]


class TestClock:

    def test_utc_now_is_strictly_increasing(self):
        stamps = [utc_now() for _ in range(1000)]
        assert all(a < b for a, b in zip(stamps, stamps[1:]))
        assert stamps[0].tzinfo == timezone.utc
