from core import (
    RecordSetDiffer,
    ChangeStatus,
    compare_dictionaries,
    strip_tags,
)


def _statuses(change_set) -> list[tuple[str, ChangeStatus]]:
    return [(e.field_name, e.status) for e in change_set]


def test_equal_dictionaries_produce_no_changes() -> None:
    dictionary = {
        "record_id": {"field_label": "Record ID", "field_type": "text"},
        "age": {"field_label": "Age", "field_type": "text"},
    }

    result = compare_dictionaries(dictionary, dict(dictionary))

    assert result.is_identical
    assert len(result.change_set) == 0
    assert result.summary.fields_added == 0
    assert result.summary.fields_deleted == 0
    assert result.summary.fields_modified == 0
    assert result.summary.total_fields_before == 2
    assert result.summary.total_fields_after == 2


def test_added_field_is_counted_as_added_only() -> None:
    older = {"a": {"label": "A"}}
    newer = {"a": {"label": "A"}, "b": {"label": "B"}}

    result = compare_dictionaries(newer, older)

    assert _statuses(result.change_set) == [("b", ChangeStatus.ADDED)]
    entry = result.change_set.entries[0]
    assert entry.record == {"label": "B"}
    assert entry.old_record is None
    assert result.summary.fields_added == 1
    assert result.summary.fields_deleted == 0
    assert result.summary.fields_modified == 0


def test_deleted_field_is_counted_as_deleted_only() -> None:
    older = {"a": {"label": "A"}, "b": {"label": "B"}}
    newer = {"a": {"label": "A"}}

    result = compare_dictionaries(newer, older)

    assert _statuses(result.change_set) == [("b", ChangeStatus.DELETED)]
    entry = result.change_set.entries[0]
    assert entry.record == {"label": "B"}
    assert entry.new_record is None
    assert result.summary.fields_deleted == 1
    assert result.summary.fields_added == 0
    assert result.summary.fields_modified == 0


def test_markup_only_difference_is_listed_but_not_counted() -> None:
    older = {"sex": {"label": "Sex", "choices": "1, Male"}}
    newer = {"sex": {"label": "Sex", "choices": "1, <b>Male</b>"}}

    result = compare_dictionaries(newer, older)

    assert _statuses(result.change_set) == [("sex", ChangeStatus.MODIFIED)]
    entry = result.change_set.entries[0]
    assert not entry.has_changes
    assert entry.changed_attributes == []
    assert result.summary.fields_modified == 0


def test_real_attribute_change_carries_old_and_new_values() -> None:
    older = {"age": {"field_label": "Age", "field_type": "text"}}
    newer = {"age": {"field_label": "Age (years)", "field_type": "text"}}

    result = compare_dictionaries(newer, older)

    entry = result.change_set.entries[0]
    assert entry.status == ChangeStatus.MODIFIED
    assert [(a.name, a.new_value, a.old_value) for a in entry.changed_attributes] == [
        ("field_label", "Age (years)", "Age")
    ]
    assert result.summary.fields_modified == 1


def test_change_set_order_follows_newer_then_older() -> None:
    older = {
        "d1": {"label": "Deleted one"},
        "m1": {"label": "Before"},
        "d2": {"label": "Deleted two"},
        "same": {"label": "Same"},
        "m2": {"label": "Before"},
    }
    newer = {
        "m2": {"label": "After"},
        "a1": {"label": "Added one"},
        "same": {"label": "Same"},
        "m1": {"label": "After"},
        "a2": {"label": "Added two"},
    }

    result = compare_dictionaries(newer, older)

    assert _statuses(result.change_set) == [
        ("m2", ChangeStatus.MODIFIED),
        ("a1", ChangeStatus.ADDED),
        ("m1", ChangeStatus.MODIFIED),
        ("a2", ChangeStatus.ADDED),
        ("d1", ChangeStatus.DELETED),
        ("d2", ChangeStatus.DELETED),
    ]


def test_rediffing_gives_identical_results() -> None:
    older = {"a": {"label": "A"}, "b": {"label": "<i>B</i>"}}
    newer = {"b": {"label": "B!"}, "c": {"label": "C"}}
    differ = RecordSetDiffer()

    assert differ.diff(newer, older) == differ.diff(newer, older)


def test_added_and_deleted_scenario() -> None:
    older = {
        "A": {"label": "Sex", "type": "radio"},
        "B": {"label": "DOB", "type": "text"},
    }
    newer = {
        "A": {"label": "Sex", "type": "radio"},
        "C": {"label": "Email", "type": "text"},
    }

    result = compare_dictionaries(newer, older)

    assert _statuses(result.change_set) == [("C", ChangeStatus.ADDED), ("B", ChangeStatus.DELETED)]
    assert result.summary.to_dict() == {
        "fields_added": 1,
        "fields_deleted": 1,
        "fields_modified": 0,
        "total_fields_before": 2,
        "total_fields_after": 2,
    }


def test_attribute_order_change_is_listed_and_counted() -> None:
    older = {"f": {"label": "Same", "type": "text"}}
    newer = {"f": {"type": "text", "label": "Same"}}

    result = compare_dictionaries(newer, older)

    # Slots are compared by position, so reordering shows as changed values
    entry = result.change_set.entries[0]
    assert entry.status == ChangeStatus.MODIFIED
    assert [a.name for a in entry.changed_attributes] == ["type", "label"]
    assert result.summary.fields_modified == 1


def test_attributes_are_aligned_by_position_not_name() -> None:
    older = {"f": {"label": "Weight", "units": "kg"}}
    newer = {"f": {"label": "Weight", "unit": "kg"}}

    result = compare_dictionaries(newer, older)

    entry = result.change_set.entries[0]
    assert entry.status == ChangeStatus.MODIFIED
    # Renamed slot with an equal value is not a value change
    assert not entry.has_changes
    assert [a.name for a in entry.attributes] == ["label", "unit"]
    assert result.summary.fields_modified == 0


def test_older_record_with_extra_slots() -> None:
    older = {"f": {"label": "X", "type": "text", "note": "legacy"}}
    newer = {"f": {"label": "X", "type": "text"}}

    result = compare_dictionaries(newer, older)

    entry = result.change_set.entries[0]
    last = entry.attributes[-1]
    assert (last.name, last.new_value, last.old_value, last.changed) == ("note", "", "legacy", True)
    assert result.change_set.headers == ("label", "type", "note")
    assert result.summary.fields_modified == 1


def test_none_and_empty_values_compare_equal_after_normalizing() -> None:
    older = {"f": {"label": "X", "note": None}}
    newer = {"f": {"label": "X", "note": ""}}

    result = compare_dictionaries(newer, older)

    assert len(result.change_set) == 1
    assert result.summary.fields_modified == 0


def test_values_are_tag_stripped_for_display() -> None:
    older = {"f": {"label": "<b>Old</b> label"}}
    newer = {"f": {"label": "New <i>label</i>"}}

    entry = compare_dictionaries(newer, older).change_set.entries[0]

    assert entry.attributes[0].new_value == "New label"
    assert entry.attributes[0].old_value == "Old label"
    # Raw records are kept untouched
    assert entry.new_record["label"] == "New <i>label</i>"


def test_custom_normalizer_sets_counting_and_displayed_values() -> None:
    older = {"f": {"label": "Age"}}
    newer = {"f": {"label": "AGE"}}

    result = compare_dictionaries(newer, older, normalize=lambda v: strip_tags(v).lower())

    assert len(result.change_set) == 1
    assert result.summary.fields_modified == 0
    attribute = result.change_set.entries[0].attributes[0]
    assert (attribute.new_value, attribute.old_value) == ("age", "age")


def test_empty_inputs() -> None:
    assert compare_dictionaries({}, {}).is_identical

    result = compare_dictionaries({"a": {"label": "A"}}, {})
    assert _statuses(result.change_set) == [("a", ChangeStatus.ADDED)]
    assert result.summary.total_fields_before == 0

    result = compare_dictionaries({}, {"a": {"label": "A"}})
    assert _statuses(result.change_set) == [("a", ChangeStatus.DELETED)]
    assert result.change_set.headers == ("label",)


def test_headers_come_from_newer_schema() -> None:
    older = {"f": {"old_a": "1", "old_b": "2"}}
    newer = {"f": {"new_a": "1", "new_b": "3"}}

    result = compare_dictionaries(newer, older)

    assert result.change_set.headers == ("new_a", "new_b")


def test_result_to_dict_carries_revision_handles() -> None:
    result = compare_dictionaries(
        {"a": {"label": "A"}}, {}, newer_revision="current", older_revision="3"
    )

    payload = result.to_dict()
    assert payload["newer_revision"] == "current"
    assert payload["older_revision"] == "3"
    assert payload["is_identical"] is False
    assert payload["headers"] == ["label"]
    assert payload["entries"][0]["status"] == "added"


def test_status_labels() -> None:
    assert ChangeStatus.ADDED.label == "New field"
    assert ChangeStatus.DELETED.label == "Deleted field"
    assert ChangeStatus.MODIFIED.label == "Field with changes"


def test_quoted_angle_bracket_in_markup_is_not_counted() -> None:
    older = {"sex": {"label": "Male"}}
    newer = {"sex": {"label": '<span title="a>b">Male</span>'}}

    result = compare_dictionaries(newer, older)

    assert len(result.change_set) == 1
    assert result.summary.fields_modified == 0
