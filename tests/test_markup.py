from core import strip_tags, align_attributes, attribute_headers, display_value, is_missing


def test_strip_tags_removes_markup() -> None:
    assert strip_tags("<b>Male</b>") == "Male"
    assert strip_tags('<span style="color:red">Required</span> field') == "Required field"
    assert strip_tags("Line one<br/>Line two") == "Line oneLine two"


def test_strip_tags_removes_comments() -> None:
    assert strip_tags("Visible<!-- hidden <b>note</b> -->text") == "Visibletext"


def test_strip_tags_keeps_plain_text_and_comparisons() -> None:
    assert strip_tags("Age in years") == "Age in years"
    assert strip_tags("Age < 18") == "Age < 18"
    assert strip_tags("") == ""


def test_strip_tags_unterminated_tag_swallows_rest() -> None:
    assert strip_tags("Before <i unterminated") == "Before "


def test_strip_tags_none_and_non_strings() -> None:
    assert strip_tags(None) == ""
    assert strip_tags(5) == "5"


def test_missing_values() -> None:
    assert is_missing(None)
    assert is_missing("")
    assert not is_missing("0")
    assert not is_missing(" ")
    assert display_value("", "n/a") == "n/a"
    assert display_value("0", "n/a") == "0"


def test_align_attributes_by_position() -> None:
    new = {"label": "A", "type": "text"}
    old = {"title": "A", "type": "radio", "extra": "x"}

    assert list(align_attributes(new, old)) == [
        ("label", "A", "A"),
        ("type", "text", "radio"),
        ("extra", None, "x"),
    ]


def test_align_attributes_with_one_side_missing() -> None:
    assert list(align_attributes({"label": "A"}, None)) == [("label", "A", None)]
    assert list(align_attributes(None, {"label": "A"})) == [("label", None, "A")]
    assert list(align_attributes(None, None)) == []


def test_attribute_headers_use_first_record() -> None:
    dictionary = {
        "a": {"field_name": "a", "field_label": "A"},
        "b": {"field_name": "b", "field_label": "B", "note": "x"},
    }

    assert attribute_headers(dictionary) == ["field_name", "field_label"]
    assert attribute_headers({}) == []


def test_strip_tags_quoted_attribute_may_contain_angle_bracket() -> None:
    assert strip_tags('<span title="a>b">Male</span>') == "Male"
    assert strip_tags("<span title='x > y'>Female</span>") == "Female"
    assert strip_tags('Before <a title="unterminated') == "Before "
