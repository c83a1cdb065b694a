"""Unit tests for filename templating."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from mailnamer import templating
from mailnamer.errors import InvalidFormatError, PropertyNotFoundError, TemplateError
from mailnamer.templating import (
    extract_properties,
    iter_tokens,
    render_filename,
    required_properties,
    resolve_property,
)


@pytest.mark.unit
@pytest.mark.parametrize("template", ["", "plain name", "50% off", "%Subject"])
def test_render_without_tokens_returns_template_unchanged(template: str) -> None:
    assert render_filename({}, template) == template


@pytest.mark.unit
def test_render_replaces_tokens_with_default_string_form() -> None:
    record = {"Subject": "Hello", "AttachmentCount": 3, "SentOn": date(2024, 1, 5)}

    rendered = render_filename(record, "%SentOn% %Subject% (%AttachmentCount%)")

    assert rendered == "2024-01-05 Hello (3)"


@pytest.mark.unit
def test_render_date_format_and_truncation_scenario() -> None:
    record = {"Subject": "Hello", "Date": date(2024, 1, 5)}

    assert render_filename(record, "%Date|yyyy-MM-dd% %Subject|3%") == "2024-01-05 Hel"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "length", "expected"),
    [
        ("Hello World", 5, "Hello"),
        ("Hello World", 6, "Hello"),
        ("   Hello World", 5, "Hello"),
        ("Hi", 10, "Hi"),
        (123456, 3, "123"),
    ],
)
def test_truncation_trims_and_caps_length(value: object, length: int, expected: str) -> None:
    assert resolve_property({"P": value}, "P", str(length)) == expected
    assert len(expected) <= length


@pytest.mark.unit
@pytest.mark.parametrize("format_spec", ["0", "-1", "000"])
def test_non_positive_truncation_length_is_invalid_format(format_spec: str) -> None:
    with pytest.raises(InvalidFormatError, match="truncation length must be a positive integer") as info:
        resolve_property({"Subject": "Hello"}, "Subject", format_spec)

    assert info.value.property_name == "Subject"
    assert info.value.format_spec == format_spec


@pytest.mark.unit
def test_digits_only_format_on_numbers_is_truncation_not_padding() -> None:
    assert render_filename({"Count": 123456}, "%Count|3%") == "123"
    with pytest.raises(InvalidFormatError, match="truncation length must be a positive integer"):
        render_filename({"Count": 42}, "%Count|000%")


@pytest.mark.unit
def test_render_propagates_invalid_format() -> None:
    with pytest.raises(InvalidFormatError):
        render_filename({"Subject": "Hello"}, "%Subject|0%")


@pytest.mark.unit
def test_display_format_that_does_not_fit_the_value_is_invalid_format() -> None:
    with pytest.raises(InvalidFormatError, match="invalid format 'yyyy' for property 'Subject'"):
        render_filename({"Subject": "Hello"}, "%Subject|yyyy%")


@pytest.mark.unit
def test_render_missing_property_names_the_property() -> None:
    with pytest.raises(PropertyNotFoundError, match="property 'Sender' not found") as info:
        render_filename({"Subject": "Hello"}, "%Sender% - %Subject%")

    assert info.value.property_name == "Sender"


@pytest.mark.unit
def test_extract_and_render_agree_on_token_spans() -> None:
    template = "%A%B%C%"

    assert list(extract_properties(template)) == ["A", "C"]
    assert [token.text for token in iter_tokens(template)] == ["%A%", "%C%"]
    # B sits between tokens, so rendering must not need it.
    assert render_filename({"A": "a", "C": "c"}, template) == "aBc"


@pytest.mark.unit
def test_extract_parses_adjacent_tokens_independently() -> None:
    assert list(extract_properties("%A%%B|3%")) == ["A", "B"]
    assert render_filename({"A": "x", "B": "yyyy"}, "%A%%B|3%") == "xyyy"


@pytest.mark.unit
def test_extract_keeps_duplicates_and_required_properties_dedupes() -> None:
    template = "%Subject|10% %SentOn|yyyy% %Subject%"

    assert list(extract_properties(template)) == ["Subject", "SentOn", "Subject"]
    assert required_properties(template) == ["Subject", "SentOn"]


@pytest.mark.unit
def test_extract_ignores_unterminated_token() -> None:
    assert list(extract_properties("%Subject")) == []


@pytest.mark.unit
def test_identical_tokens_are_replaced_together(monkeypatch) -> None:
    calls: list[str] = []
    original = templating.resolve_property

    def _counting(record, name, format_spec=""):
        calls.append(name)
        return original(record, name, format_spec)

    monkeypatch.setattr(templating, "resolve_property", _counting)

    rendered = render_filename({"Subject": "Hi"}, "%Subject% - %Subject%")

    assert rendered == "Hi - Hi"
    assert calls == ["Subject"]


@pytest.mark.unit
def test_trailing_stray_percent_stays_literal() -> None:
    assert render_filename({"Subject": "Hi"}, "%Subject% at 100%") == "Hi at 100%"


@pytest.mark.unit
def test_value_that_reintroduces_a_token_hits_the_pass_limit() -> None:
    with pytest.raises(TemplateError, match="did not settle"):
        render_filename({"A": "%B%", "B": "x"}, "%A%")


@pytest.mark.unit
def test_property_lookup_falls_back_to_case_insensitive_match() -> None:
    assert render_filename({"subject": "lower"}, "%Subject%") == "lower"
    assert render_filename({"Subject": "exact", "subject": "lower"}, "%Subject%") == "exact"


@pytest.mark.unit
def test_attribute_records_are_supported() -> None:
    record = SimpleNamespace(Subject="Quarterly report", sendername="Ada")

    assert render_filename(record, "%SenderName% %Subject|9%") == "Ada Quarterly"


@pytest.mark.unit
def test_render_is_idempotent() -> None:
    record = {"Subject": "  Status update  ", "SentOn": date(2023, 12, 31)}
    template = "%SentOn|yy.MM.dd% %Subject|8%"

    assert render_filename(record, template) == render_filename(record, template) == "23.12.31 Status u"
