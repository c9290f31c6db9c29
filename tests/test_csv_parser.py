from __future__ import annotations

from datetime import date

import pytest

from app.services.csv_parser_service import (
    CSVValidationError,
    parse_csv,
    resolve_columns,
    sanitize_value,
    validate_birthday,
    validate_name,
    validate_postal_code,
)


TODAY = date(2025, 6, 1)


def test_parses_valid_rows_in_input_order() -> None:
    parsed = parse_csv(
        "name,postal_code,birthday\n"
        "Jane Doe,12345,1990-05-17\n"
        "John Smith,AB1 2CD,1985-12-01\n",
        today=TODAY,
    )

    assert [r.name for r in parsed.rows] == ["Jane Doe", "John Smith"]
    assert parsed.rows[1].postal_code == "AB1 2CD"
    assert parsed.rows[0].birthday == "1990-05-17"
    assert parsed.errors == []


def test_header_only_csv_is_rejected() -> None:
    with pytest.raises(CSVValidationError, match="at least one data row"):
        parse_csv("name,postal_code,birthday\n", today=TODAY)


def test_blank_content_is_rejected() -> None:
    with pytest.raises(CSVValidationError, match="No CSV content"):
        parse_csv("   \n  ", today=TODAY)


def test_missing_columns_are_named_in_the_error() -> None:
    with pytest.raises(CSVValidationError) as excinfo:
        parse_csv("name,city,age\nJane Doe,Paris,30\n", today=TODAY)

    message = str(excinfo.value)
    assert "postal_code" in message
    assert "birthday" in message
    assert "name," not in message.split(":", 1)[1]


def test_headers_are_matched_by_substring_in_any_order() -> None:
    positions = resolve_columns(["Date of Birth", " Full Name ", "ZIP"])
    assert positions == {"name": 1, "postal_code": 2, "birthday": 0}


def test_birthday_outside_range_is_skipped_not_fatal() -> None:
    parsed = parse_csv(
        "name,postal_code,birthday\n"
        "Old Timer,12345,1899-12-31\n"
        "Jane Doe,12345,1990-05-17\n"
        "Future Kid,12345,2026-01-01\n",
        today=TODAY,
    )

    assert [r.name for r in parsed.rows] == ["Jane Doe"]
    assert [e.line for e in parsed.errors] == [2, 4]
    assert all("birthday year" in e.message for e in parsed.errors)


def test_only_row_with_bad_birthday_fails_the_batch() -> None:
    with pytest.raises(CSVValidationError, match="No valid rows"):
        parse_csv("name,postal_code,birthday\nOld Timer,12345,1850-01-01\n", today=TODAY)


def test_max_rows_rejects_batch_before_row_validation() -> None:
    # every row is invalid, yet the size limit is what gets reported
    content = "name,postal_code,birthday\n" + "\n".join(["!!,??,bad"] * 3)
    with pytest.raises(CSVValidationError, match="limit is 2"):
        parse_csv(content, max_rows=2, today=TODAY)


def test_max_bytes_is_enforced() -> None:
    content = "name,postal_code,birthday\nJane Doe,12345,1990-05-17\n"
    with pytest.raises(CSVValidationError, match="too large"):
        parse_csv(content, max_bytes=10, today=TODAY)


def test_quoted_field_keeps_columns_aligned() -> None:
    parsed = parse_csv(
        'name,notes,postal_code,birthday\n'
        'Jane Doe,"likes tea, coffee",12345,1990-05-17\n',
        today=TODAY,
    )
    assert parsed.rows[0].postal_code == "12345"
    assert parsed.rows[0].birthday == "1990-05-17"


def test_short_rows_and_blank_lines() -> None:
    parsed = parse_csv(
        "name,postal_code,birthday\n"
        "\n"
        "Jane Doe,12345\n"
        "John Smith,54321,1970-01-01\n",
        today=TODAY,
    )
    assert [r.name for r in parsed.rows] == ["John Smith"]
    assert parsed.errors[0].line == 3
    assert "expected at least 3 columns" in parsed.errors[0].message


def test_values_are_sanitized() -> None:
    parsed = parse_csv(
        "\ufeffname,postal_code,birthday\n"
        "'Jane    Doe',  12345 ,\"1990-05-17\"\n",
        today=TODAY,
    )
    assert parsed.rows[0].name == "Jane Doe"
    assert parsed.rows[0].postal_code == "12345"


def test_sanitize_value_strips_control_characters() -> None:
    assert sanitize_value("Ja\x00ne\x07") == "Jane"
    assert sanitize_value(None) == ""


@pytest.mark.parametrize(
    "name",
    ["Jane Doe", "Mary-Jane O'Neil", "José Álvarez", "J. R. Tolkien"],
)
def test_valid_names(name: str) -> None:
    assert validate_name(name) == name


@pytest.mark.parametrize(
    "name",
    ["", "R2D2", "<script>", "x" * 101, "-Jane"],
)
def test_invalid_names(name: str) -> None:
    with pytest.raises(ValueError):
        validate_name(name)


def test_postal_code_rules() -> None:
    assert validate_postal_code("SW1A 1AA") == "SW1A 1AA"
    assert validate_postal_code("12345-6789") == "12345-6789"
    for bad in ["", "1" * 21, "123;45"]:
        with pytest.raises(ValueError):
            validate_postal_code(bad)


def test_birthday_rules() -> None:
    assert validate_birthday("2000-02-29", today=TODAY) == "2000-02-29"
    assert validate_birthday("2025-01-01", today=TODAY) == "2025-01-01"
    for bad in ["1990/05/17", "17-05-1990", "1990-5-17", "1990-02-30", "1899-12-31", "2026-01-01"]:
        with pytest.raises(ValueError):
            validate_birthday(bad, today=TODAY)
