"""Unit tests for pre-flight argument checks."""

from __future__ import annotations

import pytest

from globalmoo.exceptions import InvalidArgumentError
from globalmoo.validation import (
    is_official_host,
    require_base_uri,
    require_categories,
    require_input_types,
    require_length,
    require_output_cases,
    require_positive_id,
    require_sequence,
    require_text,
    require_tls_for_official_host,
)


@pytest.mark.parametrize("value", [0, -1, True, "3", 1.5, None])
def test_positive_id_rejects(value: object) -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        require_positive_id(value, "trial_id")
    assert exc_info.value.parameter == "trial_id"


def test_positive_id_accepts() -> None:
    assert require_positive_id(12, "trial_id") == 12


def test_text_checks() -> None:
    assert require_text("abcd", "name", min_length=4) == "abcd"
    with pytest.raises(InvalidArgumentError, match="cannot be empty"):
        require_text("   ", "name")
    with pytest.raises(InvalidArgumentError, match="at least 4"):
        require_text("  abc  ", "name", min_length=4)


def test_sequence_rejects_none_and_strings() -> None:
    with pytest.raises(InvalidArgumentError, match="required"):
        require_sequence(None, "minimums")
    with pytest.raises(InvalidArgumentError, match="must be a list"):
        require_sequence("1,2", "minimums")
    assert require_sequence((1, 2), "minimums") == [1, 2]


def test_length_message_names_both_lengths() -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        require_length([0], "minimums", expected=2, expected_name="input count")
    assert exc_info.value.parameter == "minimums"
    assert "(1)" in str(exc_info.value)
    assert "(2)" in str(exc_info.value)


def test_input_types_case_insensitive_and_normalized() -> None:
    assert require_input_types(["Float", "INTEGER", "boolean", "category"]) == [
        "float",
        "integer",
        "boolean",
        "category",
    ]


def test_input_types_name_offending_value() -> None:
    with pytest.raises(InvalidArgumentError, match="'double'"):
        require_input_types(["float", "double"])


def test_categories_reject_empty_entries() -> None:
    with pytest.raises(InvalidArgumentError, match="empty"):
        require_categories(["a", ""])


def test_output_cases_row_length() -> None:
    assert require_output_cases([(1, 2, 3)], 3) == [[1, 2, 3]]
    with pytest.raises(InvalidArgumentError, match="length 3"):
        require_output_cases([[1, 2, 3], [1, 2]], 3)


@pytest.mark.parametrize("row", [1.0, "abc", {"a": 1}])
def test_output_cases_rows_must_be_lists(row: object) -> None:
    with pytest.raises(InvalidArgumentError, match="entry 1 must be a list") as exc_info:
        require_output_cases([[1.0], row], 1)
    assert exc_info.value.parameter == "output_cases"


def test_base_uri_must_be_absolute() -> None:
    assert require_base_uri(" https://app.globalmoo.com/api/ ") == "https://app.globalmoo.com/api/"
    with pytest.raises(InvalidArgumentError):
        require_base_uri("app.globalmoo.com/api")


def test_official_host_detection() -> None:
    assert is_official_host("https://globalmoo.com/api")
    assert is_official_host("https://app.GlobalMOO.com/api")
    assert is_official_host("https://app.globalmoo.com./api")
    assert is_official_host("https://globalmoo.com.")
    assert not is_official_host("https://globalmoo.com.example.test/api")
    assert not is_official_host("http://localhost:8080")


def test_tls_cannot_be_disabled_for_official_host() -> None:
    with pytest.raises(InvalidArgumentError) as exc_info:
        require_tls_for_official_host("https://app.globalmoo.com/api", False)
    assert exc_info.value.parameter == "validate_tls"

    require_tls_for_official_host("https://app.globalmoo.com/api", True)
    require_tls_for_official_host("https://localhost:8443", False)
