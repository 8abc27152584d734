"""Tests for the zemdomu exception hierarchy."""

from __future__ import annotations

import pytest

from zemdomu.exceptions import (
    ConfigurationError,
    MarkupParseError,
    ScanSupersededError,
    ZemDomuError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("zemdomu.yaml", "bad"),
            MarkupParseError("Unexpected token"),
            ScanSupersededError(1, 2),
        ],
    )
    def test_all_derive_from_base(self, error: ZemDomuError) -> None:
        assert isinstance(error, ZemDomuError)


class TestMessages:
    def test_configuration_error(self) -> None:
        error = ConfigurationError("zemdomu.yaml", "spec must be a mapping")
        assert str(error) == "Configuration error in 'zemdomu.yaml': spec must be a mapping"
        assert error.component == "zemdomu.yaml"

    def test_parse_error_position_is_one_based_in_message(self) -> None:
        error = MarkupParseError("Unexpected token", line=2, column=4)
        assert str(error) == "Unexpected token (3:5)"
        assert (error.line, error.column) == (2, 4)

    def test_parse_error_without_position(self) -> None:
        assert str(MarkupParseError("Unexpected end of input")) == "Unexpected end of input"

    def test_scan_superseded(self) -> None:
        error = ScanSupersededError(3, 5)
        assert str(error) == "Scan 3 superseded by scan 5"
        assert (error.generation, error.current) == (3, 5)
