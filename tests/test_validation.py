"""Tests for vectorauth.validation -- name and serial rules, configuration checks."""

from __future__ import annotations

import string

import pytest

from vectorauth.exceptions import ConfigurationError, ErrorKind
from vectorauth.models import RobotConfiguration
from vectorauth.validation import (
    robot_name_is_valid,
    serial_number_is_valid,
    standardize_robot_name,
    try_validate,
    validate,
)

from conftest import SAMPLE_CERTIFICATE


def _valid_config(**overrides: object) -> RobotConfiguration:
    values: dict[str, object] = {
        "robot_name": "Vector-A1B2",
        "serial_number": "00e20115",
        "ip_address": "192.168.1.50",
        "certificate": SAMPLE_CERTIFICATE,
        "guid": "token-guid-1234",
    }
    values.update(overrides)
    return RobotConfiguration(**values)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Robot names
# ---------------------------------------------------------------------------


class TestRobotNameIsValid:
    @pytest.mark.parametrize("name", ["Vector-A1B2", "Vector-0000", "Vector-ZZZZ"])
    def test_valid(self, name: str) -> None:
        assert robot_name_is_valid(name) is True

    @pytest.mark.parametrize(
        "name",
        [
            None,
            "",
            "vector-a1b2",
            "Vector-a1b2",
            "VECTOR-A1B2",
            "Vector-A1B",
            "Vector-A1B23",
            "Vector_A1B2",
            "XVector-A1B2",
            "Vector-A1B2 ",
            "Vector-A1-2",
            "A1B2",
        ],
    )
    def test_invalid(self, name: object) -> None:
        assert robot_name_is_valid(name) is False  # type: ignore[arg-type]


class TestSerialNumberIsValid:
    @pytest.mark.parametrize("serial", ["0a1b2c3d", "00e20115", "ffffffff", "12345678"])
    def test_valid(self, serial: str) -> None:
        assert serial_number_is_valid(serial) is True

    @pytest.mark.parametrize(
        "serial",
        [None, "", "0A1B2C3D", "0a1b2c3", "0a1b2c3d4", "0a1b2c3g", " 0a1b2c3", "0x1b2c3d"],
    )
    def test_invalid(self, serial: object) -> None:
        assert serial_number_is_valid(serial) is False  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Name normalisation
# ---------------------------------------------------------------------------


class TestStandardizeRobotName:
    def test_none_passes_through(self) -> None:
        assert standardize_robot_name(None) is None

    @pytest.mark.parametrize("suffix", ["ab12", "AB12", "a1B2", "0000", "zzzz"])
    def test_four_characters_get_prefix(self, suffix: str) -> None:
        assert standardize_robot_name(suffix) == "Vector-" + suffix.upper()

    def test_every_short_suffix_standardizes_to_a_valid_name(self) -> None:
        alphabet = string.ascii_lowercase + string.digits
        for i in range(0, len(alphabet) - 3):
            suffix = alphabet[i : i + 4]
            name = standardize_robot_name(suffix)
            assert name == "Vector-" + suffix.upper()
            assert robot_name_is_valid(name)

    def test_long_lowercase_name(self) -> None:
        assert standardize_robot_name("vector-a1b2") == "Vector-A1B2"

    def test_already_canonical_name_is_unchanged(self) -> None:
        assert standardize_robot_name("Vector-A1B2") == "Vector-A1B2"

    def test_replaces_substring_only(self) -> None:
        assert standardize_robot_name("xvector-ab12y") == "XVector-AB12Y"

    def test_replaces_every_occurrence(self) -> None:
        assert standardize_robot_name("vector-vector-ab") == "Vector-Vector-AB"

    def test_unrecognised_name_is_only_uppercased(self) -> None:
        assert standardize_robot_name("robot-12") == "ROBOT-12"

    def test_empty_string(self) -> None:
        assert standardize_robot_name("") == ""


# ---------------------------------------------------------------------------
# Configuration validation
# ---------------------------------------------------------------------------


class TestTryValidate:
    def test_valid_configuration_has_no_errors(self) -> None:
        assert try_validate(_valid_config()) == []

    def test_missing_name_and_bad_serial_in_check_order(self) -> None:
        config = _valid_config(robot_name=None, serial_number="0A1B2C3D")
        assert try_validate(config) == [
            "Robot name is missing",
            "Serial number is not the correct format.",
        ]

    def test_all_fields_missing(self) -> None:
        assert try_validate(RobotConfiguration()) == [
            "Robot name is missing",
            "Serial number is missing",
            "SSL certificate is missing",
            "GUID token is missing",
        ]

    def test_malformed_values_are_reported_after_presence_checks(self) -> None:
        config = _valid_config(robot_name="vector-a1b2", serial_number="0a1b2c3", guid=None)
        assert try_validate(config) == [
            "GUID token is missing",
            "Invalid robot name. Please match the format exactly. Example: Vector-A1B2",
            "Serial number is not the correct format.",
        ]

    def test_whitespace_counts_as_missing(self) -> None:
        config = _valid_config(certificate="   ", guid="\n")
        assert try_validate(config) == [
            "SSL certificate is missing",
            "GUID token is missing",
        ]

    def test_does_not_check_address(self) -> None:
        assert try_validate(_valid_config(ip_address=None)) == []


class TestValidate:
    def test_returns_same_object(self) -> None:
        config = _valid_config()
        assert validate(config) is config

    def test_raises_first_message(self) -> None:
        config = _valid_config(serial_number=None, guid=None)
        with pytest.raises(ConfigurationError, match="Serial number is missing") as exc_info:
            validate(config)
        assert exc_info.value.kind is ErrorKind.CONFIGURATION
