from __future__ import annotations

import pytest

from sinklog import InvalidLevelError, Severity, severity_of
from sinklog.severity import resolve_level, threshold_of

TABLE = {
    "EMERG": 0,
    "ALERT": 1,
    "CRIT": 2,
    "ERROR": 3,
    "WARN": 4,
    "NOTICE": 5,
    "INFO": 6,
    "DEBUG": 7,
}


class TestSeverityOf:
    @pytest.mark.parametrize("name", list(TABLE))
    @pytest.mark.parametrize("transform", [str.upper, str.lower, str.capitalize])
    def test_known_levels_any_case(self, name: str, transform) -> None:
        severity, canonical = severity_of(transform(name))
        assert int(severity) == TABLE[name]
        assert canonical == name

    def test_table_has_exactly_eight_levels(self) -> None:
        assert {s.name: s.value for s in Severity} == TABLE

    @pytest.mark.parametrize("name", ["warning", "critical", "trace", "", "fatal"])
    def test_unknown_level_raises(self, name: str) -> None:
        with pytest.raises(InvalidLevelError) as excinfo:
            severity_of(name)
        assert excinfo.value.code == "INVALID_LEVEL"
        assert excinfo.value.level == name.upper()


class TestResolveLevel:
    def test_valid_level(self) -> None:
        assert resolve_level("notice") == (Severity.NOTICE, "NOTICE", True)

    def test_unknown_level_degrades_to_error(self) -> None:
        resolved = resolve_level("verbose")
        assert resolved.severity == 3
        assert resolved.name == "ERROR"
        assert resolved.valid is False


class TestThresholdOf:
    def test_known_threshold(self) -> None:
        assert threshold_of("warn") == Severity.WARN

    def test_unknown_threshold_defaults_to_info(self) -> None:
        assert threshold_of("loud") == Severity.INFO
