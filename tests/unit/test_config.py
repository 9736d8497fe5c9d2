"""Tests for tally configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tally.core.config import (
    ConfigError,
    ErrorPolicy,
    TallyConfig,
    load_config,
    parse_error_policy,
    parse_log_level,
)


class TestParsing:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("halt", ErrorPolicy.HALT),
            ("STOP", ErrorPolicy.HALT),
            ("continue", ErrorPolicy.CONTINUE),
            (" keep-going ", ErrorPolicy.CONTINUE),
            ("", ErrorPolicy.HALT),
        ],
    )
    def test_error_policy(self, value: str, expected: ErrorPolicy) -> None:
        assert parse_error_policy(value) == expected

    def test_unknown_error_policy_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="tally.core.config"):
            result = parse_error_policy("sometimes", ErrorPolicy.CONTINUE)
        assert result == ErrorPolicy.CONTINUE
        assert "Unknown error policy 'sometimes'" in caplog.text

    def test_log_level(self) -> None:
        assert parse_log_level("debug") == "DEBUG"
        assert parse_log_level("") == "WARNING"

    def test_unknown_log_level_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="tally.core.config"):
            assert parse_log_level("loud") == "WARNING"
        assert "Unknown log level" in caplog.text


@pytest.mark.usefixtures("clean_config")
class TestLoadConfig:
    def test_defaults(self) -> None:
        assert load_config() == TallyConfig()

    def test_file_in_working_directory(self, tmp_path: Path) -> None:
        (tmp_path / "tally.toml").write_text(
            '[run]\nerror_policy = "continue"\nlog_level = "info"\nshow_vars = false\n'
        )
        config = load_config()
        assert config.error_policy == ErrorPolicy.CONTINUE
        assert config.log_level == "INFO"
        assert config.show_vars is False

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text('[run]\nerror_policy = "continue"\n')
        assert load_config(path).error_policy == ErrorPolicy.CONTINUE

    def test_file_without_run_table(self, tmp_path: Path) -> None:
        (tmp_path / "tally.toml").write_text('[other]\nkey = "value"\n')
        assert load_config() == TallyConfig()

    def test_environment_overrides_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "tally.toml").write_text('[run]\nerror_policy = "continue"\n')
        monkeypatch.setenv("TALLY_ERROR_POLICY", "halt")
        monkeypatch.setenv("TALLY_LOG_LEVEL", "error")
        config = load_config()
        assert config.error_policy == ErrorPolicy.HALT
        assert config.log_level == "ERROR"

    def test_unknown_environment_value_keeps_file_value(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "tally.toml").write_text('[run]\nerror_policy = "continue"\n')
        monkeypatch.setenv("TALLY_ERROR_POLICY", "bogus")
        assert load_config().error_policy == ErrorPolicy.CONTINUE

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "tally.toml").write_text("[run\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config()

    def test_run_must_be_a_table(self, tmp_path: Path) -> None:
        (tmp_path / "tally.toml").write_text('run = "fast"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config()

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(tmp_path / "absent.toml")
