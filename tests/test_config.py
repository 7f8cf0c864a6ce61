"""Tests for SwiftGuard configuration loading."""
from __future__ import annotations

from pathlib import Path

import pytest

from swiftguard.config import CONFIG_FILENAME, ConfigLoader, load_config
from swiftguard.constants import DEFAULT_EXCLUDES, DEFAULT_SEVERITIES, OutputFormat, Severity
from swiftguard.types import ConfigError, SwiftGuardConfig


def _write_config(directory: Path, content: str) -> Path:
    path: Path = directory / CONFIG_FILENAME
    path.write_text(content, encoding="utf-8")
    return path


class TestDefaults:
    def test_default_config_has_expected_values(self) -> None:
        config: SwiftGuardConfig = SwiftGuardConfig()
        assert config.config_path is None
        assert config.include == ("**/*.swift",)
        assert config.exclude == DEFAULT_EXCLUDES
        assert config.output_format == OutputFormat.TEXT
        assert config.show_source is True
        assert config.warnings_as_errors is False
        assert config.jobs == 1
        assert dict(config.rules.severities) == DEFAULT_SEVERITIES
        assert config.ignores.require_reason is True
        assert config.ignores.disallow == frozenset()
        assert config.ignores.max_per_file is None

    def test_default_rule_options(self) -> None:
        config: SwiftGuardConfig = SwiftGuardConfig()
        assert config.rules.acc001.exempt_extensions is False
        assert config.rules.swt001.marker == "swiftguard: default-ok"
        assert config.rules.cls001.justification_marker == "nonfinal:"

    def test_every_rule_enabled_by_default(self) -> None:
        config: SwiftGuardConfig = SwiftGuardConfig()
        assert all(config.is_rule_enabled(code) for code in DEFAULT_SEVERITIES)
        assert config.get_severity("ACC001") == Severity.ERROR
        assert config.get_severity("UNW001") == Severity.WARNING

    def test_no_config_file_returns_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(ConfigLoader, "find_config_file", staticmethod(lambda start_path=None: None))
        assert load_config() == SwiftGuardConfig()


class TestLoad:
    def test_load_custom_config(self, swiftguard_toml: Path) -> None:
        config: SwiftGuardConfig = load_config(swiftguard_toml)
        assert config.config_path == swiftguard_toml
        assert config.include == ("Sources/**/*.swift",)
        assert config.exclude == ("**/Generated/**",)
        assert config.output_format == OutputFormat.JSONL
        assert config.show_source is False
        assert config.warnings_as_errors is True
        assert config.jobs == 4

    def test_rule_severities_by_code_and_name(self, swiftguard_toml: Path) -> None:
        config: SwiftGuardConfig = load_config(swiftguard_toml)
        assert config.get_severity("UNW001") == Severity.ERROR
        assert config.get_severity("MUT001") == Severity.OFF
        assert not config.is_rule_enabled("MUT001")
        assert config.get_severity("NAM002") == Severity.WARNING

    def test_rule_option_tables(self, swiftguard_toml: Path) -> None:
        config: SwiftGuardConfig = load_config(swiftguard_toml)
        assert config.get_severity("CLS001") == Severity.ERROR
        assert config.rules.cls001.justification_marker == "subclass-ok:"
        assert config.rules.acc001.exempt_extensions is True
        assert config.rules.swt001.marker == "exhaustive-enough"

    def test_ignore_governance(self, swiftguard_toml: Path) -> None:
        config: SwiftGuardConfig = load_config(swiftguard_toml)
        assert config.ignores.require_reason is False
        assert config.ignores.disallow == frozenset({"UNW001"})
        assert config.ignores.max_per_file == 10

    def test_severity_is_case_insensitive(self, tmp_path: Path) -> None:
        path: Path = _write_config(tmp_path, '[rules]\nunw001 = "ERROR"\n')
        assert load_config(path).get_severity("UNW001") == Severity.ERROR

    def test_disallow_accepts_rule_names(self, tmp_path: Path) -> None:
        path: Path = _write_config(tmp_path, '[ignores]\ndisallow = ["final-by-default"]\n')
        assert load_config(path).ignores.disallow == frozenset({"CLS001"})


class TestInvalidConfig:
    def test_invalid_toml_raises_config_error(self, invalid_toml: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid TOML") as exc_info:
            load_config(invalid_toml)
        assert exc_info.value.path == invalid_toml

    def test_invalid_values_collected(self, invalid_config: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(invalid_config)
        message: str = str(exc_info.value)
        assert message.startswith("Configuration errors:")
        assert "output_format must be one of" in message
        assert "jobs must be a positive integer" in message
        assert "rules.UNW001 must be one of" in message
        assert "rules.FAKE001 is not a known rule" in message
        assert "ignores.disallow contains unknown rule codes" in message

    def test_boolean_jobs_rejected(self, tmp_path: Path) -> None:
        path: Path = _write_config(tmp_path, "jobs = true\n")
        with pytest.raises(ConfigError, match="jobs must be a positive integer"):
            load_config(path)

    def test_include_must_be_list(self, tmp_path: Path) -> None:
        path: Path = _write_config(tmp_path, 'include = "*.swift"\n')
        with pytest.raises(ConfigError, match="include must be a list"):
            load_config(path)

    def test_empty_marker_rejected(self, tmp_path: Path) -> None:
        path: Path = _write_config(tmp_path, '[rules.SWT001]\nmarker = ""\n')
        with pytest.raises(ConfigError, match="SWT001.marker must be a non-empty string"):
            load_config(path)

    def test_non_boolean_option_rejected(self, tmp_path: Path) -> None:
        path: Path = _write_config(tmp_path, '[rules.ACC001]\nexempt_extensions = "yes"\n')
        with pytest.raises(ConfigError, match="exempt_extensions must be a boolean"):
            load_config(path)

    def test_missing_file_raises_config_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path / "missing.toml")


class TestFindConfig:
    def test_find_config_in_current_directory(self, tmp_path: Path) -> None:
        path: Path = _write_config(tmp_path, "jobs = 2\n")
        assert ConfigLoader.find_config_file(tmp_path) == path.resolve()

    def test_find_config_in_parent_directory(self, tmp_path: Path) -> None:
        path: Path = _write_config(tmp_path, "jobs = 2\n")
        nested: Path = tmp_path / "Sources" / "App"
        nested.mkdir(parents=True)
        assert ConfigLoader.find_config_file(nested) == path.resolve()

    def test_load_searches_from_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_config(tmp_path, "jobs = 3\n")
        nested: Path = tmp_path / "Sources"
        nested.mkdir()
        monkeypatch.chdir(nested)
        assert load_config().jobs == 3


class TestWithoutRules:
    def test_codes_and_names_turned_off(self) -> None:
        config: SwiftGuardConfig = SwiftGuardConfig().without_rules(["UNW001", "final-by-default"])
        assert not config.is_rule_enabled("UNW001")
        assert not config.is_rule_enabled("CLS001")
        assert config.is_rule_enabled("MUT001")

    def test_original_untouched(self) -> None:
        original: SwiftGuardConfig = SwiftGuardConfig()
        original.without_rules(["UNW001"])
        assert original.is_rule_enabled("UNW001")

    def test_unknown_rule_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown rule: NOPE001"):
            SwiftGuardConfig().without_rules(["NOPE001"])
