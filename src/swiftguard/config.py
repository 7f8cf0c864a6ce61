"""Configuration loading and validation for SwiftGuard.

Settings live in ``.swiftguard.toml``, found by walking up from the current
directory::

    include = ["Sources/**/*.swift"]
    exclude = ["**/Generated/**"]
    output_format = "text"      # text | json | jsonl
    show_source = true
    warnings_as_errors = false
    jobs = 4

    [rules]
    UNW001 = "error"            # codes or names, error | warning | off
    prefer-let = "off"

    [rules.SWT001]
    marker = "swiftguard: default-ok"

    [ignores]
    require_reason = true
    disallow = ["ACC001"]
    max_per_file = 5

Every problem in the file is reported at once in a single ConfigError.
"""
from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final, TypeVar

from swiftguard.constants import (
    DEFAULT_EXCLUDES,
    DEFAULT_SEVERITIES,
    OutputFormat,
    Severity,
    resolve_rule_id,
)
from swiftguard.types import (
    ACC001Options,
    CLS001Options,
    ConfigError,
    IgnoreGovernance,
    RuleConfig,
    SWT001Options,
    SwiftGuardConfig,
)

CONFIG_FILENAME: Final[str] = ".swiftguard.toml"

_E = TypeVar("_E", bound=Enum)


@dataclass(slots=True)
class _Errors:
    """Typed readers over TOML tables that record problems instead of raising."""

    messages: list[str] = field(default_factory=list)

    def table(self, data: dict[str, Any], key: str, *, where: str) -> dict[str, Any]:
        value: Any = data.get(key, {})
        if isinstance(value, dict):
            return value
        self.messages.append(f"{where}{key} must be a table")
        return {}

    def boolean(self, data: dict[str, Any], key: str, default: bool, *, where: str = "") -> bool:
        value: Any = data.get(key, default)
        if isinstance(value, bool):
            return value
        self.messages.append(f"{where}{key} must be a boolean")
        return default

    def patterns(
        self,
        data: dict[str, Any],
        key: str,
        default: tuple[str, ...],
    ) -> tuple[str, ...]:
        value: Any = data.get(key)
        if value is None:
            return default
        if isinstance(value, list) and all(isinstance(p, str) for p in value):
            return tuple(value)
        self.messages.append(f"{key} must be a list, got {type(value).__name__}")
        return default

    def choice(self, value: Any, enum_type: type[_E], *, what: str) -> _E | None:
        try:
            return enum_type(str(value).lower())
        except ValueError:
            self.messages.append(f"{what} must be one of {[e.value for e in enum_type]}")
            return None

    def marker(self, data: dict[str, Any], key: str, default: str, *, where: str) -> str:
        value: Any = data.get(key, default)
        if isinstance(value, str) and value:
            return value
        self.messages.append(f"{where}{key} must be a non-empty string")
        return default


class ConfigLoader:
    """Loads and validates SwiftGuard configuration."""

    @staticmethod
    def find_config_file(start_path: Path | None = None) -> Path | None:
        """Return the nearest .swiftguard.toml at or above *start_path* (default: cwd)."""
        start: Path = (start_path or Path.cwd()).resolve()
        for directory in (start, *start.parents):
            candidate: Path = directory / CONFIG_FILENAME
            if candidate.is_file():
                return candidate
        return None

    @staticmethod
    def load(path: Path | None = None) -> SwiftGuardConfig:
        """
        Load configuration from .swiftguard.toml.

        Args:
            path: Explicit path to a config file. If None, searches upward.

        Returns:
            Validated SwiftGuardConfig instance; defaults when no file exists.

        Raises:
            ConfigError: If the file cannot be read, is not TOML, or is invalid.
        """
        if path is None:
            path = ConfigLoader.find_config_file()
        if path is None:
            return SwiftGuardConfig()

        try:
            with open(path, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML: {e}", path=path) from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", path=path) from e

        return ConfigLoader._parse_config(data, config_path=path)

    @staticmethod
    def _parse_config(
        data: dict[str, Any],
        *,
        config_path: Path | None = None,
    ) -> SwiftGuardConfig:
        errors: _Errors = _Errors()

        output_format: OutputFormat | None = OutputFormat.TEXT
        if "output_format" in data:
            output_format = errors.choice(
                data["output_format"], OutputFormat, what="output_format",
            )

        jobs: Any = data.get("jobs", 1)
        if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1:
            errors.messages.append("jobs must be a positive integer")
            jobs = 1

        config: SwiftGuardConfig = SwiftGuardConfig(
            config_path=config_path,
            include=errors.patterns(data, "include", ("**/*.swift",)),
            exclude=errors.patterns(data, "exclude", DEFAULT_EXCLUDES),
            output_format=output_format or OutputFormat.TEXT,
            show_source=errors.boolean(data, "show_source", True),
            warnings_as_errors=errors.boolean(data, "warnings_as_errors", False),
            jobs=jobs,
            rules=_parse_rules(errors.table(data, "rules", where=""), errors),
            ignores=_parse_ignores(errors.table(data, "ignores", where=""), errors),
        )

        if errors.messages:
            raise ConfigError(
                "Configuration errors:\n" + "\n".join(f"  - {m}" for m in errors.messages),
                path=config_path,
            )
        return config


def _parse_rules(data: dict[str, Any], errors: _Errors) -> RuleConfig:
    """``[rules]``: keys are codes or names; values are a severity or an option table."""
    severities: dict[str, Severity] = dict(DEFAULT_SEVERITIES)
    options: dict[str, dict[str, Any]] = {}

    for key, value in data.items():
        code: str | None = resolve_rule_id(key)
        if code is None:
            errors.messages.append(f"rules.{key} is not a known rule")
            continue
        if isinstance(value, dict):
            options[code] = value
            value = value.get("severity")
            if value is None:
                continue
            what: str = f"rules.{key}.severity"
        elif isinstance(value, str):
            what = f"rules.{key}"
        else:
            errors.messages.append(f"rules.{key} must be a severity string or a table")
            continue
        severity: Severity | None = errors.choice(value, Severity, what=what)
        if severity is not None:
            severities[code] = severity

    acc001: dict[str, Any] = options.get("ACC001", {})
    swt001: dict[str, Any] = options.get("SWT001", {})
    cls001: dict[str, Any] = options.get("CLS001", {})
    return RuleConfig(
        severities=MappingProxyType(severities),
        acc001=ACC001Options(
            exempt_extensions=errors.boolean(
                acc001, "exempt_extensions", False, where="rules.ACC001.",
            ),
        ),
        swt001=SWT001Options(
            marker=errors.marker(
                swt001, "marker", SWT001Options().marker, where="rules.SWT001.",
            ),
        ),
        cls001=CLS001Options(
            justification_marker=errors.marker(
                cls001,
                "justification_marker",
                CLS001Options().justification_marker,
                where="rules.CLS001.",
            ),
        ),
    )


def _parse_ignores(data: dict[str, Any], errors: _Errors) -> IgnoreGovernance:
    require_reason: bool = errors.boolean(data, "require_reason", True, where="ignores.")

    disallow: set[str] = set()
    raw_disallow: Any = data.get("disallow", [])
    if isinstance(raw_disallow, list):
        unknown: list[Any] = []
        for rule_id in raw_disallow:
            code: str | None = resolve_rule_id(str(rule_id))
            if code is None:
                unknown.append(rule_id)
            else:
                disallow.add(code)
        if unknown:
            errors.messages.append(f"ignores.disallow contains unknown rule codes: {unknown}")
    else:
        errors.messages.append("ignores.disallow must be a list")

    max_per_file: Any = data.get("max_per_file")
    if max_per_file is not None and (
        isinstance(max_per_file, bool) or not isinstance(max_per_file, int) or max_per_file < 0
    ):
        errors.messages.append("ignores.max_per_file must be a non-negative integer")
        max_per_file = None

    return IgnoreGovernance(
        require_reason=require_reason,
        disallow=frozenset(disallow),
        max_per_file=max_per_file,
    )


def load_config(path: Path | None = None) -> SwiftGuardConfig:
    """Convenience wrapper around :meth:`ConfigLoader.load`."""
    return ConfigLoader.load(path)
