"""Common types and dataclasses for SwiftGuard."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType

from swiftguard.constants import (
    DEFAULT_EXCLUDES,
    DEFAULT_SEVERITIES,
    OutputFormat,
    Severity,
    resolve_rule_id,
)


class ConfigError(Exception):
    """Invalid configuration, from a config file or the command line."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path: Path | None = path
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class ACC001Options:
    # Extensions inherit the access level of their members
    exempt_extensions: bool = False


@dataclass(frozen=True, slots=True)
class SWT001Options:
    """A ``default:`` arm whose line carries *marker* in a comment is accepted."""

    marker: str = "swiftguard: default-ok"


@dataclass(frozen=True, slots=True)
class CLS001Options:
    """A non-final class preceded by a ``// <marker> ...`` comment is accepted."""

    justification_marker: str = "nonfinal:"


@dataclass(frozen=True, slots=True)
class IgnoreGovernance:
    """Limits on ``// swiftguard: ignore[...]`` pragmas."""

    require_reason: bool = True
    disallow: frozenset[str] = frozenset()
    max_per_file: int | None = None


@dataclass(frozen=True, slots=True)
class RuleConfig:
    severities: MappingProxyType[str, Severity] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_SEVERITIES))
    )
    acc001: ACC001Options = field(default_factory=ACC001Options)
    swt001: SWT001Options = field(default_factory=SWT001Options)
    cls001: CLS001Options = field(default_factory=CLS001Options)


@dataclass(frozen=True, slots=True)
class SwiftGuardConfig:
    """Complete, immutable SwiftGuard configuration.

    A rule code missing from ``rules.severities`` is treated as off.
    """

    config_path: Path | None = None
    include: tuple[str, ...] = ("**/*.swift",)
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES
    output_format: OutputFormat = OutputFormat.TEXT
    show_source: bool = True
    warnings_as_errors: bool = False
    jobs: int = 1
    rules: RuleConfig = field(default_factory=RuleConfig)
    ignores: IgnoreGovernance = field(default_factory=IgnoreGovernance)

    def get_severity(self, rule_code: str) -> Severity:
        return self.rules.severities.get(rule_code, Severity.OFF)

    def is_rule_enabled(self, rule_code: str) -> bool:
        return self.get_severity(rule_code) != Severity.OFF

    def without_rules(self, rule_ids: Iterable[str]) -> SwiftGuardConfig:
        """Copy with the given rule codes or names turned off.

        Raises:
            ConfigError: If an id does not name a known rule.
        """
        severities: dict[str, Severity] = dict(self.rules.severities)
        for rule_id in rule_ids:
            code: str | None = resolve_rule_id(rule_id)
            if code is None:
                raise ConfigError(f"Unknown rule: {rule_id}")
            severities[code] = Severity.OFF
        return replace(self, rules=replace(self.rules, severities=MappingProxyType(severities)))
