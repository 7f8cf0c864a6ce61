"""Rule registry for SwiftGuard."""
from __future__ import annotations

from swiftguard.constants import Severity, resolve_rule_id
from swiftguard.rules import acc001, cls001, fmt001, mut001, nam001, nam002, swt001, unw001
from swiftguard.rules.base import Rule
from swiftguard.types import ConfigError, SwiftGuardConfig


class DuplicateRuleError(Exception):
    """A rule with the same id is already registered."""


class UnknownRuleError(ConfigError):
    """A rule id that is not registered."""


class RuleRegistry:
    """Ordered set of rules with per-run enable/disable and severity state."""

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}
        self._disabled: set[str] = set()

    def register(self, rule: Rule) -> None:
        if rule.code in self._rules:
            raise DuplicateRuleError(f"Rule {rule.code} is already registered")
        self._rules[rule.code] = rule

    def enable(self, rule_id: str) -> None:
        self._disabled.discard(self._resolve(rule_id))

    def disable(self, rule_id: str) -> None:
        self._disabled.add(self._resolve(rule_id))

    def set_severity(self, rule_id: str, severity: Severity) -> None:
        """Override a rule's severity. ``Severity.OFF`` disables the rule."""
        code: str = self._resolve(rule_id)
        if severity == Severity.OFF:
            self._disabled.add(code)
            return
        self._rules[code] = self._rules[code].with_severity(severity)

    def get(self, rule_id: str) -> Rule:
        return self._rules[self._resolve(rule_id)]

    def is_enabled(self, rule_id: str) -> bool:
        return self._resolve(rule_id) not in self._disabled

    def active_rules(self) -> list[Rule]:
        """Return enabled rules in registration order."""
        return [rule for code, rule in self._rules.items() if code not in self._disabled]

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        if not isinstance(rule_id, str):
            return False
        code: str | None = resolve_rule_id(rule_id)
        return (code or rule_id) in self._rules

    def _resolve(self, rule_id: str) -> str:
        code: str = resolve_rule_id(rule_id) or rule_id
        if code not in self._rules:
            raise UnknownRuleError(f"Unknown rule: {rule_id}")
        return code


def build_registry(*, config: SwiftGuardConfig) -> RuleRegistry:
    """Construct a fresh registry from the built-in rules and *config*."""
    registry: RuleRegistry = RuleRegistry()
    for rule in _all_rules():
        registry.register(rule)

    for rule in registry.rules:
        severity: Severity = config.get_severity(rule.code)
        if severity == Severity.WARNING and config.warnings_as_errors:
            severity = Severity.ERROR
        registry.set_severity(rule.code, severity)
    return registry


def _all_rules() -> list[Rule]:
    """Return all built-in rules in registration order."""
    rules: list[Rule] = [
        unw001.RULE,
        mut001.RULE,
        acc001.RULE,
        swt001.RULE,
        cls001.RULE,
        fmt001.RULE,
        nam001.RULE,
        nam002.RULE,
    ]
    return rules
