"""Constants and enums for SwiftGuard configuration."""
from __future__ import annotations

from enum import Enum
from typing import Final

__version__: Final[str] = "0.1.0"


class Severity(Enum):
    """Rule severity levels."""

    ERROR = "error"
    WARNING = "warning"
    OFF = "off"


class DiagnosticKind(Enum):
    """Origin of a diagnostic."""

    VIOLATION = "violation"
    RULE_FAILURE = "rule-failure"
    PARSE_FAILURE = "parse-failure"


class OutputFormat(Enum):
    """Output format options."""

    TEXT = "text"
    JSON = "json"
    JSONL = "jsonl"


RULE_NAMES: Final[dict[str, str]] = {
    "UNW001": "no-force-unwrap",
    "MUT001": "prefer-let",
    "ACC001": "explicit-top-level-access",
    "SWT001": "no-default-case-unless-marked",
    "CLS001": "final-by-default",
    "FMT001": "colon-spacing",
    "NAM001": "type-name-case",
    "NAM002": "no-k-prefix",
}

RULE_CODES: Final[frozenset[str]] = frozenset(RULE_NAMES)

DEFAULT_SEVERITIES: Final[dict[str, Severity]] = {
    "UNW001": Severity.WARNING,
    "MUT001": Severity.WARNING,
    "ACC001": Severity.ERROR,
    "SWT001": Severity.WARNING,
    "CLS001": Severity.WARNING,
    "FMT001": Severity.WARNING,
    "NAM001": Severity.ERROR,
    "NAM002": Severity.WARNING,
}

SYNTAX_ERROR_CODE: Final[str] = "SYN001"

IGN001_CODE: Final[str] = "IGN001"
IGN002_CODE: Final[str] = "IGN002"
IGN003_CODE: Final[str] = "IGN003"

EXIT_OK: Final[int] = 0
EXIT_VIOLATIONS: Final[int] = 1
EXIT_INTERNAL: Final[int] = 2

DEFAULT_EXCLUDES: Final[tuple[str, ...]] = (
    "**/.*",
    "**/.build/**",
    "**/.git/**",
    "**/Pods/**",
    "**/Carthage/**",
    "**/DerivedData/**",
    "build/**",
)


def resolve_rule_id(rule_id: str) -> str | None:
    """Map a rule code or kebab-case name to its code, or None if unknown."""
    upper: str = rule_id.upper()
    if upper in RULE_CODES:
        return upper
    lowered: str = rule_id.lower()
    for code, name in RULE_NAMES.items():
        if name == lowered:
            return code
    return None
