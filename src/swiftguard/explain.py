"""Rule documentation catalog for swiftguard explain command."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from swiftguard.constants import Severity
from swiftguard.types import SwiftGuardConfig


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Documentation for one rule. An empty *fix* means no autofix exists."""

    code: str
    name: str
    category: str
    description: str
    bad_example: str
    good_example: str
    fix: str = ""
    options: str = ""

    @property
    def has_autofix(self) -> bool:
        return bool(self.fix)


RULE_CATALOG: Final[dict[str, RuleInfo]] = {
    "UNW001": RuleInfo(
        code="UNW001",
        name="no-force-unwrap",
        category="safety",
        description=(
            "Force unwrapping an optional with ! traps at runtime when the\n"
            "value is nil. Prefer conditional binding with if let or guard\n"
            "let, or optional chaining."
        ),
        bad_example="let name = user.name!",
        good_example="guard let name = user.name else { return }",
    ),
    "MUT001": RuleInfo(
        code="MUT001",
        name="prefer-let",
        category="idiom",
        description=(
            "A var that is never reassigned or mutated in its enclosing\n"
            "scope should be declared with let. The check is lexical: it\n"
            "looks for assignments, inout uses and method calls after the\n"
            "declaration in the same block."
        ),
        bad_example="var total = 0\nprint(total)",
        good_example="let total = 0\nprint(total)",
        fix="Replaces var with let on declarations that are never mutated.",
    ),
    "ACC001": RuleInfo(
        code="ACC001",
        name="explicit-top-level-access",
        category="access-control",
        description=(
            "Top-level types, functions, properties and type aliases must\n"
            "spell out their access level instead of relying on the\n"
            "implicit internal default."
        ),
        bad_example="func makeClient() -> Client { ... }",
        good_example="internal func makeClient() -> Client { ... }",
        options=(
            "[rules.ACC001]\n"
            "exempt_extensions = false  # Skip extension declarations"
        ),
    ),
    "SWT001": RuleInfo(
        code="SWT001",
        name="no-default-case-unless-marked",
        category="safety",
        description=(
            "A default case in a switch over an enumeration silently absorbs\n"
            "cases added later. List every case explicitly, use @unknown\n"
            "default for non-frozen enums, or mark the default with a comment."
        ),
        bad_example="switch state {\ncase .idle: start()\ndefault: break\n}",
        good_example="switch state {\ncase .idle: start()\ncase .running: break\n}",
        options=(
            "[rules.SWT001]\n"
            "marker = \"swiftguard: default-ok\"  # Comment text that allows a default"
        ),
    ),
    "CLS001": RuleInfo(
        code="CLS001",
        name="final-by-default",
        category="design",
        description=(
            "Classes should be final unless they are designed for\n"
            "subclassing. Open classes, classes subclassed in the same file\n"
            "and classes with a justification comment are exempt."
        ),
        bad_example="class ImageCache { ... }",
        good_example="final class ImageCache { ... }",
        options=(
            "[rules.CLS001]\n"
            "justification_marker = \"nonfinal:\"  # Comment prefix that justifies a non-final class"
        ),
    ),
    "FMT001": RuleInfo(
        code="FMT001",
        name="colon-spacing",
        category="formatting",
        description=(
            "Colons in type annotations, parameter lists and inheritance\n"
            "clauses take no space before and exactly one space after."
        ),
        bad_example="let count : Int = 0",
        good_example="let count: Int = 0",
        fix="Normalizes whitespace around declaration colons.",
    ),
    "NAM001": RuleInfo(
        code="NAM001",
        name="type-name-case",
        category="naming",
        description=(
            "Types and type aliases are named in UpperCamelCase."
        ),
        bad_example="struct network_client { ... }",
        good_example="struct NetworkClient { ... }",
    ),
    "NAM002": RuleInfo(
        code="NAM002",
        name="no-k-prefix",
        category="naming",
        description=(
            "Constants do not carry a Hungarian k prefix; name them like\n"
            "any other value in lowerCamelCase."
        ),
        bad_example="let kMaxRetries = 3",
        good_example="let maxRetries = 3",
    ),
}



def _labelled(label: str, text: str) -> list[str]:
    """Render *text* after *label*, aligning continuation lines under the first."""
    first, *rest = text.splitlines()
    indent: str = " " * len(label)
    return [f"{label}{first}", *(f"{indent}{line}" for line in rest)]


def format_rule_detail(
    *,
    info: RuleInfo,
    severity: Severity,
    default_severity: Severity,
) -> str:
    """Format a single rule's full documentation."""
    severity_text: str = severity.value
    if severity != default_severity:
        severity_text += f" (default: {default_severity.value})"

    lines: list[str] = [
        f"{info.code}: {info.name}",
        f"Category: {info.category} | Severity: {severity_text}"
        f" | Autofix: {'Yes' if info.has_autofix else 'No'}",
        "",
        *_labelled("  ", info.description),
        "",
        *_labelled("  Bad:   ", info.bad_example),
        *_labelled("  Good:  ", info.good_example),
    ]
    if info.fix:
        lines.extend(["", *_labelled("  Fix: ", info.fix)])
    if info.options:
        lines.extend(["", *_labelled("  Config: ", info.options)])
    lines.extend(["", f"  Suppress: // swiftguard: ignore[{info.code}] because: <reason>"])
    return "\n".join(lines)


def format_rule_table(*, catalog: dict[str, RuleInfo], config: SwiftGuardConfig) -> str:
    """One row per rule with its effective severity."""
    width: int = max(len(info.name) for info in catalog.values()) + 2
    header: str = f"{'CODE':<8} {'SEVERITY':<9} {'NAME':<{width}} FIX"
    lines: list[str] = [header, "-" * len(header)]
    for code, info in sorted(catalog.items()):
        fix_marker: str = "Yes" if info.has_autofix else "-"
        severity: str = config.get_severity(code).value
        lines.append(f"{code:<8} {severity:<9} {info.name:<{width}} {fix_marker}")
    return "\n".join(lines)
