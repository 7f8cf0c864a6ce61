"""SWT001: default case in a switch over an enumeration."""
from __future__ import annotations

import re
from typing import Final

from swiftguard.constants import DEFAULT_SEVERITIES, RULE_NAMES
from swiftguard.rules.base import Match, Rule, RuleContext
from swiftguard.syntax import NodeKind, SyntaxNode

# `.member`, `Type.member`, `let .member(x)`, `.member(let x) where ...`
_ENUM_CASE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?:(?:let|var)\s+)?(?:[A-Z]\w*(?:\.[A-Z]\w*)*)?\.[A-Za-z_]\w*"
)


def _is_unmarked_default(node: SyntaxNode, context: RuleContext) -> Match | None:
    if node.keyword != "default" or "@unknown" in node.attributes:
        return None
    switch: SyntaxNode | None = context.parent
    if switch is None or switch.kind != NodeKind.SWITCH_STMT:
        return None

    patterns: list[str] = [
        pattern
        for case in switch.children_of_kind(NodeKind.SWITCH_CASE)
        if case.keyword == "case"
        for pattern in case.names
    ]
    if not patterns or not all(_ENUM_CASE_PATTERN.match(p) for p in patterns):
        return None

    marker: str = context.config.rules.swt001.marker
    line: int = node.span.start_line
    for comment in context.comments:
        on_or_above: bool = comment.line <= line <= comment.end_line or comment.end_line == line - 1
        in_body: bool = line <= comment.line <= node.span.end_line
        if (on_or_above or in_body) and marker in comment.text:
            return None
    return Match()


RULE: Rule = Rule(
    code="SWT001",
    name=RULE_NAMES["SWT001"],
    severity=DEFAULT_SEVERITIES["SWT001"],
    kinds=frozenset({NodeKind.SWITCH_CASE}),
    predicate=_is_unmarked_default,
    message="'default' in a switch over an enumeration hides unhandled cases; list them explicitly",
)
