"""ACC001: Top-level declaration without explicit access control."""
from __future__ import annotations

from swiftguard.constants import DEFAULT_SEVERITIES, RULE_NAMES
from swiftguard.parser import ACCESS_MODIFIERS
from swiftguard.rules.base import Match, Rule, RuleContext
from swiftguard.syntax import NodeKind, SyntaxNode


def _lacks_access_modifier(node: SyntaxNode, context: RuleContext) -> Match | None:
    parent: SyntaxNode | None = context.parent
    if parent is None or parent.kind != NodeKind.SOURCE_FILE:
        return None
    if node.keyword == "extension" and context.config.rules.acc001.exempt_extensions:
        return None
    # private(set) narrows the setter only
    if any(modifier in ACCESS_MODIFIERS for modifier in node.modifiers):
        return None
    return Match(fields={"keyword": node.keyword, "name": node.name or node.keyword})


RULE: Rule = Rule(
    code="ACC001",
    name=RULE_NAMES["ACC001"],
    severity=DEFAULT_SEVERITIES["ACC001"],
    kinds=frozenset({
        NodeKind.TYPE_DECL,
        NodeKind.FUNCTION_DECL,
        NodeKind.VARIABLE_DECL,
        NodeKind.TYPEALIAS_DECL,
    }),
    predicate=_lacks_access_modifier,
    message="Top-level {keyword} '{name}' has no explicit access control",
)
