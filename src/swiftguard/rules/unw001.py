"""UNW001: Force unwrap of an optional."""
from __future__ import annotations

from swiftguard.constants import DEFAULT_SEVERITIES, RULE_NAMES
from swiftguard.rules.base import Match, Rule, RuleContext, token_span
from swiftguard.syntax import NodeKind, SyntaxNode


def _is_force_unwrap(node: SyntaxNode, context: RuleContext) -> Match | None:
    return Match(span=token_span(context.tokens[node.last_token]))


RULE: Rule = Rule(
    code="UNW001",
    name=RULE_NAMES["UNW001"],
    severity=DEFAULT_SEVERITIES["UNW001"],
    kinds=frozenset({NodeKind.FORCE_UNWRAP}),
    predicate=_is_force_unwrap,
    message="Force unwrap of an optional; prefer conditional binding (if let / guard let)",
)
