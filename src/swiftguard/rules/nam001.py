"""NAM001: Type names must be UpperCamelCase."""
from __future__ import annotations

import re
from typing import Final

from swiftguard.constants import DEFAULT_SEVERITIES, RULE_NAMES
from swiftguard.rules.base import Match, Rule, RuleContext, identifier_index, token_span
from swiftguard.syntax import NodeKind, SyntaxNode

_UPPER_CAMEL_CASE: Final[re.Pattern[str]] = re.compile(r"_?[A-Z][A-Za-z0-9]*")


def _is_badly_cased(node: SyntaxNode, context: RuleContext) -> Match | None:
    if node.keyword == "extension" or node.name is None:
        return None
    if _UPPER_CAMEL_CASE.fullmatch(node.name):
        return None
    name_idx: int | None = identifier_index(node, context.tokens, text=node.name)
    return Match(
        fields={"keyword": node.keyword, "name": node.name},
        span=token_span(context.tokens[name_idx]) if name_idx is not None else None,
    )


RULE: Rule = Rule(
    code="NAM001",
    name=RULE_NAMES["NAM001"],
    severity=DEFAULT_SEVERITIES["NAM001"],
    kinds=frozenset({NodeKind.TYPE_DECL, NodeKind.TYPEALIAS_DECL}),
    predicate=_is_badly_cased,
    message="{keyword} name '{name}' should be UpperCamelCase",
)
