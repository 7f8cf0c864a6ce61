"""NAM002: Constants must not use a Hungarian 'k' prefix."""
from __future__ import annotations

import re
from typing import Final

from swiftguard.constants import DEFAULT_SEVERITIES, RULE_NAMES
from swiftguard.rules.base import Match, Rule, RuleContext, identifier_index, token_span
from swiftguard.syntax import NodeKind, SyntaxNode

_K_PREFIX: Final[re.Pattern[str]] = re.compile(r"k[A-Z]")


def _has_k_prefix(node: SyntaxNode, context: RuleContext) -> Match | None:
    if node.keyword != "let":
        return None
    for name in node.names:
        if _K_PREFIX.match(name):
            name_idx: int | None = identifier_index(node, context.tokens, text=name)
            return Match(
                fields={"name": name, "suggestion": name[1].lower() + name[2:]},
                span=token_span(context.tokens[name_idx]) if name_idx is not None else None,
            )
    return None


RULE: Rule = Rule(
    code="NAM002",
    name=RULE_NAMES["NAM002"],
    severity=DEFAULT_SEVERITIES["NAM002"],
    kinds=frozenset({NodeKind.VARIABLE_DECL}),
    predicate=_has_k_prefix,
    message="Constant '{name}' uses a 'k' prefix; name it '{suggestion}'",
)
