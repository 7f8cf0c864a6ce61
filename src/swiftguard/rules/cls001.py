"""CLS001: Classes should be final unless designed for subclassing."""
from __future__ import annotations

from swiftguard.constants import DEFAULT_SEVERITIES, RULE_NAMES
from swiftguard.rules.base import Match, Rule, RuleContext, identifier_index, token_span
from swiftguard.syntax import Comment, NodeKind, SyntaxNode


def _is_not_final(node: SyntaxNode, context: RuleContext) -> Match | None:
    if node.keyword != "class" or node.name is None:
        return None
    if "final" in node.modifiers or "open" in node.modifiers:
        return None
    if _is_subclassed(node, context.root):
        return None
    marker: str = context.config.rules.cls001.justification_marker
    if _has_justification(node.span.start_line, context, marker=marker):
        return None

    name_idx: int | None = identifier_index(node, context.tokens, text=node.name)
    return Match(
        fields={"name": node.name},
        span=token_span(context.tokens[name_idx]) if name_idx is not None else None,
    )


def _is_subclassed(node: SyntaxNode, root: SyntaxNode) -> bool:
    name: str = node.name or ""
    for other in root.walk():
        if other.kind != NodeKind.TYPE_DECL or other is node:
            continue
        if any(base == name or base.endswith("." + name) for base in other.names):
            return True
    return False


def _has_justification(line: int, context: RuleContext, *, marker: str) -> bool:
    """Look for *marker* on the declaration line or the comment block above it."""
    if any(marker in comment.text for comment in context.comments_on(line)):
        return True

    by_end_line: dict[int, list[Comment]] = {}
    for comment in context.comments:
        by_end_line.setdefault(comment.end_line, []).append(comment)

    current: int = line - 1
    while current in by_end_line:
        group: list[Comment] = by_end_line[current]
        if any(marker in comment.text for comment in group):
            return True
        current = min(comment.line for comment in group) - 1
    return False


RULE: Rule = Rule(
    code="CLS001",
    name=RULE_NAMES["CLS001"],
    severity=DEFAULT_SEVERITIES["CLS001"],
    kinds=frozenset({NodeKind.TYPE_DECL}),
    predicate=_is_not_final,
    message="Class '{name}' is not final; mark it final or justify subclassing",
)
