"""FMT001: Declaration colon spacing."""
from __future__ import annotations

from swiftguard.constants import DEFAULT_SEVERITIES, RULE_NAMES
from swiftguard.rules.base import Match, Rule, RuleContext, token_span
from swiftguard.syntax import NodeKind, SyntaxNode, Token, TokenKind


def colon_problem(tokens: tuple[Token, ...], idx: int) -> str | None:
    """Describe what is wrong with the colon at *idx*, or None if it is fine."""
    colon: Token = tokens[idx]
    before: Token = tokens[idx - 1]
    after: Token = tokens[idx + 1]
    if before.kind == TokenKind.NEWLINE or (before.end_line, before.end_column) != (
        colon.line,
        colon.column,
    ):
        return "no space before ':'"
    if after.kind in (TokenKind.NEWLINE, TokenKind.EOF) or after.line != colon.line:
        return "one space after ':' on the same line"
    if after.column - colon.end_column != 1:
        return "exactly one space after ':'"
    return None


def _has_bad_colon(node: SyntaxNode, context: RuleContext) -> Match | None:
    for idx in node.colons:
        problem: str | None = colon_problem(context.tokens, idx)
        if problem is not None:
            return Match(fields={"problem": problem}, span=token_span(context.tokens[idx]))
    return None


RULE: Rule = Rule(
    code="FMT001",
    name=RULE_NAMES["FMT001"],
    severity=DEFAULT_SEVERITIES["FMT001"],
    kinds=frozenset({NodeKind.VARIABLE_DECL, NodeKind.PARAMETER, NodeKind.TYPE_DECL}),
    predicate=_has_bad_colon,
    message="Declaration colon spacing: expected {problem}",
)
