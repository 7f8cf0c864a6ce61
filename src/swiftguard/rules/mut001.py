"""MUT001: Prefer 'let' for variables that are never mutated.

The check is lexical. Bindings in `if var`, `guard var`, `for var` and `case var` patterns are
checked the same way. A name counts as mutated when, later in its enclosing
block (or anywhere in the file for file-private globals), it heads an
assignment target, is passed inout, has a method called on it, or appears in
a destructuring assignment.
"""
from __future__ import annotations

from typing import Final

from swiftguard.constants import DEFAULT_SEVERITIES, RULE_NAMES
from swiftguard.parser import BINDING_NODE_TYPE
from swiftguard.rules.base import Match, Rule, RuleContext
from swiftguard.syntax import NodeKind, SyntaxNode, Token, TokenKind

ASSIGNMENT_OPERATORS: Final[frozenset[str]] = frozenset({
    "=", "+=", "-=", "*=", "/=", "%=", "<<=", ">>=", "&=", "|=", "^=",
    "&+=", "&-=", "&*=", "&<<=", "&>>=",
})

_EXPOSED: Final[frozenset[str]] = frozenset({"open", "public", "package", "internal"})
_REFERENCE_MODIFIERS: Final[tuple[str, ...]] = ("weak", "unowned", "lazy")
_LOCAL_SCOPES: Final[frozenset[NodeKind]] = frozenset({
    NodeKind.CODE_BLOCK,
    NodeKind.CLOSURE,
    NodeKind.SWITCH_CASE,
})
_ACCESSOR_TYPES: Final[frozenset[str]] = frozenset({
    "computed_property",
    "willset_didset_block",
    "protocol_property_requirements",
})
_MEMBER_ACCESS: Final[frozenset[str]] = frozenset({".", "?.", "!."})


def _is_never_mutated(node: SyntaxNode, context: RuleContext) -> Match | None:
    if node.keyword != "var" or node.attributes:
        return None
    if any(m.startswith(_REFERENCE_MODIFIERS) for m in node.modifiers):
        return None
    if any(child.type in _ACCESSOR_TYPES for child in node.children):
        return None
    names: set[str] = set(node.names) - {"_"}
    if not names:
        return None

    ranges: list[tuple[int, int]] = _scope_ranges(node, context)
    if not ranges:
        return None
    if _mutated_names(context.tokens, ranges, names):
        return None
    return Match(fields={"name": ", ".join(n for n in node.names if n != "_")})


def _scope_ranges(node: SyntaxNode, context: RuleContext) -> list[tuple[int, int]]:
    """Token ranges, inclusive, where a mutation of *node*'s names may appear."""
    parent: SyntaxNode | None = context.parent
    if parent is None:
        return []
    if node.type == BINDING_NODE_TYPE:
        # A guard binding stays visible after the guard statement.
        scope: SyntaxNode = parent
        if parent.type == "guard_statement" and len(context.ancestors) >= 2:
            scope = context.ancestors[-2]
        return [(node.last_token + 1, scope.last_token)]
    if parent.kind in _LOCAL_SCOPES:
        return [(node.last_token + 1, parent.last_token)]
    if parent.kind == NodeKind.SOURCE_FILE and not _EXPOSED & set(node.modifiers):
        return [
            (parent.first_token, node.first_token - 1),
            (node.last_token + 1, parent.last_token),
        ]
    return []


def _mutated_names(
    tokens: tuple[Token, ...],
    ranges: list[tuple[int, int]],
    names: set[str],
) -> set[str]:
    mutated: set[str] = set()
    for start, end in ranges:
        for idx in range(max(start, 1), end + 1):
            token: Token = tokens[idx]
            if token.kind != TokenKind.IDENTIFIER or token.text not in names:
                continue
            if tokens[idx - 1].text in _MEMBER_ACCESS:
                continue
            if _is_mutation(tokens, idx, end):
                mutated.add(token.text)
    return mutated


def _is_mutation(tokens: tuple[Token, ...], idx: int, end: int) -> bool:
    before: Token = tokens[idx - 1]
    if before.kind == TokenKind.OPERATOR and before.text == "&" and not before.space_after:
        return True
    if before.kind == TokenKind.PUNCT and before.text in ("(", ","):
        if _in_destructuring_target(tokens, idx):
            return True

    j: int = idx + 1
    while j <= end:
        token: Token = tokens[j]
        if token.text in _MEMBER_ACCESS:
            member: Token = tokens[j + 1]
            if member.kind not in (TokenKind.IDENTIFIER, TokenKind.KEYWORD):
                return False
            call: Token = tokens[j + 2]
            if call.kind == TokenKind.PUNCT and (
                (call.text == "(" and not call.space_before) or call.text == "{"
            ):
                return True
            j += 2
        elif token.kind == TokenKind.PUNCT and token.text == "[" and not token.space_before:
            j = _skip_brackets(tokens, j, end)
        elif (
            token.kind == TokenKind.OPERATOR
            and set(token.text) <= set("!?")
            and not token.space_before
        ):
            j += 1
        else:
            return token.kind == TokenKind.OPERATOR and token.text in ASSIGNMENT_OPERATORS
    return False


def _skip_brackets(tokens: tuple[Token, ...], idx: int, end: int) -> int:
    depth: int = 0
    j: int = idx
    while j <= end:
        token: Token = tokens[j]
        if token.kind == TokenKind.PUNCT and token.text in ("(", "["):
            depth += 1
        elif token.kind == TokenKind.PUNCT and token.text in (")", "]"):
            depth -= 1
            if depth == 0:
                return j + 1
        j += 1
    return j


def _in_destructuring_target(tokens: tuple[Token, ...], idx: int) -> bool:
    """True for `(a, b) = ...` at statement start."""
    depth: int = 0
    j: int = idx - 1
    while j > 0 and tokens[j].kind != TokenKind.NEWLINE:
        token: Token = tokens[j]
        if token.kind == TokenKind.PUNCT and token.text in (")", "]"):
            depth += 1
        elif token.kind == TokenKind.PUNCT and token.text in ("(", "["):
            if depth == 0:
                break
            depth -= 1
        j -= 1
    else:
        return False
    opener: Token = tokens[j]
    if opener.text != "(":
        return False
    starter: Token = tokens[j - 1]
    if not (
        starter.kind == TokenKind.NEWLINE
        or (starter.kind == TokenKind.PUNCT and starter.text in (";", "{", "}"))
        or (starter.kind == TokenKind.KEYWORD and starter.text == "in")
    ):
        return False
    close: int = _skip_brackets(tokens, j, len(tokens) - 1)
    following: Token = tokens[min(close, len(tokens) - 1)]
    return following.kind == TokenKind.OPERATOR and following.text == "="


RULE: Rule = Rule(
    code="MUT001",
    name=RULE_NAMES["MUT001"],
    severity=DEFAULT_SEVERITIES["MUT001"],
    kinds=frozenset({NodeKind.VARIABLE_DECL}),
    predicate=_is_never_mutated,
    message="Variable '{name}' is never mutated; declare it with 'let'",
)
