"""MUT001 fixer: Turn never-mutated ``var`` declarations into ``let``."""
from __future__ import annotations

from swiftguard.fixers._util import TextEdit, apply_edits, flagged_diagnostics, parse_source
from swiftguard.parser import ParseResult
from swiftguard.rules import mut001
from swiftguard.rules.base import keyword_index
from swiftguard.syntax import NodeKind, SyntaxNode, Token
from swiftguard.types import SwiftGuardConfig


def fix_prefer_let(source: str, *, config: SwiftGuardConfig) -> str:
    """Replace ``var`` with ``let`` on declarations MUT001 flags."""
    parse_result: ParseResult | None = parse_source(source)
    if parse_result is None or parse_result.tree is None:
        return source

    flagged: set[tuple[int, int]] = {
        (d.location.line, d.location.column)
        for d in flagged_diagnostics(parse_result, rule=mut001.RULE, config=config)
    }
    if not flagged:
        return source

    edits: list[TextEdit] = []
    for node in parse_result.tree.walk():
        if node.kind != NodeKind.VARIABLE_DECL:
            continue
        if (node.span.start_line, node.span.start_column) not in flagged:
            continue
        edit: TextEdit | None = _var_to_let(node, parse_result.tokens)
        if edit is not None:
            edits.append(edit)

    return apply_edits(source, edits)


def _var_to_let(node: SyntaxNode, tokens: tuple[Token, ...]) -> TextEdit | None:
    idx: int | None = keyword_index(node, tokens)
    if idx is None:
        return None
    keyword: Token = tokens[idx]
    return TextEdit(
        start_line=keyword.line,
        start_column=keyword.column,
        end_line=keyword.end_line,
        end_column=keyword.end_column,
        replacement="let",
    )
