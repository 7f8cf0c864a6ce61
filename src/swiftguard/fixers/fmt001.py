"""FMT001 fixer: Normalize whitespace around declaration colons."""
from __future__ import annotations

from swiftguard.fixers._util import TextEdit, apply_edits, flagged_diagnostics, parse_source
from swiftguard.parser import ParseResult
from swiftguard.rules import fmt001
from swiftguard.rules.fmt001 import colon_problem
from swiftguard.syntax import SyntaxNode, Token, TokenKind
from swiftguard.types import SwiftGuardConfig


def fix_colon_spacing(source: str, *, config: SwiftGuardConfig) -> str:
    """Rewrite ``name : Type`` / ``name:Type`` to ``name: Type``.

    Every colon of a flagged declaration is normalized. Colons separated
    from their neighbours by a line break or a comment are left alone.
    """
    parse_result: ParseResult | None = parse_source(source)
    if parse_result is None or parse_result.tree is None:
        return source

    flagged: set[tuple[int, int]] = {
        (d.location.line, d.location.column)
        for d in flagged_diagnostics(parse_result, rule=fmt001.RULE, config=config)
    }
    if not flagged:
        return source

    tokens: tuple[Token, ...] = parse_result.tokens
    edits: list[TextEdit] = []
    for node in parse_result.tree.walk():
        if not _is_flagged(node, tokens, flagged):
            continue
        for idx in node.colons:
            if colon_problem(tokens, idx) is None:
                continue
            edit: TextEdit | None = _normalize(tokens, idx, parse_result.source_lines)
            if edit is not None:
                edits.append(edit)

    return apply_edits(source, edits)


def _is_flagged(
    node: SyntaxNode,
    tokens: tuple[Token, ...],
    flagged: set[tuple[int, int]],
) -> bool:
    return any((tokens[idx].line, tokens[idx].column) in flagged for idx in node.colons)


def _normalize(
    tokens: tuple[Token, ...],
    idx: int,
    source_lines: tuple[str, ...],
) -> TextEdit | None:
    before: Token = tokens[idx - 1]
    after: Token = tokens[idx + 1]
    colon: Token = tokens[idx]
    if TokenKind.NEWLINE in (before.kind, after.kind) or after.kind == TokenKind.EOF:
        return None
    if before.end_line != colon.line or after.line != colon.line:
        return None

    line_text: str = source_lines[colon.line - 1]
    gap: str = line_text[before.end_column - 1:after.column - 1]
    if gap.replace(":", "", 1).strip():
        return None
    return TextEdit(
        start_line=colon.line,
        start_column=before.end_column,
        end_line=colon.line,
        end_column=after.column,
        replacement=": ",
    )
