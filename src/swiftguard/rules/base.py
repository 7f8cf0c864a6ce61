"""Rule model for SwiftGuard lint rules.

A rule is data: an id, a name, a severity, the node kinds it applies to, a
predicate and a message template. The predicate returns ``None`` for a
conforming node, or a ``Match`` carrying the template fields (and optionally
a narrower span to report at).
"""
from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from swiftguard.constants import Severity
from swiftguard.diagnostics import Diagnostic, SourceLocation
from swiftguard.syntax import Comment, NodeKind, Span, SyntaxNode, Token, TokenKind
from swiftguard.types import SwiftGuardConfig


@dataclass(frozen=True, slots=True)
class Match:
    """A predicate hit: template fields plus an optional span override."""

    fields: Mapping[str, object] = field(default_factory=dict)
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class RuleContext:
    """Per-node evaluation context supplied by the walker.

    ``ancestors`` runs from the root down to the node's parent.
    """

    file: Path
    source_lines: tuple[str, ...]
    tokens: tuple[Token, ...]
    comments: tuple[Comment, ...]
    root: SyntaxNode
    ancestors: tuple[SyntaxNode, ...]
    config: SwiftGuardConfig

    @property
    def parent(self) -> SyntaxNode | None:
        return self.ancestors[-1] if self.ancestors else None

    def source_line(self, line: int) -> str | None:
        if 1 <= line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def comments_on(self, line: int) -> list[Comment]:
        return [c for c in self.comments if c.line <= line <= c.end_line]


Predicate = Callable[[SyntaxNode, RuleContext], Match | None]


@dataclass(frozen=True, slots=True)
class Rule:
    """A single stateless check."""

    code: str
    name: str
    severity: Severity
    kinds: frozenset[NodeKind]
    predicate: Predicate
    message: str

    def applies_to(self, node: SyntaxNode) -> bool:
        return node.kind in self.kinds

    def with_severity(self, severity: Severity) -> Rule:
        return dataclasses.replace(self, severity=severity)

    def check(self, node: SyntaxNode, context: RuleContext) -> list[Diagnostic]:
        """Evaluate the predicate and build at most one diagnostic."""
        match: Match | None = self.predicate(node, context)
        if match is None:
            return []
        span: Span = match.span if match.span is not None else node.span
        return [
            Diagnostic(
                file=context.file,
                location=SourceLocation(
                    line=span.start_line,
                    column=span.start_column,
                    end_line=span.end_line,
                    end_column=span.end_column,
                ),
                code=self.code,
                message=self.message.format(**match.fields),
                severity=self.severity,
                source_line=context.source_line(span.start_line),
            ),
        ]


def token_span(token: Token) -> Span:
    """Span covering a single token."""
    return Span(
        start_line=token.line,
        start_column=token.column,
        end_line=token.end_line,
        end_column=token.end_column,
    )


def keyword_index(node: SyntaxNode, tokens: tuple[Token, ...]) -> int | None:
    """Token index of a declaration's introducing keyword."""
    for idx in range(node.first_token, node.last_token + 1):
        token: Token = tokens[idx]
        if token.text == node.keyword and token.kind in (TokenKind.KEYWORD, TokenKind.IDENTIFIER):
            return idx
    return None


def identifier_index(
    node: SyntaxNode,
    tokens: tuple[Token, ...],
    *,
    text: str | None = None,
) -> int | None:
    """Token index of the first identifier after the keyword (or of *text*)."""
    start: int | None = keyword_index(node, tokens)
    if start is None:
        return None
    for idx in range(start + 1, node.last_token + 1):
        token: Token = tokens[idx]
        if token.kind == TokenKind.IDENTIFIER and (text is None or token.text == text):
            return idx
    return None
