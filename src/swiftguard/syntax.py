"""Syntax tree model for parsed Swift source.

Nodes are built from the tree-sitter Swift grammar by :mod:`swiftguard.parser`.
``type`` keeps the grammar's node type; ``kind`` is the coarser tag rules
dispatch on.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    NUMBER = "number"
    STRING = "string"
    OPERATOR = "operator"
    PUNCT = "punct"
    ATTRIBUTE = "attribute"
    POUND = "pound"
    NEWLINE = "newline"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A leaf of the syntax tree. Lines and columns are 1-based; end_column is exclusive.

    ``space_before``/``space_after`` record whether whitespace, a comment, a
    line break or the file boundary separates the token from its neighbours.
    """

    kind: TokenKind
    text: str
    line: int
    column: int
    end_line: int
    end_column: int
    space_before: bool
    space_after: bool


@dataclass(frozen=True, slots=True)
class Comment:
    text: str
    line: int
    column: int
    end_line: int


class NodeKind(Enum):
    """Kind tag of a syntax node."""

    SOURCE_FILE = "source_file"
    IMPORT_DECL = "import_decl"
    TYPE_DECL = "type_decl"
    FUNCTION_DECL = "function_decl"
    INITIALIZER_DECL = "initializer_decl"
    VARIABLE_DECL = "variable_decl"
    ENUM_CASE_DECL = "enum_case_decl"
    TYPEALIAS_DECL = "typealias_decl"
    PARAMETER = "parameter"
    MEMBER_BLOCK = "member_block"
    CODE_BLOCK = "code_block"
    STATEMENT = "statement"
    SWITCH_STMT = "switch_stmt"
    SWITCH_CASE = "switch_case"
    CLOSURE = "closure"
    FORCE_UNWRAP = "force_unwrap"
    OTHER = "other"


# Containers whose span starts at their first statement, not at a statement.
CONTAINER_KINDS: frozenset[NodeKind] = frozenset({
    NodeKind.SOURCE_FILE,
    NodeKind.MEMBER_BLOCK,
    NodeKind.CODE_BLOCK,
})


@dataclass(frozen=True, slots=True)
class Span:
    """Source range. Lines and columns are 1-based; end_column is exclusive."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def contains(self, other: Span) -> bool:
        """Return True if *other* lies entirely within this span."""
        starts_after: bool = (other.start_line, other.start_column) >= (
            self.start_line,
            self.start_column,
        )
        ends_before: bool = (other.end_line, other.end_column) <= (
            self.end_line,
            self.end_column,
        )
        return starts_after and ends_before


@dataclass(frozen=True, slots=True)
class SyntaxNode:
    """Immutable node of the Swift syntax tree.

    ``first_token``/``last_token`` index into the token sequence of the
    ``ParseResult`` the node came from. ``colons`` holds token indices of
    declaration colons (type annotations, inheritance clauses).
    """

    kind: NodeKind
    type: str
    span: Span
    children: tuple[SyntaxNode, ...] = ()
    name: str | None = None
    keyword: str | None = None
    modifiers: tuple[str, ...] = ()
    attributes: tuple[str, ...] = ()
    names: tuple[str, ...] = ()
    colons: tuple[int, ...] = ()
    first_token: int = 0
    last_token: int = 0

    def walk(self) -> Iterator[SyntaxNode]:
        """Yield this node and all descendants, depth-first pre-order."""
        stack: list[SyntaxNode] = [self]
        while stack:
            node: SyntaxNode = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def children_of_kind(self, kind: NodeKind) -> list[SyntaxNode]:
        return [child for child in self.children if child.kind == kind]
