"""Swift parsing with syntax error detection for SwiftGuard.

Source is parsed with the tree-sitter Swift grammar. The concrete tree is
adapted into immutable :class:`SyntaxNode` objects, a token sequence built
from the grammar's leaves (with line breaks made explicit), and the list of
comments. A tree containing ERROR or MISSING nodes is a syntax error.
"""
from __future__ import annotations

import bisect
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

import tree_sitter_swift
from tree_sitter import Language, Node, Parser, Tree

from swiftguard.syntax import Comment, NodeKind, Span, SyntaxNode, Token, TokenKind

SWIFT: Final[Language] = Language(tree_sitter_swift.language())

ACCESS_MODIFIERS: Final[frozenset[str]] = frozenset({
    "open", "public", "package", "internal", "fileprivate", "private",
})

KEYWORDS: Final[frozenset[str]] = frozenset({
    "associatedtype", "class", "deinit", "enum", "extension", "func",
    "import", "init", "inout", "let", "operator", "precedencegroup",
    "protocol", "struct", "subscript", "typealias", "var",
    "break", "case", "catch", "continue", "default", "defer", "do", "else",
    "fallthrough", "for", "guard", "if", "in", "repeat", "return", "throw",
    "switch", "where", "while",
    "as", "is", "nil", "self", "Self", "super", "true", "false", "try",
    "throws", "rethrows",
})

TYPE_KEYWORDS: Final[frozenset[str]] = frozenset({
    "class", "struct", "enum", "protocol", "extension", "actor",
})

# Synthesized for `var` bindings in if/guard/while/for headers and case patterns.
BINDING_NODE_TYPE: Final[str] = "binding_declaration"

COMMENT_TYPES: Final[frozenset[str]] = frozenset({"comment", "multiline_comment"})

_KINDS: Final[dict[str, NodeKind]] = {
    "source_file": NodeKind.SOURCE_FILE,
    "import_declaration": NodeKind.IMPORT_DECL,
    "class_declaration": NodeKind.TYPE_DECL,
    "protocol_declaration": NodeKind.TYPE_DECL,
    "function_declaration": NodeKind.FUNCTION_DECL,
    "init_declaration": NodeKind.INITIALIZER_DECL,
    "deinit_declaration": NodeKind.INITIALIZER_DECL,
    "subscript_declaration": NodeKind.INITIALIZER_DECL,
    "property_declaration": NodeKind.VARIABLE_DECL,
    "typealias_declaration": NodeKind.TYPEALIAS_DECL,
    "enum_entry": NodeKind.ENUM_CASE_DECL,
    "parameter": NodeKind.PARAMETER,
    "class_body": NodeKind.MEMBER_BLOCK,
    "enum_class_body": NodeKind.MEMBER_BLOCK,
    "protocol_body": NodeKind.MEMBER_BLOCK,
    "statements": NodeKind.CODE_BLOCK,
    "lambda_literal": NodeKind.CLOSURE,
    "if_statement": NodeKind.STATEMENT,
    "guard_statement": NodeKind.STATEMENT,
    "for_statement": NodeKind.STATEMENT,
    "while_statement": NodeKind.STATEMENT,
    "repeat_while_statement": NodeKind.STATEMENT,
    "do_statement": NodeKind.STATEMENT,
    "switch_statement": NodeKind.SWITCH_STMT,
    "switch_entry": NodeKind.SWITCH_CASE,
}

_FIXED_KEYWORDS: Final[dict[str, str]] = {
    "function_declaration": "func",
    "init_declaration": "init",
    "deinit_declaration": "deinit",
    "subscript_declaration": "subscript",
    "typealias_declaration": "typealias",
    "import_declaration": "import",
    "enum_entry": "case",
}

_BINDING_HEADERS: Final[frozenset[str]] = frozenset({
    "if_statement", "guard_statement", "while_statement", "for_statement",
})

_STRING_TYPES: Final[frozenset[str]] = frozenset({
    "line_string_literal", "multi_line_string_literal", "raw_string_literal",
    "regex_literal",
})
_IDENTIFIER_TYPES: Final[frozenset[str]] = frozenset({"simple_identifier", "type_identifier"})
_PUNCTUATION: Final[frozenset[str]] = frozenset({"(", ")", "[", "]", "{", "}", ",", ":", ";", "."})
_OPENERS: Final[frozenset[str]] = frozenset({"(", "[", "{"})
_CLOSERS: Final[frozenset[str]] = frozenset({")", "]", "}"})
_PATTERN_STOPS: Final[frozenset[str]] = frozenset({"in", "where", "else"})


@dataclass(frozen=True, slots=True)
class SyntaxErrorInfo:
    """Syntax error details. Line/column are 1-based."""

    line: int
    column: int
    message: str
    source_line: str | None


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Result of parsing a Swift file."""

    file: Path
    tree: SyntaxNode | None
    source: str
    source_lines: tuple[str, ...]
    tokens: tuple[Token, ...]
    comments: tuple[Comment, ...]
    syntax_error: SyntaxErrorInfo | None


class SwiftSyntaxError(Exception):
    """Source text the Swift grammar cannot parse."""

    def __init__(self, message: str, *, line: int, column: int) -> None:
        self.line: int = line
        self.column: int = column
        super().__init__(message)


def join_tokens(tokens: Sequence[Token]) -> str:
    """Render tokens back to text, keeping a single space where one was."""
    parts: list[str] = []
    for token in tokens:
        if token.kind in (TokenKind.NEWLINE, TokenKind.EOF):
            continue
        if parts and token.space_before:
            parts.append(" ")
        parts.append(token.text)
    return "".join(parts)


def parse_source(source: str, *, file: Path = Path("<memory>")) -> ParseResult:
    """Parse Swift source text, returning the tree or syntax error."""
    source_lines: tuple[str, ...] = tuple(source.splitlines())
    data: bytes = source.encode("utf-8")
    try:
        adapter: _TreeAdapter = _TreeAdapter(data)
        tree: SyntaxNode = adapter.build(Parser(SWIFT).parse(data))
    except SwiftSyntaxError as e:
        line: int = min(e.line, max(len(source_lines), 1))
        source_line: str | None = None
        if 1 <= line <= len(source_lines):
            source_line = source_lines[line - 1]
        return ParseResult(
            file=file,
            tree=None,
            source=source,
            source_lines=source_lines,
            tokens=(),
            comments=(),
            syntax_error=SyntaxErrorInfo(
                line=line,
                column=e.column if line == e.line else 1,
                message=str(e) or "Syntax error",
                source_line=source_line,
            ),
        )

    return ParseResult(
        file=file,
        tree=tree,
        source=source,
        source_lines=source_lines,
        tokens=tuple(adapter.tokens),
        comments=tuple(adapter.comments),
        syntax_error=None,
    )


def parse_file(*, file: Path) -> ParseResult:
    """Parse a Swift file, returning the tree or syntax error."""
    try:
        source: str = file.read_text(encoding="utf-8")
    except OSError as e:
        return _unreadable(file=file, message=f"Cannot read file: {e}")
    except UnicodeDecodeError as e:
        return _unreadable(file=file, message=f"Encoding error: {e}")

    return parse_source(source, file=file)


def _unreadable(*, file: Path, message: str) -> ParseResult:
    return ParseResult(
        file=file,
        tree=None,
        source="",
        source_lines=(),
        tokens=(),
        comments=(),
        syntax_error=SyntaxErrorInfo(
            line=1,
            column=1,
            message=message,
            source_line=None,
        ),
    )


def _first_error(root: Node) -> Node | None:
    stack: list[Node] = [root]
    while stack:
        node: Node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


class _TreeAdapter:
    """Builds tokens, comments and SyntaxNodes from one tree-sitter tree."""

    def __init__(self, data: bytes) -> None:
        self._data: bytes = data
        self._line_starts: list[int] = [0]
        offset: int = data.find(b"\n")
        while offset != -1:
            self._line_starts.append(offset + 1)
            offset = data.find(b"\n", offset + 1)
        self.tokens: list[Token] = []
        self.comments: list[Comment] = []
        self._starts: list[int] = []
        self._ends: list[int] = []

    # -- positions ---------------------------------------------------------

    def _position(self, offset: int) -> tuple[int, int]:
        row: int = bisect.bisect_right(self._line_starts, offset) - 1
        prefix: bytes = self._data[self._line_starts[row]:offset]
        return row + 1, len(prefix.decode("utf-8", errors="ignore")) + 1

    def _span(self, start: int, end: int) -> Span:
        start_line, start_column = self._position(start)
        end_line, end_column = self._position(end)
        return Span(
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
        )

    def _text(self, node: Node) -> str:
        return self._data[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def _token_at(self, offset: int) -> int:
        return bisect.bisect_left(self._starts, offset)

    def _token_range(self, node: Node) -> tuple[int, int]:
        first: int = self._token_at(node.start_byte)
        last: int = bisect.bisect_right(self._ends, node.end_byte, 0, len(self.tokens) - 1) - 1
        while last > first and self.tokens[last].kind == TokenKind.NEWLINE:
            last -= 1
        return first, max(first, last)

    # -- tokens ------------------------------------------------------------

    def build(self, tree: Tree) -> SyntaxNode:
        """Adapt *tree*.

        Raises:
            SwiftSyntaxError: If the tree contains ERROR or MISSING nodes.
        """
        root: Node = tree.root_node
        if root.has_error:
            error: Node | None = _first_error(root)
            offset: int = error.start_byte if error is not None else 0
            line, column = self._position(offset)
            raise SwiftSyntaxError(self._describe(error), line=line, column=column)
        self._tokenize(root)
        return self._convert(root)

    def _describe(self, error: Node | None) -> str:
        if error is None:
            return "Syntax error"
        if error.is_missing:
            return f"Expected '{error.type}'"
        snippet: str = self._text(error).strip().split("\n", 1)[0][:20]
        return f"Unexpected '{snippet}'" if snippet else "Syntax error"

    def _tokenize(self, root: Node) -> None:
        leaves: list[tuple[TokenKind, int, int]] = []
        stack: list[tuple[Node, str, bool]] = [(root, "", False)]
        while stack:
            node, parent_type, in_string = stack.pop()
            if node.type in COMMENT_TYPES:
                self._add_comment(node)
                continue
            if node.child_count == 0:
                if node.end_byte > node.start_byte:
                    kind: TokenKind = self._classify(node, parent_type, in_string)
                    leaves.append((kind, node.start_byte, node.end_byte))
                continue
            if node.type in _STRING_TYPES:
                in_string = True
            elif node.type == "interpolated_expression":
                in_string = False
            stack.extend((child, node.type, in_string) for child in reversed(node.children))

        for idx, (kind, start, end) in enumerate(leaves):
            previous_end: int = leaves[idx - 1][2] if idx else 0
            next_start: int = leaves[idx + 1][1] if idx + 1 < len(leaves) else len(self._data)
            if idx:
                newline: int = self._data.find(b"\n", previous_end, start)
                if newline != -1:
                    self._add_token(TokenKind.NEWLINE, newline, newline + 1, True, True)
            self._add_token(kind, start, end, idx == 0 or start > previous_end, next_start > end)
        self._add_token(TokenKind.EOF, len(self._data), len(self._data), True, True)

    def _classify(self, leaf: Node, parent_type: str, in_string: bool) -> TokenKind:
        text: str = self._text(leaf)
        first: str = text[0]
        if in_string or leaf.type in _STRING_TYPES:
            return TokenKind.STRING
        if first.isdigit():
            return TokenKind.NUMBER
        if text in _PUNCTUATION:
            return TokenKind.PUNCT
        if first == "@":
            return TokenKind.ATTRIBUTE
        if first == "#":
            return TokenKind.POUND
        if text in KEYWORDS and not (
            leaf.type in _IDENTIFIER_TYPES or parent_type in _IDENTIFIER_TYPES
        ):
            return TokenKind.KEYWORD
        if first.isalpha() or first in "_$`":
            return TokenKind.IDENTIFIER
        return TokenKind.OPERATOR

    def _add_token(
        self,
        kind: TokenKind,
        start: int,
        end: int,
        space_before: bool,
        space_after: bool,
    ) -> None:
        span: Span = self._span(start, end)
        self._starts.append(start)
        self._ends.append(end)
        self.tokens.append(Token(
            kind=kind,
            text=self._data[start:end].decode("utf-8", errors="replace"),
            line=span.start_line,
            column=span.start_column,
            end_line=span.end_line,
            end_column=span.end_column,
            space_before=space_before,
            space_after=space_after,
        ))

    def _add_comment(self, node: Node) -> None:
        span: Span = self._span(node.start_byte, node.end_byte)
        self.comments.append(Comment(
            text=self._text(node),
            line=span.start_line,
            column=span.start_column,
            end_line=span.end_line,
        ))

    # -- nodes -------------------------------------------------------------

    def _convert(self, root: Node) -> SyntaxNode:
        """Post-order conversion with an explicit stack; trees can be deep."""
        stack: list[tuple[Node, Iterator[Node], list[SyntaxNode]]] = [
            (root, self._named_children(root), []),
        ]
        while True:
            node, pending, built = stack[-1]
            child: Node | None = next(pending, None)
            if child is not None:
                stack.append((child, self._named_children(child), []))
                continue
            stack.pop()
            converted: SyntaxNode = self._node(node, built)
            if not stack:
                return converted
            stack[-1][2].append(converted)

    @staticmethod
    def _named_children(node: Node) -> Iterator[Node]:
        return (c for c in node.named_children if c.type not in COMMENT_TYPES)

    def _node(self, ts: Node, children: list[SyntaxNode]) -> SyntaxNode:
        kind: NodeKind = _KINDS.get(ts.type, NodeKind.OTHER)
        if ts.type == "postfix_expression" and ts.child_count and (
            ts.children[-1].type == "bang" or self._text(ts.children[-1]) == "!"
        ):
            kind = NodeKind.FORCE_UNWRAP
        first, last = self._token_range(ts)
        fields: dict[str, object] = {}

        if kind in (
            NodeKind.TYPE_DECL,
            NodeKind.FUNCTION_DECL,
            NodeKind.INITIALIZER_DECL,
            NodeKind.VARIABLE_DECL,
            NodeKind.TYPEALIAS_DECL,
        ):
            fields["modifiers"], fields["attributes"] = self._modifiers(ts)

        if kind == NodeKind.TYPE_DECL:
            fields.update(self._type_decl(ts, first, last))
        elif kind == NodeKind.VARIABLE_DECL:
            fields.update(self._variable_decl(first, last))
        elif kind == NodeKind.SWITCH_CASE:
            case_fields, header_end = self._switch_case(first, last)
            fields.update(case_fields)
            children.extend(self._bindings(first, header_end))
        elif kind == NodeKind.PARAMETER:
            fields["colons"] = self._direct_colons(ts)
        elif kind == NodeKind.STATEMENT:
            fields["keyword"] = ts.type.split("_", 1)[0]
            if ts.type in _BINDING_HEADERS:
                children.extend(self._bindings(first, self._header_end(ts, last)))
        elif ts.type in _FIXED_KEYWORDS:
            fields["keyword"] = _FIXED_KEYWORDS[ts.type]
            name_node: Node | None = ts.child_by_field_name("name")
            if name_node is not None:
                fields["name"] = self._text(name_node)

        children.sort(key=lambda n: (n.first_token, -n.last_token))
        return SyntaxNode(
            kind=kind,
            type=ts.type,
            span=self._span(ts.start_byte, ts.end_byte),
            children=tuple(children),
            first_token=first,
            last_token=last,
            **fields,  # type: ignore[arg-type]
        )

    def _modifiers(self, ts: Node) -> tuple[tuple[str, ...], tuple[str, ...]]:
        modifiers: list[str] = []
        attributes: list[str] = []
        for child in ts.named_children:
            parts: list[Node] = child.named_children if child.type == "modifiers" else [child]
            for part in parts:
                if part.type == "attribute":
                    attributes.append(self._text(part))
                elif part.type.endswith("_modifier"):
                    modifiers.append(self._text(part))
        return tuple(modifiers), tuple(attributes)

    def _direct_colons(self, ts: Node) -> tuple[int, ...]:
        return tuple(self._token_at(c.start_byte) for c in ts.children if c.type == ":")

    def _type_decl(self, ts: Node, first: int, last: int) -> dict[str, object]:
        keyword: str | None = next(
            (c.type for c in ts.children if not c.is_named and c.type in TYPE_KEYWORDS),
            None,
        )
        name_node: Node | None = ts.child_by_field_name("name")
        name: str | None = self._text(name_node) if name_node is not None else None
        if name is None and keyword is not None:
            name = self._identifier_after(keyword, first, last)
        return {
            "keyword": keyword,
            "name": name,
            "names": tuple(
                self._text(c).split("<", 1)[0].strip()
                for c in ts.named_children
                if c.type == "inheritance_specifier"
            ),
            "colons": self._direct_colons(ts),
        }

    def _identifier_after(self, keyword: str, first: int, last: int) -> str | None:
        seen: bool = False
        for token in self.tokens[first:last + 1]:
            if seen and token.kind == TokenKind.IDENTIFIER:
                return token.text
            seen = seen or token.text == keyword
        return None

    def _variable_decl(self, first: int, last: int) -> dict[str, object]:
        for idx in range(first, last + 1):
            token: Token = self.tokens[idx]
            if token.kind == TokenKind.KEYWORD and token.text in ("var", "let"):
                names, colons, _ = self._scan_pattern(idx + 1, last + 1, single=False)
                return {
                    "keyword": token.text,
                    "name": names[0] if names else None,
                    "names": names,
                    "colons": colons,
                }
        return {}

    def _scan_pattern(
        self,
        start: int,
        end: int,
        *,
        single: bool,
    ) -> tuple[tuple[str, ...], tuple[int, ...], int]:
        """Read bound names and annotation colons following ``var``/``let``.

        Returns the names, the colon token indices and the index of the last
        name token (``start - 1`` if none). With *single* the scan stops at
        the end of the first binding.
        """
        names: list[str] = []
        colons: list[int] = []
        last_name: int = start - 1
        state: str = "pattern"
        depth: int = 0
        angle: int = 0
        for idx in range(start, end):
            token: Token = self.tokens[idx]
            text: str = token.text
            if token.kind == TokenKind.PUNCT and text in _OPENERS:
                depth += 1
                if depth == 1 and text == "{" and state != "init":
                    state = "init"
                continue
            if token.kind == TokenKind.PUNCT and text in _CLOSERS:
                depth -= 1
                if depth < 0:
                    break
                continue
            if token.kind == TokenKind.KEYWORD and text in _PATTERN_STOPS and depth == 0:
                break
            if state == "type" and token.kind == TokenKind.OPERATOR and set(text) <= set("<>?!"):
                angle += text.count("<") - text.count(">")
                continue
            if depth == 0 and angle <= 0:
                if text == ",":
                    if single:
                        break
                    state = "pattern"
                    continue
                if text == ":" and state == "pattern":
                    colons.append(idx)
                    state = "type"
                    continue
                if token.kind == TokenKind.OPERATOR and text == "=":
                    if single:
                        break
                    state = "init"
                    continue
            if state == "pattern" and token.kind == TokenKind.IDENTIFIER:
                previous: Token = self.tokens[idx - 1]
                if previous.kind == TokenKind.PUNCT and previous.text == ".":
                    continue
                names.append(text)
                last_name = idx
        return tuple(names), tuple(colons), last_name

    def _switch_case(self, first: int, last: int) -> tuple[dict[str, object], int]:
        """Keyword, attributes and patterns of a case; also the index of its `:`."""
        attributes: list[str] = []
        idx: int = first
        while idx <= last and self.tokens[idx].kind == TokenKind.ATTRIBUTE:
            attribute: str = self.tokens[idx].text
            if attribute == "@" and idx < last:
                idx += 1
                attribute += self.tokens[idx].text
            attributes.append(attribute)
            idx += 1
            while idx <= last and self.tokens[idx].kind == TokenKind.NEWLINE:
                idx += 1
        keyword: str = self.tokens[idx].text if idx <= last else "case"

        patterns: list[str] = []
        current: list[Token] = []
        depth: int = 0
        header_end: int = last + 1
        for j in range(idx + 1, last + 1):
            token: Token = self.tokens[j]
            if token.kind == TokenKind.PUNCT and token.text in _OPENERS:
                depth += 1
            elif token.kind == TokenKind.PUNCT and token.text in _CLOSERS:
                depth -= 1
            elif depth == 0 and token.text == ":":
                header_end = j
                break
            elif depth == 0 and token.text == ",":
                patterns.append(join_tokens(current))
                current = []
                continue
            current.append(token)
        if keyword == "case":
            patterns.append(join_tokens(current))
            patterns = [p.split(" where ", 1)[0] for p in patterns if p]
        return {
            "keyword": keyword,
            "attributes": tuple(attributes),
            "names": tuple(patterns),
        }, header_end

    def _header_end(self, ts: Node, last: int) -> int:
        """Token index of the `{` opening the statement's body."""
        for child in ts.children:
            if child.type == "{":
                return self._token_at(child.start_byte)
        return last + 1

    def _bindings(self, first: int, header_end: int) -> list[SyntaxNode]:
        """Nodes for the ``var`` bindings between *first* and *header_end*."""
        bindings: list[SyntaxNode] = []
        braces: int = 0
        for idx in range(first, header_end):
            token: Token = self.tokens[idx]
            if token.kind == TokenKind.PUNCT and token.text in ("{", "}"):
                braces += 1 if token.text == "{" else -1
                continue
            if braces or token.kind != TokenKind.KEYWORD or token.text != "var":
                continue
            names, _, last_name = self._scan_pattern(idx + 1, header_end, single=True)
            if not names:
                continue
            end: Token = self.tokens[last_name]
            bindings.append(SyntaxNode(
                kind=NodeKind.VARIABLE_DECL,
                type=BINDING_NODE_TYPE,
                span=Span(
                    start_line=token.line,
                    start_column=token.column,
                    end_line=end.end_line,
                    end_column=end.end_column,
                ),
                keyword="var",
                name=names[0],
                names=names,
                first_token=idx,
                last_token=last_name,
            ))
        return bindings
