"""Ignore pragmas for SwiftGuard.

Three forms are recognised, all written as ``//`` line comments::

    let v = x! // swiftguard: ignore[UNW001] because: checked above
    // swiftguard: ignore[UNW001, prefer-let] because: legacy API
    // swiftguard: ignore-file[NAM002] because: generated constants

A trailing pragma covers its own line. A pragma on a line of its own covers
the whole declaration or statement that starts on the next line. The
``ignore-file`` form covers the file. Rule and parse failures are never
suppressed.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from swiftguard.constants import (
    IGN001_CODE,
    IGN002_CODE,
    IGN003_CODE,
    DiagnosticKind,
    Severity,
    resolve_rule_id,
)
from swiftguard.diagnostics import Diagnostic, SourceLocation
from swiftguard.parser import ParseResult
from swiftguard.syntax import CONTAINER_KINDS, Comment, SyntaxNode
from swiftguard.types import IgnoreGovernance

_PRAGMA: Final[re.Pattern[str]] = re.compile(
    r"^//\s*swiftguard:\s*ignore(?P<file>-file)?\[(?P<codes>[^\]]+)\]"
    r"(?:\s+because:\s*(?P<reason>.*?))?\s*$"
)


class IgnoreScope(enum.Enum):
    LINE = "line"
    NEXT_STATEMENT = "next-statement"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class IgnoreDirective:
    line: int
    codes: frozenset[str]
    reason: str | None
    scope: IgnoreScope


def parse_ignore_directives(
    *,
    comments: tuple[Comment, ...],
    source_lines: tuple[str, ...],
) -> list[IgnoreDirective]:
    """Extract pragmas from the parsed comments, so string contents never match."""
    directives: list[IgnoreDirective] = []
    for comment in comments:
        match: re.Match[str] | None = _PRAGMA.match(comment.text)
        if match is None:
            continue

        scope: IgnoreScope
        if match.group("file"):
            scope = IgnoreScope.FILE
        elif source_lines[comment.line - 1][:comment.column - 1].strip():
            scope = IgnoreScope.LINE
        else:
            scope = IgnoreScope.NEXT_STATEMENT

        directives.append(IgnoreDirective(
            line=comment.line,
            codes=_parse_codes(match.group("codes")),
            reason=match.group("reason") or None,
            scope=scope,
        ))
    return directives


def _parse_codes(raw: str) -> frozenset[str]:
    """Codes or rule names, comma separated. Unknown ids are kept upper-cased."""
    return frozenset(
        resolve_rule_id(part) or part.upper()
        for part in (p.strip() for p in raw.split(","))
        if part
    )


@dataclass(slots=True)
class _Suppressions:
    """Line ranges per rule code in which violations are dropped."""

    whole_file: set[str] = field(default_factory=set)
    ranges: list[tuple[int, int, frozenset[str]]] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        *,
        directives: list[IgnoreDirective],
        tree: SyntaxNode | None,
    ) -> _Suppressions:
        index: _Suppressions = cls()
        statement_ends: dict[int, int] = _statement_ends(tree) if tree is not None else {}
        for directive in directives:
            if directive.scope == IgnoreScope.FILE:
                index.whole_file |= directive.codes
            elif directive.scope == IgnoreScope.LINE:
                index.ranges.append((directive.line, directive.line, directive.codes))
            else:
                start: int = directive.line + 1
                end: int | None = statement_ends.get(start)
                if end is not None:
                    index.ranges.append((start, end, directive.codes))
        return index

    def covers(self, diag: Diagnostic) -> bool:
        if diag.code in self.whole_file:
            return True
        line: int = diag.location.line
        return any(
            start <= line <= end and diag.code in codes
            for start, end, codes in self.ranges
        )


def _statement_ends(tree: SyntaxNode) -> dict[int, int]:
    """Start line -> last line of the longest statement beginning there."""
    ends: dict[int, int] = {}
    for node in tree.walk():
        if node.kind not in CONTAINER_KINDS:
            start: int = node.span.start_line
            ends[start] = max(ends.get(start, start), node.span.end_line)
    return ends


def apply_ignores(
    *,
    diagnostics: list[Diagnostic],
    parse_result: ParseResult,
    governance: IgnoreGovernance,
) -> list[Diagnostic]:
    """Drop suppressed violations; the returned list may include IGN0xx violations."""
    directives: list[IgnoreDirective] = parse_ignore_directives(
        comments=parse_result.comments,
        source_lines=parse_result.source_lines,
    )
    if not directives:
        return diagnostics

    suppressions: _Suppressions = _Suppressions.build(
        directives=directives,
        tree=parse_result.tree,
    )
    kept: list[Diagnostic] = [
        diag for diag in diagnostics
        if diag.kind != DiagnosticKind.VIOLATION
        or diag.code in governance.disallow
        or not suppressions.covers(diag)
    ]
    return _check_governance(
        directives=directives,
        governance=governance,
        parse_result=parse_result,
    ) + kept


def _check_governance(
    *,
    directives: list[IgnoreDirective],
    governance: IgnoreGovernance,
    parse_result: ParseResult,
) -> list[Diagnostic]:
    found: list[tuple[int, str, str]] = []

    for directive in directives:
        if governance.require_reason and directive.reason is None:
            found.append((
                directive.line,
                IGN001_CODE,
                "Ignore pragma requires a reason (use 'because: ...')",
            ))
        for code in sorted(directive.codes & governance.disallow):
            found.append((
                directive.line,
                IGN002_CODE,
                f"Rule '{code}' cannot be ignored (disallowed by configuration)",
            ))

    limit: int | None = governance.max_per_file
    if limit is not None and len(directives) > limit:
        found.append((
            1,
            IGN003_CODE,
            f"File has {len(directives)} ignore directives, maximum allowed is {limit}",
        ))

    return [
        _governance_diagnostic(
            file=parse_result.file,
            line=line,
            code=code,
            message=message,
            source_lines=parse_result.source_lines,
        )
        for line, code, message in found
    ]


def _governance_diagnostic(
    *,
    file: Path,
    line: int,
    code: str,
    message: str,
    source_lines: tuple[str, ...],
) -> Diagnostic:
    return Diagnostic(
        file=file,
        location=SourceLocation(line=line, column=1),
        code=code,
        message=message,
        severity=Severity.ERROR,
        source_line=source_lines[line - 1] if line <= len(source_lines) else None,
    )
