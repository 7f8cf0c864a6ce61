"""Shared utilities for fixer modules."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from swiftguard.constants import DiagnosticKind
from swiftguard.diagnostics import Diagnostic
from swiftguard.ignores import apply_ignores
from swiftguard.parser import ParseResult
from swiftguard.parser import parse_source as _parse
from swiftguard.rules.base import Rule
from swiftguard.rules.registry import RuleRegistry
from swiftguard.types import SwiftGuardConfig
from swiftguard.walker import RunResult, run


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replace the text between two 1-based positions (end exclusive)."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    replacement: str


def parse_source(source: str, *, file: Path = Path("<memory>")) -> ParseResult | None:
    """Parse source code, returning ``None`` on error."""
    result: ParseResult = _parse(source, file=file)
    if result.syntax_error is not None:
        return None
    return result


def flagged_diagnostics(
    parse_result: ParseResult,
    *,
    rule: Rule,
    config: SwiftGuardConfig,
) -> list[Diagnostic]:
    """Violations of *rule* that survive ignore pragmas."""
    registry: RuleRegistry = RuleRegistry()
    registry.register(rule)
    result: RunResult = run(parse_result=parse_result, registry=registry, config=config)
    violations: list[Diagnostic] = [
        d for d in result.diagnostics if d.kind == DiagnosticKind.VIOLATION
    ]
    kept: list[Diagnostic] = apply_ignores(
        diagnostics=violations,
        parse_result=parse_result,
        governance=config.ignores,
    )
    return [d for d in kept if d.code == rule.code]


def apply_edits(source: str, edits: list[TextEdit]) -> str:
    """Apply non-overlapping edits and validate the result still parses.

    Returns the original *source* unchanged if the edited output fails to
    parse.
    """
    if not edits:
        return source

    line_starts: list[int] = [0]
    for line in source.splitlines(keepends=True):
        line_starts.append(line_starts[-1] + len(line))

    def offset(line: int, column: int) -> int:
        return line_starts[line - 1] + column - 1

    result: str = source
    ordered: list[TextEdit] = sorted(
        edits, key=lambda e: (e.start_line, e.start_column), reverse=True,
    )
    for edit in ordered:
        start: int = offset(edit.start_line, edit.start_column)
        end: int = offset(edit.end_line, edit.end_column)
        result = result[:start] + edit.replacement + result[end:]

    if parse_source(result) is None:
        return source
    return result
