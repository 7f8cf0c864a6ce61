"""Output formatters for SwiftGuard diagnostics."""
from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Final, Protocol

from swiftguard.constants import OutputFormat
from swiftguard.diagnostics import Diagnostic, DiagnosticCollection
from swiftguard.types import SwiftGuardConfig


class Formatter(Protocol):
    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: SwiftGuardConfig,
    ) -> str: ...


def pluralize(count: int, noun: str) -> str:
    """``pluralize(1, "file") == "1 file"``, ``pluralize(2, "file") == "2 files"``."""
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def diagnostic_record(diag: Diagnostic, *, show_source: bool) -> dict[str, object]:
    """Structured form shared by the JSON and JSON Lines formatters."""
    loc = diag.location
    record: dict[str, object] = {
        "file": str(diag.file),
        "line": loc.line,
        "column": loc.column,
        "end_line": loc.end_line,
        "end_column": loc.end_column,
        "code": diag.code,
        "severity": diag.severity.value,
        "kind": diag.kind.value,
        "message": diag.message,
    }
    if show_source:
        record["source_line"] = diag.source_line
    return record


class TextFormatter:
    """``file:line:col: severity: message (CODE)``, optionally with a caret excerpt."""

    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: SwiftGuardConfig,
    ) -> str:
        return "\n".join(
            line
            for diag in diagnostics.sorted
            for line in self._render(diag, show_source=config.show_source)
        )

    @staticmethod
    def _render(diag: Diagnostic, *, show_source: bool) -> Iterator[str]:
        loc = diag.location
        yield (
            f"{diag.file}:{loc.line}:{loc.column}: "
            f"{diag.severity.value}: {diag.message} ({diag.code})"
        )
        if show_source and diag.source_line is not None:
            yield f"    {diag.source_line}"
            yield "    " + " " * max(0, loc.column - 1) + "^"
            yield ""


class JsonFormatter:
    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: SwiftGuardConfig,
    ) -> str:
        records: list[dict[str, object]] = [
            diagnostic_record(diag, show_source=config.show_source)
            for diag in diagnostics.sorted
        ]
        return json.dumps(records, indent=2)


class JsonLinesFormatter:
    """One JSON record per line, for tool integration."""

    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: SwiftGuardConfig,
    ) -> str:
        return "\n".join(
            json.dumps(diagnostic_record(diag, show_source=config.show_source))
            for diag in diagnostics.sorted
        )


_FORMATTERS: Final[dict[OutputFormat, type[Formatter]]] = {
    OutputFormat.TEXT: TextFormatter,
    OutputFormat.JSON: JsonFormatter,
    OutputFormat.JSONL: JsonLinesFormatter,
}


def get_formatter(*, output_format: OutputFormat) -> Formatter:
    return _FORMATTERS[output_format]()


def format_summary(*, diagnostics: DiagnosticCollection) -> str:
    counts: list[str] = [
        pluralize(count, noun)
        for count, noun in (
            (diagnostics.error_count, "error"),
            (diagnostics.warning_count, "warning"),
        )
        if count
    ]
    if not counts:
        return "No issues found."
    return f"Found {', '.join(counts)}."
