"""Diagnostic data model for SwiftGuard."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from swiftguard.constants import DiagnosticKind, Severity


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source code location. All values are 1-based."""

    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single diagnostic (violation or internal failure) found in code."""

    file: Path
    location: SourceLocation
    code: str
    message: str
    severity: Severity
    source_line: str | None = None
    kind: DiagnosticKind = DiagnosticKind.VIOLATION

    @property
    def is_internal(self) -> bool:
        """True for rule and parse failures, as opposed to style violations."""
        return self.kind != DiagnosticKind.VIOLATION


def sort_key(diagnostic: Diagnostic) -> tuple[str, int, int]:
    """Reporting order: file, then line, then column."""
    return (str(diagnostic.file), diagnostic.location.line, diagnostic.location.column)


@dataclass(slots=True)
class DiagnosticCollection:
    """Mutable collection of diagnostics with dedup, sorting and counting.

    Identical (code, file, location) entries collapse to the first one added.
    """

    _diagnostics: list[Diagnostic] = field(default_factory=list)
    _seen: set[tuple[str, Path, SourceLocation]] = field(default_factory=set)

    def add(self, *, diagnostic: Diagnostic) -> bool:
        """Add a single diagnostic. Returns False if it was a duplicate."""
        key: tuple[str, Path, SourceLocation] = (
            diagnostic.code,
            diagnostic.file,
            diagnostic.location,
        )
        if key in self._seen:
            return False
        self._seen.add(key)
        self._diagnostics.append(diagnostic)
        return True

    def add_all(self, *, diagnostics: Iterable[Diagnostic]) -> None:
        """Add multiple diagnostics."""
        for diagnostic in diagnostics:
            self.add(diagnostic=diagnostic)

    @property
    def sorted(self) -> list[Diagnostic]:
        """Return diagnostics sorted by file, line, column (stable)."""
        return sorted(self._diagnostics, key=sort_key)

    @property
    def has_errors(self) -> bool:
        """Return True if any diagnostic has ERROR severity."""
        return any(d.severity == Severity.ERROR for d in self._diagnostics)

    @property
    def has_internal_failures(self) -> bool:
        """Return True if any rule or parse failure was recorded."""
        return any(d.is_internal for d in self._diagnostics)

    @property
    def error_count(self) -> int:
        """Count of ERROR severity diagnostics."""
        return sum(1 for d in self._diagnostics if d.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        """Count of WARNING severity diagnostics."""
        return sum(1 for d in self._diagnostics if d.severity == Severity.WARNING)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)


def merge(*collections: Iterable[Diagnostic]) -> DiagnosticCollection:
    """Concatenate independent per-file results into one collection."""
    merged: DiagnosticCollection = DiagnosticCollection()
    for collection in collections:
        merged.add_all(diagnostics=collection)
    return merged
