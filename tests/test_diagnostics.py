"""Tests for the diagnostics module."""
from __future__ import annotations

import itertools
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from swiftguard.constants import DiagnosticKind, Severity
from swiftguard.diagnostics import (
    Diagnostic,
    DiagnosticCollection,
    SourceLocation,
    merge,
    sort_key,
)


def _make_diagnostic(
    *,
    file: str = "Sources/App.swift",
    line: int = 1,
    column: int = 1,
    code: str = "UNW001",
    severity: Severity = Severity.WARNING,
    kind: DiagnosticKind = DiagnosticKind.VIOLATION,
) -> Diagnostic:
    return Diagnostic(
        file=Path(file),
        location=SourceLocation(line=line, column=column),
        code=code,
        message="message",
        severity=severity,
        kind=kind,
    )


def _collection(*diagnostics: Diagnostic) -> DiagnosticCollection:
    collection: DiagnosticCollection = DiagnosticCollection()
    collection.add_all(diagnostics=diagnostics)
    return collection


class TestSourceLocation:
    """Tests for SourceLocation dataclass."""

    def test_creation_basic(self) -> None:
        loc = SourceLocation(line=10, column=5)
        assert loc.line == 10
        assert loc.column == 5
        assert loc.end_line is None
        assert loc.end_column is None

    def test_frozen(self) -> None:
        """SourceLocation is immutable."""
        loc = SourceLocation(line=1, column=1)
        with pytest.raises(FrozenInstanceError):
            loc.line = 2  # type: ignore[misc]


class TestDiagnostic:
    def test_defaults_to_violation(self) -> None:
        diag: Diagnostic = _make_diagnostic()
        assert diag.kind == DiagnosticKind.VIOLATION
        assert not diag.is_internal
        assert diag.source_line is None

    def test_failures_are_internal(self) -> None:
        assert _make_diagnostic(kind=DiagnosticKind.RULE_FAILURE).is_internal
        assert _make_diagnostic(kind=DiagnosticKind.PARSE_FAILURE).is_internal

    def test_frozen(self) -> None:
        diag: Diagnostic = _make_diagnostic()
        with pytest.raises(FrozenInstanceError):
            diag.code = "MUT001"  # type: ignore[misc]


class TestDiagnosticCollection:
    def test_empty(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        assert len(collection) == 0
        assert not collection.has_errors
        assert not collection.has_internal_failures
        assert collection.sorted == []

    def test_duplicates_keep_first(self) -> None:
        first: Diagnostic = _make_diagnostic(severity=Severity.WARNING)
        again: Diagnostic = _make_diagnostic(severity=Severity.ERROR)
        collection: DiagnosticCollection = DiagnosticCollection()
        assert collection.add(diagnostic=first) is True
        assert collection.add(diagnostic=again) is False
        assert list(collection) == [first]

    def test_same_location_different_code_kept(self) -> None:
        collection: DiagnosticCollection = _collection(
            _make_diagnostic(code="UNW001"),
            _make_diagnostic(code="MUT001"),
        )
        assert len(collection) == 2

    def test_sorted_by_file_line_column(self) -> None:
        collection: DiagnosticCollection = _collection(
            _make_diagnostic(file="b.swift", line=1),
            _make_diagnostic(file="a.swift", line=9, column=4),
            _make_diagnostic(file="a.swift", line=9, column=2),
            _make_diagnostic(file="a.swift", line=3),
        )
        assert [sort_key(d) for d in collection.sorted] == [
            ("a.swift", 3, 1),
            ("a.swift", 9, 2),
            ("a.swift", 9, 4),
            ("b.swift", 1, 1),
        ]

    def test_sort_is_stable(self) -> None:
        later: Diagnostic = _make_diagnostic(code="NAM002")
        earlier: Diagnostic = _make_diagnostic(code="ACC001")
        collection: DiagnosticCollection = _collection(later, earlier)
        assert collection.sorted == [later, earlier]

    def test_counts(self) -> None:
        collection: DiagnosticCollection = _collection(
            _make_diagnostic(line=1, severity=Severity.ERROR),
            _make_diagnostic(line=2, severity=Severity.WARNING),
            _make_diagnostic(line=3, severity=Severity.WARNING),
        )
        assert collection.error_count == 1
        assert collection.warning_count == 2
        assert collection.has_errors
        assert not collection.has_internal_failures

    def test_internal_failure_detected(self) -> None:
        collection: DiagnosticCollection = _collection(
            _make_diagnostic(code="SYN001", kind=DiagnosticKind.PARSE_FAILURE),
        )
        assert collection.has_internal_failures


class TestMerge:
    def _per_file(self) -> list[DiagnosticCollection]:
        return [
            _collection(
                _make_diagnostic(file="a.swift", line=4),
                _make_diagnostic(file="a.swift", line=4, code="MUT001"),
                _make_diagnostic(file="a.swift", line=1),
            ),
            _collection(_make_diagnostic(file="b.swift", line=2)),
            _collection(
                _make_diagnostic(file="c.swift", line=7),
                _make_diagnostic(file="c.swift", line=3),
            ),
        ]

    def test_merge_concatenates(self) -> None:
        merged: DiagnosticCollection = merge(*self._per_file())
        assert len(merged) == 6

    def test_merge_is_commutative(self) -> None:
        parts: list[DiagnosticCollection] = self._per_file()
        expected: list[Diagnostic] = merge(*parts).sorted
        for order in itertools.permutations(parts):
            assert merge(*order).sorted == expected

    def test_merge_is_associative(self) -> None:
        a, b, c = self._per_file()
        left: DiagnosticCollection = merge(merge(a, b), c)
        right: DiagnosticCollection = merge(a, merge(b, c))
        assert left.sorted == right.sorted

    def test_merge_accepts_plain_lists(self) -> None:
        merged: DiagnosticCollection = merge([_make_diagnostic()], [_make_diagnostic()])
        assert len(merged) == 1
