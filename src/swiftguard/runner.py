"""Lint orchestrator for SwiftGuard."""
from __future__ import annotations

import difflib
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from swiftguard.constants import (
    EXIT_INTERNAL,
    EXIT_OK,
    EXIT_VIOLATIONS,
    SYNTAX_ERROR_CODE,
    DiagnosticKind,
    OutputFormat,
    Severity,
)
from swiftguard.diagnostics import Diagnostic, DiagnosticCollection, SourceLocation, merge
from swiftguard.fixers.pipeline import fix_all
from swiftguard.formatters import Formatter, format_summary, get_formatter, pluralize
from swiftguard.ignores import apply_ignores
from swiftguard.parser import ParseResult, SyntaxErrorInfo, parse_file
from swiftguard.rules.registry import RuleRegistry, build_registry
from swiftguard.scanner import scan_files
from swiftguard.types import SwiftGuardConfig
from swiftguard.walker import RunResult, run

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LintResult:
    diagnostics: DiagnosticCollection
    files_checked: int
    exit_code: int
    cancelled: bool = False


@dataclass(frozen=True, slots=True)
class FixResult:
    """Planned edits: path -> (old source, new source) for changed files only."""

    changes: dict[Path, tuple[str, str]] = field(default_factory=dict)
    files_checked: int = 0

    @property
    def files_changed(self) -> int:
        return len(self.changes)


def _syntax_error_to_diagnostic(*, parse_result: ParseResult) -> Diagnostic:
    err: SyntaxErrorInfo | None = parse_result.syntax_error
    if err is None:
        raise ValueError("parse_result must have a syntax_error")
    return Diagnostic(
        file=parse_result.file,
        location=SourceLocation(line=err.line, column=err.column),
        code=SYNTAX_ERROR_CODE,
        message=err.message,
        severity=Severity.ERROR,
        source_line=err.source_line,
        kind=DiagnosticKind.PARSE_FAILURE,
    )


def lint_parse_result(
    *,
    parse_result: ParseResult,
    registry: RuleRegistry,
    config: SwiftGuardConfig,
) -> list[Diagnostic]:
    """Lint one parsed file: walk, then filter through ignore pragmas."""
    if parse_result.syntax_error is not None:
        return [_syntax_error_to_diagnostic(parse_result=parse_result)]

    result: RunResult = run(parse_result=parse_result, registry=registry, config=config)
    return apply_ignores(
        diagnostics=list(result.diagnostics),
        parse_result=parse_result,
        governance=config.ignores,
    )


def lint_file(
    *,
    file: Path,
    registry: RuleRegistry,
    config: SwiftGuardConfig,
) -> list[Diagnostic]:
    logger.debug("Checking %s", file)
    diagnostics: list[Diagnostic] = lint_parse_result(
        parse_result=parse_file(file=file),
        registry=registry,
        config=config,
    )
    logger.debug("%s: %d diagnostics", file, len(diagnostics))
    return diagnostics


def compute_exit_code(*, diagnostics: DiagnosticCollection, cancelled: bool = False) -> int:
    """2 for internal failures or a cancelled run, 1 for errors, else 0."""
    if cancelled or diagnostics.has_internal_failures:
        return EXIT_INTERNAL
    if diagnostics.has_errors:
        return EXIT_VIOLATIONS
    return EXIT_OK


def lint_paths(
    *,
    paths: tuple[Path, ...],
    config: SwiftGuardConfig,
    cancel: threading.Event | None = None,
) -> LintResult:
    """Lint every Swift file under *paths*.

    Files are independent; with ``config.jobs > 1`` they are checked on a
    thread pool. Setting *cancel* stops the run between files and keeps the
    results gathered so far.
    """
    start: float = time.perf_counter()
    files: list[Path] = scan_files(paths=paths, config=config)
    logger.info("Found %d files", len(files))
    registry: RuleRegistry = build_registry(config=config)

    per_file: list[list[Diagnostic]]
    cancelled: bool
    if config.jobs > 1 and len(files) > 1:
        per_file, cancelled = _lint_parallel(
            files=files, registry=registry, config=config, cancel=cancel,
        )
    else:
        per_file, cancelled = _lint_sequential(
            files=files, registry=registry, config=config, cancel=cancel,
        )

    collection: DiagnosticCollection = merge(*per_file)
    if cancelled:
        logger.warning("Run cancelled after %d of %d files", len(per_file), len(files))
    logger.info("Completed in %.2fs", time.perf_counter() - start)

    return LintResult(
        diagnostics=collection,
        files_checked=len(per_file),
        exit_code=compute_exit_code(diagnostics=collection, cancelled=cancelled),
        cancelled=cancelled,
    )


def _lint_sequential(
    *,
    files: list[Path],
    registry: RuleRegistry,
    config: SwiftGuardConfig,
    cancel: threading.Event | None,
) -> tuple[list[list[Diagnostic]], bool]:
    results: list[list[Diagnostic]] = []
    for file in files:
        if cancel is not None and cancel.is_set():
            return results, True
        try:
            results.append(lint_file(file=file, registry=registry, config=config))
        except KeyboardInterrupt:
            return results, True
    return results, False


def _lint_parallel(
    *,
    files: list[Path],
    registry: RuleRegistry,
    config: SwiftGuardConfig,
    cancel: threading.Event | None,
) -> tuple[list[list[Diagnostic]], bool]:
    results: list[list[Diagnostic]] = []
    logger.debug("Checking with %d workers", config.jobs)
    with ThreadPoolExecutor(max_workers=config.jobs) as executor:
        futures: list[Future[list[Diagnostic]]] = [
            executor.submit(lint_file, file=file, registry=registry, config=config)
            for file in files
        ]
        try:
            for future in futures:
                if cancel is not None and cancel.is_set():
                    break
                results.append(future.result())
            else:
                return results, False
        except KeyboardInterrupt:
            logger.debug("Interrupted; cancelling pending files")
        for pending in futures:
            pending.cancel()
    return results, True


def format_results(*, result: LintResult, config: SwiftGuardConfig) -> str:
    formatter: Formatter = get_formatter(output_format=config.output_format)
    output: str = formatter.format(diagnostics=result.diagnostics, config=config)

    # Structured output stays machine-readable
    if config.output_format != OutputFormat.TEXT:
        return output

    summary: str = format_summary(diagnostics=result.diagnostics)
    file_count: str = f"Checked {pluralize(result.files_checked, 'file')}."

    parts: list[str] = []
    if output:
        parts.append(output)
    parts.append(summary)
    parts.append(file_count)
    if result.cancelled:
        parts.append("Run cancelled; results are partial.")

    return "\n".join(parts)


def fix_paths(*, paths: tuple[Path, ...], config: SwiftGuardConfig) -> FixResult:
    """Compute fixes for every Swift file under *paths* without writing."""
    start: float = time.perf_counter()
    files: list[Path] = scan_files(paths=paths, config=config)
    logger.info("Found %d files to fix", len(files))

    changes: dict[Path, tuple[str, str]] = {}
    for file in files:
        try:
            old: str = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", file, e)
            continue
        logger.debug("Fixing %s", file)
        new: str = fix_all(old, config=config)
        if new != old:
            changes[file] = (old, new)

    logger.info("Completed in %.2fs", time.perf_counter() - start)
    return FixResult(changes=changes, files_checked=len(files))


def format_diff(*, path: Path, old: str, new: str) -> str:
    """Unified diff of *old* and *new* for *path*."""
    return "".join(difflib.unified_diff(
        old.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
    ))
