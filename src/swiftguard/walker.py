"""Single-pass syntax tree walker that drives the active rules."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from swiftguard.constants import DiagnosticKind, Severity
from swiftguard.diagnostics import Diagnostic, DiagnosticCollection, SourceLocation
from swiftguard.parser import ParseResult
from swiftguard.rules.base import Rule, RuleContext
from swiftguard.rules.registry import RuleRegistry
from swiftguard.syntax import SyntaxNode
from swiftguard.types import SwiftGuardConfig

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunResult:
    """Diagnostics produced by one walker pass over one file."""

    file: Path
    diagnostics: DiagnosticCollection = field(default_factory=DiagnosticCollection)

    @property
    def error_count(self) -> int:
        return self.diagnostics.error_count

    @property
    def warning_count(self) -> int:
        return self.diagnostics.warning_count

    def __len__(self) -> int:
        return len(self.diagnostics)


def run(
    *,
    parse_result: ParseResult,
    registry: RuleRegistry,
    config: SwiftGuardConfig,
) -> RunResult:
    """Walk the tree once, depth-first, evaluating each applicable active rule.

    A rule that raises is recorded as a rule-failure diagnostic the first
    time it fails in a file. It still runs on every later node, so its
    violations elsewhere in the file are reported.
    """
    result: RunResult = RunResult(file=parse_result.file)
    tree: SyntaxNode | None = parse_result.tree
    if tree is None:
        return result

    rules: list[Rule] = registry.active_rules()
    failed: set[str] = set()
    stack: list[tuple[SyntaxNode, tuple[SyntaxNode, ...]]] = [(tree, ())]

    while stack:
        node, ancestors = stack.pop()
        context: RuleContext | None = None
        for rule in rules:
            if not rule.applies_to(node):
                continue
            if context is None:
                context = RuleContext(
                    file=parse_result.file,
                    source_lines=parse_result.source_lines,
                    tokens=parse_result.tokens,
                    comments=parse_result.comments,
                    root=tree,
                    ancestors=ancestors,
                    config=config,
                )
            try:
                result.diagnostics.add_all(diagnostics=rule.check(node, context))
            except Exception as e:
                logger.debug(
                    "Rule %s failed on %s:%d",
                    rule.code,
                    parse_result.file,
                    node.span.start_line,
                    exc_info=True,
                )
                if rule.code in failed:
                    continue
                failed.add(rule.code)
                result.diagnostics.add(diagnostic=_rule_failure(
                    rule=rule, node=node, parse_result=parse_result, error=e,
                ))

        child_ancestors: tuple[SyntaxNode, ...] = (*ancestors, node)
        stack.extend((child, child_ancestors) for child in reversed(node.children))

    return result


def _rule_failure(
    *,
    rule: Rule,
    node: SyntaxNode,
    parse_result: ParseResult,
    error: Exception,
) -> Diagnostic:
    line: int = node.span.start_line
    source_line: str | None = None
    if 1 <= line <= len(parse_result.source_lines):
        source_line = parse_result.source_lines[line - 1]
    return Diagnostic(
        file=parse_result.file,
        location=SourceLocation(line=line, column=node.span.start_column),
        code=rule.code,
        message=f"Internal error in rule {rule.code}: {type(error).__name__}: {error}",
        severity=Severity.ERROR,
        source_line=source_line,
        kind=DiagnosticKind.RULE_FAILURE,
    )
