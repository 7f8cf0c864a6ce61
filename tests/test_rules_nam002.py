"""Tests for NAM002: Constants must not use a Hungarian 'k' prefix."""
from __future__ import annotations

from pathlib import Path

from swiftguard.diagnostics import Diagnostic
from swiftguard.parser import ParseResult, parse_source
from swiftguard.rules.nam002 import RULE
from swiftguard.rules.registry import RuleRegistry
from swiftguard.types import SwiftGuardConfig
from swiftguard.walker import run

CONFIG: SwiftGuardConfig = SwiftGuardConfig()


def _check(code: str) -> list[Diagnostic]:
    parse_result: ParseResult = parse_source(code, file=Path("test.swift"))
    assert parse_result.syntax_error is None
    registry: RuleRegistry = RuleRegistry()
    registry.register(RULE)
    return list(run(parse_result=parse_result, registry=registry, config=CONFIG).diagnostics)


class TestNAM002:
    def test_k_prefixed_constant(self) -> None:
        diags: list[Diagnostic] = _check("let kMaxRetries = 3\n")
        assert len(diags) == 1
        assert diags[0].message == "Constant 'kMaxRetries' uses a 'k' prefix; name it 'maxRetries'"
        assert (diags[0].location.line, diags[0].location.column) == (1, 5)

    def test_static_member_constant(self) -> None:
        diags: list[Diagnostic] = _check(
            "enum Defaults {\n    static let kTimeout: Double = 30\n}\n"
        )
        assert len(diags) == 1
        assert diags[0].location.line == 2
        assert diags[0].location.column == 16

    def test_words_starting_with_k(self) -> None:
        assert _check("let kind = 1\nlet key = 2\nlet k = 3\n") == []

    def test_var_not_checked(self) -> None:
        assert _check("var kCounter = 0\n") == []
