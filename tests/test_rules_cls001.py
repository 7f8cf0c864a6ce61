"""Tests for CLS001: Classes should be final unless designed for subclassing."""
from __future__ import annotations

from pathlib import Path

from swiftguard.diagnostics import Diagnostic
from swiftguard.parser import ParseResult, parse_source
from swiftguard.rules.cls001 import RULE
from swiftguard.rules.registry import RuleRegistry
from swiftguard.types import CLS001Options, RuleConfig, SwiftGuardConfig
from swiftguard.walker import run

CONFIG: SwiftGuardConfig = SwiftGuardConfig()


def _check(code: str, *, config: SwiftGuardConfig = CONFIG) -> list[Diagnostic]:
    parse_result: ParseResult = parse_source(code, file=Path("test.swift"))
    assert parse_result.syntax_error is None
    registry: RuleRegistry = RuleRegistry()
    registry.register(RULE)
    return list(run(parse_result=parse_result, registry=registry, config=config).diagnostics)


class TestCLS001Detection:
    def test_plain_class(self) -> None:
        diags: list[Diagnostic] = _check("class ImageCache {}\n")
        assert len(diags) == 1
        assert diags[0].message == (
            "Class 'ImageCache' is not final; mark it final or justify subclassing"
        )
        assert (diags[0].location.line, diags[0].location.column) == (1, 7)

    def test_public_class(self) -> None:
        assert len(_check("public class Service: NSObject {}\n")) == 1

    def test_nested_class(self) -> None:
        diags: list[Diagnostic] = _check("enum Namespace {\n    class Helper {}\n}\n")
        assert len(diags) == 1
        assert diags[0].location.line == 2

    def test_unrelated_comment_does_not_justify(self) -> None:
        assert len(_check("// Caches decoded images.\nclass ImageCache {}\n")) == 1


class TestCLS001Exemptions:
    def test_final_class(self) -> None:
        assert _check("final class ImageCache {}\n") == []

    def test_open_class(self) -> None:
        assert _check("open class BaseView {}\n") == []

    def test_subclassed_in_same_file(self) -> None:
        source: str = "class Base {}\nfinal class Child: Base {}\n"
        assert _check(source) == []

    def test_subclassed_with_qualified_name(self) -> None:
        source: str = "class Base {}\nfinal class Child: Module.Base, Codable {}\n"
        assert _check(source) == []

    def test_justification_comment_above(self) -> None:
        source: str = "// nonfinal: mocked in tests\nclass Service {}\n"
        assert _check(source) == []

    def test_justification_in_comment_block(self) -> None:
        source: str = (
            "// nonfinal: extended by the plugin target\n"
            "// Keeps shared state.\n"
            "class Registry {}\n"
        )
        assert _check(source) == []

    def test_justification_on_same_line(self) -> None:
        assert _check("class Service {} // nonfinal: mocked\n") == []

    def test_justification_separated_by_blank_line(self) -> None:
        source: str = "// nonfinal: too far away\n\nclass Service {}\n"
        assert len(_check(source)) == 1

    def test_custom_marker(self) -> None:
        config: SwiftGuardConfig = SwiftGuardConfig(
            rules=RuleConfig(cls001=CLS001Options(justification_marker="subclass-ok")),
        )
        assert _check("// subclass-ok\nclass Service {}\n", config=config) == []
        assert len(_check("// nonfinal: x\nclass Service {}\n", config=config)) == 1

    def test_structs_and_protocols_ignored(self) -> None:
        assert _check("struct Value {}\nprotocol Shape {}\nenum Kind {}\n") == []

    def test_class_members_are_not_classes(self) -> None:
        assert _check("final class Box {\n    class func make() {}\n    class var size: Int { 1 }\n}\n") == []
