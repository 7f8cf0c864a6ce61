"""Tests for the MUT001 and FMT001 autofixers and the fix pipeline."""
from __future__ import annotations

from types import MappingProxyType

from swiftguard.constants import DEFAULT_SEVERITIES, Severity
from swiftguard.fixers._util import TextEdit, apply_edits
from swiftguard.fixers.fmt001 import fix_colon_spacing
from swiftguard.fixers.mut001 import fix_prefer_let
from swiftguard.fixers.pipeline import fix_all
from swiftguard.types import RuleConfig, SwiftGuardConfig

CONFIG: SwiftGuardConfig = SwiftGuardConfig()


def _config_without(*codes: str) -> SwiftGuardConfig:
    severities: dict[str, Severity] = dict(DEFAULT_SEVERITIES)
    for code in codes:
        severities[code] = Severity.OFF
    return SwiftGuardConfig(rules=RuleConfig(severities=MappingProxyType(severities)))


class TestApplyEdits:
    def test_edits_applied_right_to_left(self) -> None:
        edits: list[TextEdit] = [
            TextEdit(start_line=1, start_column=5, end_line=1, end_column=6, replacement="b"),
            TextEdit(start_line=1, start_column=9, end_line=1, end_column=10, replacement="22"),
        ]
        assert apply_edits("let a = 1\n", edits) == "let b = 22\n"

    def test_no_edits_returns_source(self) -> None:
        assert apply_edits("let a = 1\n", []) == "let a = 1\n"

    def test_unparseable_result_discarded(self) -> None:
        edit: TextEdit = TextEdit(
            start_line=1, start_column=1, end_line=1, end_column=4, replacement="struct S {",
        )
        assert apply_edits("let a = 1\n", [edit]) == "let a = 1\n"


class TestFixPreferLet:
    def test_unmutated_local_becomes_let(self) -> None:
        source: str = (
            "public func total() -> Int {\n"
            "    var sum = 0\n"
            "    return sum\n"
            "}\n"
        )
        assert fix_prefer_let(source, config=CONFIG) == source.replace("var sum", "let sum")

    def test_mutated_local_unchanged(self) -> None:
        source: str = (
            "public func total() -> Int {\n"
            "    var sum = 0\n"
            "    sum += 1\n"
            "    return sum\n"
            "}\n"
        )
        assert fix_prefer_let(source, config=CONFIG) == source

    def test_ignore_pragma_respected(self) -> None:
        source: str = (
            "public func total() -> Int {\n"
            "    var sum = 0 // swiftguard: ignore[MUT001] because: mutated under DEBUG\n"
            "    return sum\n"
            "}\n"
        )
        assert fix_prefer_let(source, config=CONFIG) == source

    def test_if_var_binding_becomes_let(self) -> None:
        source: str = (
            "public func show(name: String?) {\n"
            "    if var name = name {\n"
            "        print(name)\n"
            "    }\n"
            "}\n"
        )
        assert fix_prefer_let(source, config=CONFIG) == source.replace("if var", "if let")

    def test_syntax_error_returns_source(self) -> None:
        source: str = "func broken( {\n    var x = 1\n"
        assert fix_prefer_let(source, config=CONFIG) == source


class TestFixColonSpacing:
    def test_space_before_colon_removed(self) -> None:
        assert fix_colon_spacing("let count : Int = 0\n", config=CONFIG) == (
            "let count: Int = 0\n"
        )

    def test_missing_space_after_colon_added(self) -> None:
        source: str = "public func greet(name:String) {}\n"
        assert fix_colon_spacing(source, config=CONFIG) == (
            "public func greet(name: String) {}\n"
        )

    def test_extra_spaces_collapsed(self) -> None:
        assert fix_colon_spacing("let count:   Int = 0\n", config=CONFIG) == (
            "let count: Int = 0\n"
        )

    def test_well_formed_source_unchanged(self) -> None:
        source: str = "let lookup: [String: Int] = [:]\n"
        assert fix_colon_spacing(source, config=CONFIG) == source


class TestFixAll:
    def test_both_fixers_chained(self) -> None:
        source: str = "var total : Int = 0\nprint(total)\n"
        assert fix_all(source, config=CONFIG) == "let total: Int = 0\nprint(total)\n"

    def test_disabled_rule_not_fixed(self) -> None:
        source: str = "var total : Int = 0\nprint(total)\n"
        config: SwiftGuardConfig = _config_without("MUT001")
        assert fix_all(source, config=config) == "var total: Int = 0\nprint(total)\n"

    def test_all_disabled_is_identity(self) -> None:
        source: str = "var total : Int = 0\nprint(total)\n"
        config: SwiftGuardConfig = _config_without("MUT001", "FMT001")
        assert fix_all(source, config=config) == source

    def test_idempotent(self) -> None:
        source: str = "var total : Int = 0\nprint(total)\n"
        once: str = fix_all(source, config=CONFIG)
        assert fix_all(once, config=CONFIG) == once
