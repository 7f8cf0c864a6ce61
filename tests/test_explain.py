"""Tests for the swiftguard explain command."""
from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from swiftguard.cli import cli
from swiftguard.constants import RULE_CODES, RULE_NAMES, Severity
from swiftguard.explain import RULE_CATALOG, format_rule_detail, format_rule_table
from swiftguard.types import SwiftGuardConfig


class TestExplainSingleRule:
    """Test explain for a single rule."""

    def test_explain_unw001(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain", "UNW001"])

        assert result.exit_code == 0
        assert "UNW001: no-force-unwrap" in result.output
        assert "Category: safety" in result.output
        assert "Severity: warning |" in result.output
        assert "Autofix: No" in result.output
        assert "Bad:" in result.output
        assert "Good:" in result.output
        assert "Suppress: // swiftguard: ignore[UNW001] because: <reason>" in result.output

    def test_explain_fmt001_shows_fix(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain", "FMT001"])

        assert result.exit_code == 0
        assert "Autofix: Yes" in result.output
        assert "Fix:" in result.output

    def test_explain_cls001_shows_config(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain", "CLS001"])

        assert result.exit_code == 0
        assert "Config:" in result.output
        assert "justification_marker" in result.output

    def test_explain_by_name(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain", "prefer-let"])

        assert result.exit_code == 0
        assert "MUT001: prefer-let" in result.output

    def test_explain_lowercase_code(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain", "acc001"])

        assert result.exit_code == 0
        assert "ACC001" in result.output
        assert "Severity: error |" in result.output

    def test_explain_unknown_code_exits_1(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain", "FAKE999"])

        assert result.exit_code == 1
        assert "Unknown rule 'FAKE999'" in result.output


class TestExplainAll:
    """Test explain --all listing."""

    def test_all_lists_all_rules(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain", "--all"])

        assert result.exit_code == 0
        for code in RULE_CODES:
            assert code in result.output

    def test_all_shows_table_header(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain", "--all"])

        assert result.exit_code == 0
        assert "CODE" in result.output
        assert "SEVERITY" in result.output
        assert "NAME" in result.output
        assert "FIX" in result.output

    def test_all_reflects_configured_severity(self, swiftguard_toml: Path) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["--config", str(swiftguard_toml), "explain", "--all"])

        assert result.exit_code == 0
        mut001_row: str = next(
            line for line in result.output.splitlines() if line.startswith("MUT001")
        )
        assert " off " in mut001_row


class TestExplainNoArgs:
    """Test explain with no arguments."""

    def test_no_args_shows_usage(self) -> None:
        runner: CliRunner = CliRunner()
        result = runner.invoke(cli, ["explain"])

        assert result.exit_code == 1
        assert "Usage:" in result.output


class TestFormatting:
    def test_detail_multiline_examples_indented(self) -> None:
        detail: str = format_rule_detail(
            info=RULE_CATALOG["MUT001"],
            severity=Severity.WARNING,
            default_severity=Severity.WARNING,
        )
        lines: list[str] = detail.splitlines()
        bad_index: int = next(i for i, line in enumerate(lines) if line.startswith("  Bad:"))
        assert lines[bad_index] == "  Bad:   var total = 0"
        assert lines[bad_index + 1] == "         print(total)"

    def test_table_rows_sorted_by_code(self) -> None:
        table: str = format_rule_table(catalog=RULE_CATALOG, config=SwiftGuardConfig())
        rows: list[list[str]] = [line.split() for line in table.splitlines()[2:]]
        assert [row[0] for row in rows] == sorted(RULE_CODES)
        assert {row[0]: row[1] for row in rows}["ACC001"] == "error"
        assert {row[0]: row[-1] for row in rows}["MUT001"] == "Yes"

    def test_detail_shows_overridden_severity(self) -> None:
        detail: str = format_rule_detail(
            info=RULE_CATALOG["UNW001"],
            severity=Severity.ERROR,
            default_severity=Severity.WARNING,
        )
        assert "Severity: error (default: warning)" in detail


class TestRuleCatalogCoverage:
    """Test that the catalog covers all defined rule codes."""

    def test_catalog_covers_all_rule_codes(self) -> None:
        assert set(RULE_CATALOG.keys()) == RULE_CODES

    def test_catalog_names_match_rule_names(self) -> None:
        for code, info in RULE_CATALOG.items():
            assert info.code == code
            assert info.name == RULE_NAMES[code]

    def test_all_catalog_entries_have_examples(self) -> None:
        for code, info in RULE_CATALOG.items():
            assert info.bad_example, f"{code} missing bad_example"
            assert info.good_example, f"{code} missing good_example"

    def test_autofix_entries_describe_fix(self) -> None:
        fixable: set[str] = {code for code, info in RULE_CATALOG.items() if info.has_autofix}
        assert fixable == {"MUT001", "FMT001"}
        for code in fixable:
            assert RULE_CATALOG[code].fix
