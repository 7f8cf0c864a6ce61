"""Command-line interface for SwiftGuard using Click."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, NoReturn

import click

from swiftguard.config import load_config
from swiftguard.constants import (
    DEFAULT_SEVERITIES,
    EXIT_INTERNAL,
    EXIT_VIOLATIONS,
    RULE_NAMES,
    OutputFormat,
    __version__,
    resolve_rule_id,
)
from swiftguard.explain import RULE_CATALOG, format_rule_detail, format_rule_table
from swiftguard.formatters import pluralize
from swiftguard.runner import FixResult, LintResult, fix_paths, format_diff, format_results, lint_paths
from swiftguard.types import ConfigError, SwiftGuardConfig

logger: logging.Logger = logging.getLogger(__name__)


def config_as_dict(config: SwiftGuardConfig) -> dict[str, Any]:
    """JSON-ready view of the resolved configuration."""
    return {
        "config_path": str(config.config_path) if config.config_path else None,
        "include": list(config.include),
        "exclude": list(config.exclude),
        "output_format": config.output_format.value,
        "show_source": config.show_source,
        "warnings_as_errors": config.warnings_as_errors,
        "jobs": config.jobs,
        "rules": {
            "severities": {
                code: sev.value for code, sev in sorted(config.rules.severities.items())
            },
            "ACC001": {"exempt_extensions": config.rules.acc001.exempt_extensions},
            "SWT001": {"marker": config.rules.swt001.marker},
            "CLS001": {"justification_marker": config.rules.cls001.justification_marker},
        },
        "ignores": {
            "require_reason": config.ignores.require_reason,
            "disallow": sorted(config.ignores.disallow),
            "max_per_file": config.ignores.max_per_file,
        },
    }


def format_config_json(*, config: SwiftGuardConfig) -> str:
    return json.dumps(config_as_dict(config), indent=2)


def format_config_text(*, config: SwiftGuardConfig) -> str:
    """Format configuration as human-readable text."""
    data: dict[str, Any] = config_as_dict(config)
    rules: dict[str, Any] = data["rules"]
    ignores: dict[str, Any] = data["ignores"]

    lines: list[str] = [
        "SwiftGuard Configuration",
        "=" * 40,
        "",
        f"Config file: {data['config_path'] or '(defaults)'}",
        "",
        "File Discovery:",
        f"  Include: {', '.join(data['include'])}",
        f"  Exclude: {', '.join(data['exclude'])}",
        "",
        "Run:",
        f"  Format: {data['output_format']}",
        f"  Show source: {data['show_source']}",
        f"  Warnings as errors: {data['warnings_as_errors']}",
        f"  Jobs: {data['jobs']}",
        "",
        "Rule Severities:",
    ]
    for code, severity in rules["severities"].items():
        lines.append(f"  {code}: {severity.upper():<8} {RULE_NAMES.get(code, '')}".rstrip())

    lines.extend(["", "Rule Options:"])
    for code in ("ACC001", "SWT001", "CLS001"):
        for option, value in rules[code].items():
            lines.append(f"  {code}.{option}: {value!r}")

    max_per_file: Any = ignores["max_per_file"]
    lines.extend([
        "",
        "Ignore Governance:",
        f"  Require reason: {ignores['require_reason']}",
        f"  Disallow: {', '.join(ignores['disallow']) or '(none)'}",
        f"  Max per file: {'unlimited' if max_per_file is None else max_per_file}",
    ])
    return "\n".join(lines)


def _fail(ctx: click.Context, error: ConfigError) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    if error.path:
        click.echo(f"  in: {error.path}", err=True)
    ctx.exit(EXIT_INTERNAL)


@click.group()
@click.version_option(version=__version__, prog_name="swiftguard")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to .swiftguard.toml (default: search upward from current directory)",
)
@click.option("--verbose", is_flag=True, help="Show progress and timing")
@click.option("--debug", is_flag=True, help="Show detailed trace")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """SwiftGuard - A style-guide linter for Swift source files."""
    level: int = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(path=config_path)
    except ConfigError as e:
        _fail(ctx, e)


@cli.command()
@click.option("--validate", is_flag=True, help="Only validate configuration, don't print")
@click.option("--json", "as_json", is_flag=True, help="Output configuration as JSON")
@click.pass_context
def config(ctx: click.Context, *, validate: bool, as_json: bool) -> None:
    """Show or validate configuration."""
    cfg: SwiftGuardConfig = ctx.obj["config"]

    if validate:
        click.echo(f"Configuration valid: {cfg.config_path or '(defaults)'}")
    elif as_json:
        click.echo(format_config_json(config=cfg))
    else:
        click.echo(format_config_text(config=cfg))


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=None,
    help="Output format (overrides config)",
)
@click.option("--show-source/--no-show-source", default=None, help="Show source code snippets")
@click.option(
    "--disable",
    "disabled",
    multiple=True,
    metavar="RULE",
    help="Disable a rule by code or name (repeatable)",
)
@click.option("--warnings-as-errors", is_flag=True, help="Report every warning as an error")
@click.option(
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Number of files to check in parallel (overrides config)",
)
@click.pass_context
def lint(
    ctx: click.Context,
    paths: tuple[Path, ...],
    *,
    output_format: str | None,
    show_source: bool | None,
    disabled: tuple[str, ...],
    warnings_as_errors: bool,
    jobs: int | None,
) -> None:
    """Run linting on Swift files."""
    cfg: SwiftGuardConfig = ctx.obj["config"]

    overrides: dict[str, Any] = {
        "output_format": OutputFormat(output_format) if output_format else None,
        "show_source": show_source,
        "warnings_as_errors": True if warnings_as_errors else None,
        "jobs": jobs,
    }
    cfg = replace(cfg, **{k: v for k, v in overrides.items() if v is not None})
    try:
        cfg = cfg.without_rules(disabled)
    except ConfigError as e:
        _fail(ctx, e)

    result: LintResult = lint_paths(paths=paths or (Path("."),), config=cfg)
    output: str = format_results(result=result, config=cfg)
    if output:
        click.echo(output)
    ctx.exit(result.exit_code)


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--diff", "show_diff", is_flag=True, help="Print unified diff, don't write files")
@click.option("--check", "check_only", is_flag=True, help="Exit 1 if any file would change")
@click.pass_context
def fix(
    ctx: click.Context,
    paths: tuple[Path, ...],
    *,
    show_diff: bool,
    check_only: bool,
) -> None:
    """Apply safe autofixes (prefer-let, colon-spacing) to Swift files."""
    cfg: SwiftGuardConfig = ctx.obj["config"]

    result: FixResult = fix_paths(paths=paths or (Path("."),), config=cfg)
    changed: str = pluralize(result.files_changed, "file")

    if show_diff:
        for path, (old, new) in sorted(result.changes.items()):
            click.echo(format_diff(path=path, old=old, new=new), nl=False)
        click.echo(f"{changed} would be changed.")
        return

    if check_only:
        if result.changes:
            click.echo(f"{changed} would be changed.")
            ctx.exit(EXIT_VIOLATIONS)
        click.echo("No changes needed.")
        return

    for path, (_, new) in sorted(result.changes.items()):
        logger.debug("Writing %s", path)
        path.write_text(new, encoding="utf-8")
    click.echo(f"Fixed {changed}.")


@cli.command()
@click.argument("rule_id", required=False, default=None)
@click.option("--all", "show_all", is_flag=True, help="List all rules with summaries")
@click.pass_context
def explain(ctx: click.Context, rule_id: str | None, *, show_all: bool) -> None:
    """Show rule documentation and examples.

    RULE_ID is a rule code (UNW001) or name (no-force-unwrap).
    """
    cfg: SwiftGuardConfig = ctx.obj["config"]

    if show_all:
        click.echo(format_rule_table(catalog=RULE_CATALOG, config=cfg))
        return

    if rule_id is None:
        click.echo("Usage: swiftguard explain <RULE> or swiftguard explain --all")
        ctx.exit(1)

    code: str | None = resolve_rule_id(rule_id)
    if code is None or code not in RULE_CATALOG:
        click.echo(f"Error: Unknown rule '{rule_id}'.", err=True)
        ctx.exit(1)

    click.echo(format_rule_detail(
        info=RULE_CATALOG[code],
        severity=cfg.get_severity(code),
        default_severity=DEFAULT_SEVERITIES[code],
    ))


def main() -> None:
    """Main entry point for swiftguard CLI."""
    cli()


if __name__ == "__main__":
    main()
