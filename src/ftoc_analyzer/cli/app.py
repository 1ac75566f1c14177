"""Main Typer application for FTOC Analyzer."""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ftoc_analyzer import __version__
from ftoc_analyzer.cli.console import (
    console,
    err_console,
    print_error,
    print_success,
    print_warning,
    severity_style,
)
from ftoc_analyzer.core.models import AnalysisConfig, AnalysisReport, Tag, TagConcordance
from ftoc_analyzer.core.models.enums import ReportFormat, Severity
from ftoc_analyzer.core.services import (
    ParallelRunner,
    build_concordance,
    filter_features,
    parse_tag_list,
    run_analysis,
)
from ftoc_analyzer.infrastructure.config_loader import load_config
from ftoc_analyzer.infrastructure.parsers import parse_features
from ftoc_analyzer.infrastructure.reports import concordance_from_dict, format_report
from ftoc_analyzer.shared.exceptions import ConfigurationError, FtocAnalyzerError, InvalidTagError

logger = logging.getLogger(__name__)

FAIL_ON_NONE = "none"

app = typer.Typer(
    name="ftoc-analyzer",
    help="Tag concordance, tag quality and anti-pattern analysis for Gherkin features",
    add_completion=True,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"FTOC Analyzer v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show the version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log debug details to stderr"),
    ] = False,
) -> None:
    """FTOC Analyzer - tag and scenario quality checks for feature files."""
    configure_logging(verbose)


# ========================
# HELPERS
# ========================


def parse_fail_on(value: str) -> Optional[Severity]:
    """Severity threshold for a failing exit code; None for "none"."""
    if value.strip().lower() == FAIL_ON_NONE:
        return None
    try:
        return Severity.parse(value)
    except ConfigurationError as e:
        raise typer.BadParameter(f"{e} (or '{FAIL_ON_NONE}')", param_hint="--fail-on") from None


def parse_tags(value: Optional[str], option: str) -> list[Tag]:
    """Comma-separated tag list of a filter option."""
    try:
        return parse_tag_list(value)
    except InvalidTagError as e:
        raise typer.BadParameter(str(e), param_hint=option) from None


def load_previous(path: Path, config: AnalysisConfig) -> TagConcordance:
    """Concordance saved by ``concordance --format json`` or ``analyze --format json``."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read previous concordance {path}: {e}") from e
    return concordance_from_dict(data, config.vocabulary)


def write_or_print(rendered: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(rendered, nl=False)
        return
    try:
        output.write_text(rendered, encoding="utf-8")
    except OSError as e:
        raise FtocAnalyzerError(f"Could not write {output}: {e}") from e
    print_success(f"Report written to {output}")


def print_summary(report: AnalysisReport) -> None:
    """Rich summary of an analysis, for interactive terminals."""
    console.print()
    console.print(
        Panel.fit(
            f"[header]Features:[/header] {report.feature_count}\n"
            f"[header]Scenarios:[/header] {report.scenario_count}\n"
            f"[header]Unique tags:[/header] {report.concordance.unique_tag_count}\n"
            f"[header]Warnings:[/header] {report.total_warnings}",
            title="FTOC Analysis",
            border_style="blue",
        )
    )
    if not report.warnings:
        return

    severities = {w.type: w.severity for w in report.warnings}
    table = Table(show_header=True, header_style="bold")
    table.add_column("Warning")
    table.add_column("Severity", justify="center")
    table.add_column("Count", justify="right")
    for kind, count in report.count_by_type().items():
        severity = severities[kind]
        table.add_row(
            kind.description,
            f"[{severity_style(severity)}]{severity.value.upper()}[/{severity_style(severity)}]",
            str(count),
        )
    console.print(table)


def _load_features(
    path: Path,
    config_file: Optional[Path],
    include: list[Tag],
    exclude: list[Tag],
):
    config = load_config(config_file)
    features = parse_features(path)
    if not features:
        print_warning(f"No feature files found in {path}")
    elif include or exclude:
        features = filter_features(features, include, exclude)
        if not features:
            print_warning("No scenarios match the tag filters")
    return config, features


# ========================
# COMMANDS
# ========================


@app.command()
def analyze(
    path: Annotated[
        Path,
        typer.Argument(help="Feature file or directory of feature files", exists=True),
    ],
    report_format: Annotated[
        ReportFormat,
        typer.Option("--format", "-f", help="Report format"),
    ] = ReportFormat.PLAIN_TEXT,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Warning configuration YAML file"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the report to a file instead of stdout"),
    ] = None,
    fail_on: Annotated[
        str,
        typer.Option("--fail-on", help="Exit with 1 on warnings of this severity or worse: error, warning, info, none"),
    ] = "error",
    previous: Annotated[
        Optional[Path],
        typer.Option("--previous", help="JSON concordance of an earlier run, for tag trends"),
    ] = None,
    jobs: Annotated[
        Optional[int],
        typer.Option("--jobs", "-j", min=1, help="Worker threads for large feature sets"),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", min=0.001, help="Give up after this many seconds"),
    ] = None,
    tags: Annotated[
        Optional[str],
        typer.Option("--tags", help="Only scenarios with any of these comma-separated tags"),
    ] = None,
    exclude_tags: Annotated[
        Optional[str],
        typer.Option("--exclude-tags", help="Skip scenarios with any of these comma-separated tags"),
    ] = None,
) -> None:
    """Run tag quality and anti-pattern checks and print the report."""
    threshold = parse_fail_on(fail_on)
    include = parse_tags(tags, "--tags")
    exclude = parse_tags(exclude_tags, "--exclude-tags")
    try:
        config, features = _load_features(path, config_file, include, exclude)
        prior = load_previous(previous, config) if previous is not None else None
        runner = ParallelRunner(
            max_workers=jobs,
            parallel_threshold=config.thresholds.parallel_threshold,
            timeout=timeout,
        )
        report = run_analysis(features, config, previous=prior, runner=runner)
        rendered = format_report(report, report_format, config)
        write_or_print(rendered, output)

    except FtocAnalyzerError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(1)

    if output is None and report_format is ReportFormat.PLAIN_TEXT and console.is_terminal:
        print_summary(report)

    if threshold is not None and report.has_issues_at_or_above(threshold):
        raise typer.Exit(1)


@app.command()
def concordance(
    path: Annotated[
        Path,
        typer.Argument(help="Feature file or directory of feature files", exists=True),
    ],
    report_format: Annotated[
        ReportFormat,
        typer.Option("--format", "-f", help="Report format"),
    ] = ReportFormat.PLAIN_TEXT,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Warning configuration YAML file"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the report to a file instead of stdout"),
    ] = None,
    tags: Annotated[
        Optional[str],
        typer.Option("--tags", help="Only scenarios with any of these comma-separated tags"),
    ] = None,
    exclude_tags: Annotated[
        Optional[str],
        typer.Option("--exclude-tags", help="Skip scenarios with any of these comma-separated tags"),
    ] = None,
) -> None:
    """Print tag counts, categories, co-occurrences and similar tags."""
    include = parse_tags(tags, "--tags")
    exclude = parse_tags(exclude_tags, "--exclude-tags")
    try:
        config, features = _load_features(path, config_file, include, exclude)
        tag_concordance = build_concordance(features, config)
        write_or_print(format_report(tag_concordance, report_format, config), output)

    except FtocAnalyzerError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
