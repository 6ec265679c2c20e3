# ruff: noqa: I001
"""CLI for the ``txn_anomaly`` package.

Command handlers (``cmd_score``, ``cmd_export_flagged``, ``cmd_summary``) are
plain callables returning an exit status; the Typer app wraps them. The root
callback loads a local ``.env`` with ``python-dotenv`` (for
``TXN_ANOMALY_LOG_LEVEL``) and configures logging once. Business logic lives in
``txn_anomaly.api`` and related modules.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import OptionInfo

from .config import ScoringConfig
from .errors import AnalysisError, NothingToExportError
from .export import DEFAULT_EXPORT_FILENAME
from .logging_setup import configure_logging
from .models import STATUS_ALL, ScoredTransaction


# ---- Small module-level helpers used by CLI commands -------------------------


def _load_config(config_path: str | None) -> ScoringConfig | None:
    if config_path is None:
        return None
    return ScoringConfig.from_json_file(config_path)


def _analyze_or_report(csv_path: str, config_path: str | None) -> list[ScoredTransaction] | None:
    """Run the pipeline; print a one-line error and return ``None`` on failure."""

    from .api import analyze_csv_file

    try:
        config = _load_config(config_path)
    except FileNotFoundError:
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        return None
    except (OSError, ValidationError) as e:
        print(f"Error: Invalid scoring config '{config_path}': {e}", file=sys.stderr)
        return None

    try:
        return analyze_csv_file(csv_path, config=config)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
    except PermissionError:
        print(f"Error: Permission denied: {csv_path}", file=sys.stderr)
    except UnicodeDecodeError as e:
        print(f"Error: '{csv_path}' is not UTF-8 text: {e}", file=sys.stderr)
    except AnalysisError as e:
        print(f"Error: Failed to analyze transactions. {e}", file=sys.stderr)
    return None


def format_result_line(record: ScoredTransaction) -> str:
    """``<transaction_id>\\t<status>\\t<score>\\t<reason>`` for one record."""

    tx = record.transaction
    return (
        f"{tx.transaction_id}\t{record.anomaly_status.value}\t"
        f"{record.anomaly_score:.2f}\t{record.reason}"
    )


# ---- Command handlers ----------------------------------------------------------


def cmd_score(
    csv_path: str,
    *,
    config_path: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    account: str = STATUS_ALL,
    category: str = STATUS_ALL,
    status: str = STATUS_ALL,
    search: str = "",
) -> int:
    """Score a CSV and print one line per (filtered) transaction to stdout.

    Lines are tab-separated: transaction id, status, score (2dp), reason.
    Errors go to stderr with a non-zero return value.
    """

    from .filters import TransactionFilters, apply_filters

    try:
        filters = TransactionFilters(
            start_date=start_date.date() if start_date else None,
            end_date=end_date.date() if end_date else None,
            account=account,
            category=category,
            status=status,
            search_term=search,
        )
    except ValidationError as e:
        print(f"Error: Invalid filters: {e}", file=sys.stderr)
        return 1

    results = _analyze_or_report(csv_path, config_path)
    if results is None:
        return 1

    for record in apply_filters(results, filters):
        print(format_result_line(record))
    return 0


def cmd_export_flagged(
    csv_path: str,
    *,
    output: str,
    config_path: str | None = None,
) -> int:
    """Write Suspicious/Anomalous transactions to ``output`` as CSV.

    An empty flagged subset is not an error: a notice is printed and no file
    is written.
    """

    from .export import write_flagged_csv

    results = _analyze_or_report(csv_path, config_path)
    if results is None:
        return 1

    try:
        written = write_flagged_csv(results, output)
    except NothingToExportError as e:
        print(str(e))
        return 0
    except OSError as e:
        print(f"Error: Failed to write '{output}': {e}", file=sys.stderr)
        return 1

    print(f"Exported {written} flagged transactions to {output}")
    return 0


def cmd_summary(csv_path: str, *, config_path: str | None = None, top_n: int = 5) -> int:
    """Print status counts, top flagged amounts, category rates and daily flagged counts."""

    from .coercion import format_number
    from .summary import summarize

    results = _analyze_or_report(csv_path, config_path)
    if results is None:
        return 1

    summary = summarize(results, top_n=top_n)
    print(f"Transactions: {summary.total} ({summary.flagged} flagged)")
    print()
    print("Status distribution:")
    for status, count in summary.status_counts.items():
        print(f"  {status.value}\t{count}")
    print()
    print("Top outliers by amount:")
    if not summary.top_outliers:
        print("  (none)")
    for outlier in summary.top_outliers:
        print(f"  {outlier.label}\t{format_number(outlier.amount)}")
    print()
    print("Category anomaly rates:")
    for rate in summary.category_rates:
        print(f"  {rate.category}\t{rate.rate:.1f}%\t({rate.anomalies}/{rate.total})")
    print()
    print("Flagged by date:")
    if not summary.anomaly_spikes:
        print("  (none)")
    for spike in summary.anomaly_spikes:
        print(f"  {spike.day}\t{spike.flagged}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Score a transactions CSV for anomalies (outlier amounts, rare vendors, "
        "weekend activity, duplicates). Loads a local .env before running."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a CSV with transaction_id, date, amount, category, account, vendor",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
    readable=True,
)
CONFIG_OPTION: OptionInfo = typer.Option(
    "--config",
    help="JSON file overriding scoring weights and thresholds.",
    dir_okay=False,
)
DATE_FORMATS = ["%Y-%m-%d"]


@app.command("score")
def score_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    config: Annotated[Path | None, CONFIG_OPTION] = None,
    *,
    start_date: datetime | None = typer.Option(
        None, formats=DATE_FORMATS, help="Keep transactions on or after this date."
    ),
    end_date: datetime | None = typer.Option(
        None, formats=DATE_FORMATS, help="Keep transactions on or before this date."
    ),
    account: str = typer.Option(STATUS_ALL, help="Exact account to keep (or 'All')."),
    category: str = typer.Option(STATUS_ALL, help="Exact category to keep (or 'All')."),
    status: str = typer.Option(
        STATUS_ALL, help="Normal, Suspicious, Anomalous, or All."
    ),
    search: str = typer.Option("", help="Case-insensitive vendor / transaction id search."),
) -> None:
    """Score a CSV and print ``id, status, score, reason`` per transaction."""

    code = cmd_score(
        str(csv_path),
        config_path=str(config) if config else None,
        start_date=start_date,
        end_date=end_date,
        account=account,
        category=category,
        status=status,
        search=search,
    )
    raise typer.Exit(code)


@app.command("export-flagged")
def export_flagged_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    config: Annotated[Path | None, CONFIG_OPTION] = None,
    *,
    output: Path = typer.Option(
        Path(DEFAULT_EXPORT_FILENAME), help="Destination CSV for flagged rows."
    ),
) -> None:
    """Export Suspicious and Anomalous transactions to a CSV file."""

    code = cmd_export_flagged(
        str(csv_path),
        output=str(output),
        config_path=str(config) if config else None,
    )
    raise typer.Exit(code)


@app.command("summary")
def summary_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    config: Annotated[Path | None, CONFIG_OPTION] = None,
    *,
    top: int = typer.Option(5, min=1, help="How many top outliers to list."),
) -> None:
    """Print status counts, top outliers, category rates and flagged counts per day."""

    code = cmd_summary(
        str(csv_path),
        config_path=str(config) if config else None,
        top_n=top,
    )
    raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    *,
    log_level: str | None = typer.Option(
        None, help="Log level (falls back to TXN_ANOMALY_LOG_LEVEL, then INFO)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    # Running as a module: `python -m txn_anomaly.cli`
    app()
