"""CLI command implementations for the order invalidator."""

from __future__ import annotations

import json
import signal
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from pydantic import ValidationError

from order_invalidator.core.identifiers import parse_identifier_csv_arg, parse_identifier_text
from order_invalidator.core.partition import partition_identifiers
from order_invalidator.exceptions import ConfigurationError, InputError
from order_invalidator.models.config import Config
from order_invalidator.models.session import SessionState
from order_invalidator.utils.logger import configure_logging

if TYPE_CHECKING:
    from collections.abc import Iterator

    from order_invalidator.models.progress_update import ProgressUpdate
    from order_invalidator.services.invalidation_runner import InvalidationRunner


def _get_config() -> Config:
    """Load configuration from environment and .env file."""
    try:
        return Config()
    except ValidationError as exc:
        msg = f"Invalid configuration: {exc}"
        raise click.UsageError(msg) from exc


def _print_summary(title: str, stats: dict[str, Any]) -> None:
    """Print a formatted summary of run results."""
    click.echo(f"\n{title}")
    for key, value in stats.items():
        if key == "failed_identifiers" and isinstance(value, list):
            if value:
                click.echo(f"  Failed order IDs ({len(value)}):")
                for order_id in value[:10]:
                    click.echo(f"    - {order_id}")
                if len(value) > 10:
                    click.echo(f"    ... and {len(value) - 10} more")
        elif value is not None:
            click.echo(f"  {key}: {value}")


def _collect_identifiers(file_path: Path | None, ids: str | None) -> list[str]:
    """Gather order IDs from --file, --ids, or piped stdin, in that order."""
    if file_path is not None:
        from order_invalidator.services.identifier_loader import load_identifiers

        return load_identifiers(file_path)
    if ids:
        return parse_identifier_csv_arg(ids)
    stdin = click.get_text_stream("stdin")
    if not stdin.isatty():
        return parse_identifier_text(stdin.read())
    return []


@contextmanager
def _cancel_on_interrupt(runner: InvalidationRunner) -> Iterator[None]:
    """First Ctrl-C requests cooperative cancellation, the second one aborts."""

    def _handler(signum: int, frame: Any) -> None:
        if runner.session is not None and runner.session.cancel_requested:
            signal.signal(signal.SIGINT, signal.default_int_handler)
            raise KeyboardInterrupt
        click.echo("\n--- CANCELLATION REQUESTED (finishing current batch) ---", err=True)
        runner.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


@click.command()
@click.option(
    "--file",
    "file_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="CSV (first column, header skipped) or text file with one order ID per line",
)
@click.option("--ids", default=None, type=str, help="Comma-separated order IDs")
@click.option("--app-key", default=None, type=str, help="App key (falls back to APP_KEY)")
@click.option(
    "--secret-key", default=None, type=str, help="Secret key (falls back to SECRET_KEY)"
)
@click.option("--batch-size", default=None, type=int, help="Orders per DELETE request")
@click.option("--pacing-delay", default=None, type=float, help="Seconds to wait between batches")
@click.option("--timeout", default=None, type=float, help="Per-request timeout in seconds")
@click.option("--dry-run", is_flag=True, help="Show the batch plan without calling the API")
@click.option(
    "--output-format",
    default="summary",
    type=click.Choice(["summary", "json"]),
    help="Output format",
)
def invalidate(
    file_path: Path | None,
    ids: str | None,
    app_key: str | None,
    secret_key: str | None,
    batch_size: int | None,
    pacing_delay: float | None,
    timeout: float | None,
    dry_run: bool,
    output_format: str,
) -> None:
    """Generate a token and invalidate order IDs in paced batches."""
    config = _get_config()
    configure_logging(config.log_level)

    identifiers = _collect_identifiers(file_path, ids)
    if not identifiers:
        msg = "Please provide at least one order ID (--file, --ids or stdin)."
        raise click.UsageError(msg)

    batch_size = batch_size if batch_size is not None else config.batch_size
    pacing_delay = pacing_delay if pacing_delay is not None else config.pacing_delay_seconds
    timeout = timeout if timeout is not None else config.request_timeout_seconds
    if timeout is not None and timeout <= 0:
        msg = "--timeout must be positive"
        raise click.UsageError(msg)

    if dry_run:
        try:
            partition = partition_identifiers(identifiers, batch_size)
        except ConfigurationError as exc:
            raise click.UsageError(str(exc)) from exc
        plan = {"orders": partition.total, "batches": len(partition), "batch_sizes": partition.sizes()}
        if output_format == "json":
            click.echo(json.dumps(plan, indent=2))
        else:
            _print_summary("[DRY RUN] Batch plan (no requests sent)", plan)
        return

    app_key = app_key or config.app_key or click.prompt("App key")
    secret_key = secret_key or config.secret_key or click.prompt("Secret key", hide_input=True)

    from order_invalidator.services.credential_client import CredentialClient
    from order_invalidator.services.invalidation_client import InvalidationClient
    from order_invalidator.services.invalidation_runner import InvalidationRunner

    def _echo_progress(update: ProgressUpdate) -> None:
        if output_format == "summary":
            click.echo(update.render())

    try:
        runner = InvalidationRunner(
            CredentialClient(config.api_base_url, timeout=timeout),
            InvalidationClient(
                config.api_base_url,
                timeout=timeout,
                max_attempts=config.batch_retry_attempts,
            ),
            batch_size=batch_size,
            pacing_delay_seconds=pacing_delay,
            progress_sink=_echo_progress,
        )
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    if output_format == "summary":
        click.echo(f"[INFO] Starting invalidation for {len(identifiers)} orders in batches of {batch_size}...")

    try:
        with _cancel_on_interrupt(runner):
            summary = runner.start(identifiers, app_key, secret_key)
    except InputError as exc:
        raise click.UsageError(str(exc)) from exc

    stats = summary.stats()
    if output_format == "json":
        click.echo(json.dumps(stats, indent=2))
    else:
        title = {
            "completed": "[SUCCESS] Invalidation complete",
            "cancelled": "[CANCELLED] Invalidation cancelled by user",
            "aborted": "[ERROR] Invalidation aborted",
        }.get(stats["state"], "Invalidation finished")
        _print_summary(title, stats)

    if summary.state is not SessionState.COMPLETED or summary.failed:
        sys.exit(1)
