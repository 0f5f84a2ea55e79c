# verisight/cli.py
"""
cli.py

Rich console CLI:
- Default: show a banner and the command list.
- scan:    analyze an image or video, print the verdict, findings and the
           simulated provenance chain, and record it in history.
- history: list (or clear) the last ten stored results.
- version: show the package version.
"""
from __future__ import annotations

import argparse
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.panel import Panel

from verisight import __version__
from verisight.analysis.gemini_analyzer import GeminiAnalyzer
from verisight.config import Settings
from verisight.io.media_reader import MediaReadError, read_media
from verisight.logging import configure_logging
from verisight.reporting import console as reporter
from verisight.reporting.json_reporter import write_json
from verisight.storage.backends import JsonFileStore
from verisight.storage.history import HistoryStore

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="verisight",
        description="VeriSight: deepfake-likelihood assessment for images and video.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = p.add_subparsers(dest="cmd", title="Available Commands", metavar="<command>")

    store_help = "History directory (default: $VERISIGHT_HOME or ~/.verisight)"

    sp_scan = sub.add_parser("scan", help="Analyze a local image or video file")
    sp_scan.add_argument("path", help="Path to the media file")
    sp_scan.add_argument("--mime-type", default=None, help="Override the guessed MIME type")
    sp_scan.add_argument("--json-out", type=str, default=None, help="Write JSON report to this path")
    sp_scan.add_argument("--no-history", action="store_true", help="Do not record the result")
    sp_scan.add_argument("--model", default=None, help="Remote model name")
    sp_scan.add_argument("--timeout", type=_timeout_seconds, default=None, help="Remote call timeout (seconds)")
    sp_scan.add_argument("--store", default=None, help=store_help)
    sp_scan.add_argument("--debug", action="store_true", help="Enable debug logging")

    sp_hist = sub.add_parser("history", help="Show the last ten scan results")
    sp_hist.add_argument("--clear", action="store_true", help="Delete the stored history")
    sp_hist.add_argument("--store", default=None, help=store_help)
    sp_hist.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub.add_parser("version", help="Show the version of verisight")

    return p


def _timeout_seconds(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of seconds: {raw!r}")
    if not value > 0:
        raise argparse.ArgumentTypeError(f"timeout must be positive, got {raw}")
    return value


def _load_settings(args: argparse.Namespace) -> Optional[Settings]:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return None
    return settings.override(
        model=getattr(args, "model", None),
        timeout=getattr(args, "timeout", None),
        home=args.store,
    )


def _scan(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    if settings is None:
        return 2

    try:
        upload = read_media(args.path, mime_type=args.mime_type)
    except MediaReadError as e:
        console.print(f"[red]Analysis failed:[/red] {e}")
        return 2

    console.print(f"[dim]Analyzing {upload.kind} ({upload.mime_type}, {upload.size} bytes)...[/dim]")
    assessment = GeminiAnalyzer(settings).assess(upload.data, upload.mime_type)
    reporter.render_assessment(assessment, upload)

    status = 0
    if args.json_out:
        try:
            write_json(assessment, args.json_out, upload)
        except OSError as e:
            logger.error("Failed to write JSON report {path}: {error}", path=args.json_out, error=e)
            console.print(f"[yellow]JSON report not written:[/yellow] {e}")
            status = 1
        else:
            console.print(f"[dim]Wrote JSON report → {args.json_out}[/dim]")

    if not args.no_history:
        store = HistoryStore(JsonFileStore(settings.history_dir))
        try:
            store.record(assessment.result, store.load())
        except OSError as e:
            logger.error("Failed to save history: {error}", error=e)
            console.print(f"[yellow]Result not saved to history:[/yellow] {e}")
            status = 1

    return status


def _history(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    if settings is None:
        return 2
    store = HistoryStore(JsonFileStore(settings.history_dir))
    if args.clear:
        try:
            store.clear()
        except OSError as e:
            logger.error("Failed to clear history: {error}", error=e)
            console.print(f"[yellow]History not cleared:[/yellow] {e}")
            return 1
        console.print("[dim]History cleared.[/dim]")
        return 0
    reporter.render_history(store.load())
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        console.print(Panel(f"[bold]VeriSight[/bold] {__version__}", style="bold cyan", expand=False))
        parser.print_help()
        return 0

    if args.cmd == "version":
        console.print(f"VeriSight Version {__version__}")
        return 0

    configure_logging(debug=args.debug)

    if args.cmd == "scan":
        return _scan(args)
    if args.cmd == "history":
        return _history(args)

    parser.print_help()
    return 1
