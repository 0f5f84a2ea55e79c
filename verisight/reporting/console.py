# verisight/reporting/console.py
"""
Console reporting functions for analysis results and scan history.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from verisight.analysis.base import AnalysisResult, Assessment, SimulatedProvenanceStep
from verisight.io.media_reader import MediaUpload

console = Console()

STATUS_STYLES = {
    "verified": "[green]VERIFIED[/green]",
    "modified": "[yellow]MODIFIED[/yellow]",
    "unverified": "[bold red]UNVERIFIED[/bold red]",
}

BAR_WIDTH = 40


def verdict_label(result: AnalysisResult) -> str:
    return "Malicious AI" if result.is_deepfake else "Organic Origin"


def confidence_bar(confidence: int, width: int = BAR_WIDTH) -> str:
    """Text bar, e.g. '████████░░░░' for 66%."""
    filled = round(width * confidence / 100)
    return "█" * filled + "░" * (width - filled)


def _format_timestamp(ts: str) -> str:
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return ts


def _render_summary(result: AnalysisResult, upload: Optional[MediaUpload]) -> None:
    color = "red" if result.is_deepfake else "green"
    body = Text()
    body.append(f"{result.confidence}%", style=f"bold {color}")
    body.append(f"  {verdict_label(result).upper()}\n", style=f"bold {color}")
    body.append(confidence_bar(result.confidence), style=color)
    console.print(Panel(body, title="Verdict", border_style=color, expand=False))

    t = Table(title="Media", box=box.SIMPLE_HEAVY)
    t.add_column("Field", style="bold")
    t.add_column("Value")
    if upload is not None:
        t.add_row("Path", upload.path)
        t.add_row("Size (bytes)", str(upload.size))
        t.add_row("SHA-256", upload.sha256_hex)
    t.add_row("Format", result.metadata.format)
    t.add_row("Resolution", result.metadata.resolution)
    t.add_row("Source Guess", result.metadata.source_guess)
    console.print(t)


def _render_findings(result: AnalysisResult) -> None:
    table = Table(title="Analysis Log", box=box.ROUNDED, title_style="bold magenta", show_header=False)
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Observation")
    for i, line in enumerate(result.analysis_log, start=1):
        table.add_row(str(i), line)
    if result.analysis_log:
        console.print(table)

    if result.artifacts:
        console.print(
            Panel(
                "\n".join(f"• {a}" for a in result.artifacts),
                title="Detected Artifacts",
                border_style="yellow",
                expand=False,
            )
        )
    else:
        console.print("[dim]No significant artifacts detected.[/dim]")


def render_provenance(steps: Sequence[SimulatedProvenanceStep]) -> None:
    """Render the simulated provenance chain (not cryptographically verified)."""
    table = Table(
        title="Simulated Provenance Chain (C2PA-style, not verified)",
        box=box.ROUNDED,
        title_style="bold blue",
    )
    table.add_column("Status", justify="center", width=12)
    table.add_column("Action", style="cyan")
    table.add_column("Entity")
    table.add_column("Time", style="white")
    table.add_column("Location", style="dim")
    table.add_column("Hash", style="dim", overflow="ellipsis", max_width=24)

    for step in steps:
        table.add_row(
            STATUS_STYLES[step.status.value],
            step.action,
            step.entity,
            _format_timestamp(step.timestamp),
            step.location or "",
            step.hash,
        )
    console.print(table)


def render_assessment(assessment: Assessment, upload: Optional[MediaUpload] = None) -> None:
    """Render a full analysis result."""
    if assessment.degraded:
        console.print(
            Panel(
                f"[yellow]Remote classifier unavailable ({assessment.reason.value}); "
                "showing the default low-confidence result.[/yellow]",
                style="yellow",
            )
        )
    result = assessment.result
    _render_summary(result, upload)
    _render_findings(result)
    if result.provenance:
        render_provenance(result.provenance)


def render_history(history: Sequence[AnalysisResult]) -> None:
    """Render the stored history, newest first."""
    if not history:
        console.print("[dim]No scan history in database.[/dim]")
        return
    table = Table(title="Recent Scans", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Verdict")
    table.add_column("Confidence", justify="right")
    table.add_column("Format")
    table.add_column("Source Guess")
    for i, r in enumerate(history, start=1):
        verdict = f"[red]{verdict_label(r)}[/red]" if r.is_deepfake else f"[green]{verdict_label(r)}[/green]"
        table.add_row(str(i), verdict, f"{r.confidence}%", r.metadata.format, r.metadata.source_guess)
    console.print(table)
