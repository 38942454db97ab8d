"""Main CLI application with typer subcommands."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from src.utils.logging import setup_logging, Verbosity, console, info, success, warn, error
from src.utils.config import load_config, merge_cli_overrides, DEFAULT_CONFIG_YAML

load_dotenv()

app = typer.Typer(
    name="paper-edit",
    help="Align a written script against a time-stamped transcript.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


class ReportFormat(str, Enum):
    json = "json"
    csv = "csv"


# ── Helper functions ──────────────────────────────────────────────────────────

def _read_script(path: Path) -> str:
    if not path.is_file():
        error(f"Script not found: {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8-sig")


def _read_transcript(path: Path):
    from src.align.aligner import load_transcript
    from src.align.errors import InvalidInputError

    if not path.is_file():
        error(f"Transcript not found: {path}")
        raise typer.Exit(1)
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as e:
        error(f"Invalid transcript JSON in {path.name}: {e}")
        raise typer.Exit(1)
    try:
        transcript = load_transcript(data)
    except InvalidInputError as e:
        error(f"Invalid transcript in {path.name}: {e}")
        raise typer.Exit(1)

    if not any(seg.has_word_timestamps for seg in transcript.segments):
        warn("No word timestamps in transcript, times will use whole segment bounds")
    return transcript


def _time_range(start: float | None, end: float | None) -> str:
    from src.align.report import format_timecode
    if start is None or end is None:
        return ""
    return f"{format_timecode(start)} – {format_timecode(end)}"


def _print_result(result) -> None:
    s = result.stats
    console.print(Panel(
        f"[bold]{s.total_lines}[/bold] lines   "
        f"[matched]{s.matched} matched[/matched]   "
        f"[approximate]{s.approximate} approx[/approximate]   "
        f"[unmatched]{s.unmatched} unmatched[/unmatched]   "
        f"avg conf [bold]{s.avg_confidence * 100:.0f}%[/bold]   "
        f"[dim]{len(result.unused_segments)} unused segments[/dim]",
        title="Alignment",
    ))

    table = Table(show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Status")
    table.add_column("Time")
    table.add_column("Conf", justify="right")
    table.add_column("Script line")
    table.add_column("Transcript", style="dim")
    for e in result.entries:
        status = e.status.value
        table.add_row(
            str(e.script_index + 1),
            f"[{status}]{status}[/{status}]",
            _time_range(e.trimmed_start, e.trimmed_end),
            f"{e.confidence * 100:.0f}%",
            escape(e.script_line),
            escape(e.matched_text),
        )
    console.print(table)


# ── ALIGN ─────────────────────────────────────────────────────────────────────

@app.command()
def align(
    script: Annotated[Path, typer.Option("--script", "-s", help="Script text file")],
    transcript: Annotated[Path, typer.Option("--transcript", "-t", help="Transcript JSON file")],
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Report path")] = None,
    fmt: Annotated[Optional[ReportFormat], typer.Option("--format", "-f")] = None,
    min_score: Annotated[Optional[float], typer.Option(help="DP acceptance floor")] = None,
    approx_threshold: Annotated[Optional[float], typer.Option()] = None,
    matched_threshold: Annotated[Optional[float], typer.Option()] = None,
    lookahead: Annotated[Optional[int], typer.Option(help="Bound DP search to N segments ahead")] = None,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Skip the result table")] = False,
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
):
    """Align a script against a transcript and report per-line matches."""
    setup_logging(Verbosity.VERBOSE if verbose else Verbosity.NORMAL)

    from src.align.aligner import align as run_alignment
    from src.align.errors import AlignmentError
    from src.align.report import save_report

    try:
        cfg = merge_cli_overrides(load_config(config), {
            "alignment.min_match_score": min_score,
            "alignment.approximate_threshold": approx_threshold,
            "alignment.matched_threshold": matched_threshold,
            "alignment.max_lookahead": lookahead,
            "report.format": fmt.value if fmt else None,
        })
    except ValueError as e:
        error(f"Invalid configuration: {e}")
        raise typer.Exit(1)

    script_text = _read_script(script)
    transcript_data = _read_transcript(transcript)
    info(f"Aligning {script.name} against {transcript.name} ({len(transcript_data.segments)} segments)")

    try:
        result = run_alignment(script_text, transcript_data, cfg.alignment)
    except AlignmentError as e:
        error(f"Alignment failed: {e}")
        raise typer.Exit(1)

    if not quiet:
        _print_result(result)

    if output is not None:
        path = save_report(result, output, cfg.report.format, cfg.report.indent)
        success(f"Report: {path}")


# ── LINES ─────────────────────────────────────────────────────────────────────

@app.command()
def lines(
    script: Annotated[Path, typer.Option("--script", "-s", help="Script text file")],
    max_line_chars: Annotated[Optional[int], typer.Option(help="Split longer lines on sentence ends")] = None,
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
):
    """Show the lines a script is split into before alignment."""
    setup_logging(Verbosity.NORMAL, log_to_file=False)
    from src.align.text import split_script_into_lines

    cfg = load_config(config)
    limit = max_line_chars or cfg.alignment.max_line_chars
    script_lines = split_script_into_lines(_read_script(script), limit)
    if not script_lines:
        error("Script produced no usable lines")
        raise typer.Exit(1)
    for i, line in enumerate(script_lines, start=1):
        console.print(f"[dim]{i:>4}[/dim]  {escape(line)}")
    info(f"{len(script_lines)} lines")


# ── INIT CONFIG ───────────────────────────────────────────────────────────────

@app.command(name="init")
def init_config():
    """Generate a default config.yaml in the current directory."""
    setup_logging(Verbosity.NORMAL, log_to_file=False)
    p = Path("config.yaml")
    if p.exists():
        if not Confirm.ask("config.yaml exists. Overwrite?", default=False):
            raise typer.Exit(0)
    p.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
    success(f"Created {p}")


# ── ENTRY POINT ───────────────────────────────────────────────────────────────

def app_entry():
    app()


if __name__ == "__main__":
    app_entry()
