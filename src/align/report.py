"""Alignment reports: JSON for tools downstream, CSV for spreadsheets."""

from __future__ import annotations

import csv
import json
from io import StringIO
from pathlib import Path

from src.align.models import AlignmentResult
from src.utils.logging import info


def format_timecode(seconds: float | None) -> str:
    """``MM:SS.mmm``, or ``H:MM:SS.mmm`` past one hour; empty for None."""
    if seconds is None:
        return ""
    total_ms = int(round(seconds * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, ms = divmod(rem, 1000)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}.{ms:03d}"
    return f"{minutes:02d}:{secs:02d}.{ms:03d}"


def generate_report(result: AlignmentResult, fmt: str = "json", indent: int = 2) -> str:
    if fmt == "json":
        data = {
            "stats": result.stats.to_dict(),
            "unused_segments": list(result.unused_segments),
            "entries": [e.to_dict() for e in result.entries],
        }
        return json.dumps(data, indent=indent or None, ensure_ascii=False)

    elif fmt == "csv":
        output = StringIO()
        writer = csv.writer(output)
        writer.writerow([
            "index", "status", "confidence", "trimmed_start", "trimmed_end",
            "segments", "script_line", "matched_text",
        ])
        for e in result.entries:
            writer.writerow([
                e.script_index, e.status.value, e.confidence,
                "" if e.trimmed_start is None else e.trimmed_start,
                "" if e.trimmed_end is None else e.trimmed_end,
                ";".join(str(i) for i in e.matched_segments),
                e.script_line, e.matched_text,
            ])
        return output.getvalue()

    raise ValueError(f"Unknown report format: {fmt}")


def save_report(result: AlignmentResult, output_path: Path, fmt: str = "json",
                indent: int = 2) -> Path:
    ext = ".json" if fmt == "json" else ".csv"
    report_path = output_path.with_suffix(f".alignment{ext}")
    content = generate_report(result, fmt, indent)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(content, encoding="utf-8")
    info(f"Alignment report saved: {report_path.name}")
    return report_path
