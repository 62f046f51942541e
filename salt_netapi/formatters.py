"""
Formatting helpers for human readable summaries.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from .modules.smbios import Record
from .results import LocalAsyncResult, RunnerAsyncResult


def _format_value(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    if isinstance(value, dict):
        return ", ".join(f"{key}={item}" for key, item in value.items())
    return str(value)


def format_records(per_minion: Mapping[str, Optional[List[Record]]]) -> str:
    """Render ``smbios.records`` output into a multi-minion report."""
    lines: List[str] = []

    if not per_minion:
        return "No minions returned SMBIOS data."

    for minion in sorted(per_minion):
        records = per_minion[minion] or []
        lines.append("=" * 80)
        lines.append(f"MINION: {minion}")
        lines.append("=" * 80)
        lines.append(f"Records: {len(records)}")

        if not records:
            lines.append("")
            lines.append("No SMBIOS records reported.")
            lines.append("")
            continue

        for record in records:
            record_type = record.record_type
            label = record_type.name if record_type is not None else f"TYPE {record.type}"
            lines.append("")
            lines.append(f"[{record.handle}] {label} :: {record.description}")
            for key, value in sorted(record.data.items()):
                lines.append(f"     {key}: {_format_value(value)}")

        lines.append("")

    return "\n".join(lines).strip()


def format_job(job: Union[RunnerAsyncResult, LocalAsyncResult]) -> str:
    """One-line summary of a scheduled job."""
    if isinstance(job, LocalAsyncResult):
        minions = ", ".join(job.minions) or "none"
        return f"Job {job.jid} scheduled on minions: {minions}"
    if job.tag:
        return f"Job {job.jid} scheduled (tag {job.tag})"
    return f"Job {job.jid} scheduled"


def format_result(result: Any) -> Dict[str, Any]:
    """Wrap an arbitrary runner result for JSON output."""
    return {"return": result}
