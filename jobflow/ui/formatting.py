"""Formatting helpers for the job creation wizard."""

from __future__ import annotations

from typing import Any, Sequence

import pandas as pd

from jobflow.config import CURRENCY
from jobflow.core.catalog import names_for
from jobflow.core.contracts import DatasetRecord, JobDraft, JobType, ResourceRecord
from jobflow.workflow.submission import SubmissionState

_JOB_TYPE_LABELS = {
    JobType.DATA_PROCESSING: "Data Processing",
    JobType.CUSTOM_CODE: "Custom Code",
}

SUCCESS_MESSAGE = "Job created successfully!"


def format_timestamp(ts: str | None) -> str | None:
    """Return an ISO timestamp truncated to seconds (YYYY-MM-DDTHH:MM:SS)."""
    if not ts:
        return None
    s = str(ts)

    # Fast-path: 2025-12-12T10:58:23.123456+00:00 -> 2025-12-12T10:58:23
    if len(s) >= 19 and s[4] == "-" and s[10] == "T":
        return s[:19]

    t = pd.to_datetime(s, utc=True, errors="coerce")
    if pd.isna(t):
        return None
    return t.strftime("%Y-%m-%dT%H:%M:%S")


def format_cost(cost: float | None, currency: str = CURRENCY) -> str:
    return f"{float(cost or 0.0):.2f} {currency}"


def format_job_type(job_type: JobType | None) -> str:
    if job_type is None:
        return "-"
    return _JOB_TYPE_LABELS.get(job_type, job_type.value)


def build_summary_rows(
    draft: JobDraft,
    resources: Sequence[ResourceRecord],
    datasets: Sequence[DatasetRecord],
    *,
    currency: str = CURRENCY,
) -> list[tuple[str, str]]:
    """Read-only recap rendered on the summary step."""
    runtime = draft.estimated_runtime_hours
    rows = [
        ("Job Name", draft.name),
        ("Description", draft.description),
        ("Job Type", format_job_type(draft.job_type)),
        ("Priority", draft.priority.value.capitalize()),
        ("Resources", ", ".join(names_for(draft.selected_resources, resources)) or "-"),
        ("Datasets", ", ".join(names_for(draft.selected_datasets, datasets)) or "-"),
        ("Estimated Runtime", "-" if runtime is None else f"{runtime:g} hours"),
        ("Estimated Cost", format_cost(draft.estimated_cost, currency)),
    ]
    if draft.job_type == JobType.CUSTOM_CODE:
        lines = len(draft.custom_code.splitlines())
        rows.insert(3, ("Custom Code", f"{lines} line(s)"))
    return rows


def submission_notice(state: SubmissionState) -> tuple[str, str] | None:
    """Return ``(severity, message)`` for the submission banner, or ``None``."""
    if state.status == "SUCCEEDED":
        return "success", SUCCESS_MESSAGE
    if state.status == "FAILED":
        return "error", state.reason or "Failed to create job"
    if state.status == "SUBMITTING":
        return "info", "Submitting job..."
    return None


def recent_submissions(events: list[dict[str, Any]], *, limit: int = 10) -> pd.DataFrame:
    """Tabulate terminal submission events, most recent first."""
    rows = []
    for e in events or []:
        if e.get("type") not in ("submit_succeeded", "submit_failed"):
            continue
        rows.append(
            {
                "time": format_timestamp(e.get("ts_utc")),
                "outcome": "created" if e["type"] == "submit_succeeded" else "failed",
                "job_id": e.get("job_id"),
                "reason": e.get("reason"),
            }
        )
    df = pd.DataFrame(rows, columns=["time", "outcome", "job_id", "reason"])
    return df.iloc[::-1].head(int(limit)).reset_index(drop=True)
