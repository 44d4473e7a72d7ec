from __future__ import annotations

from jobflow.core.contracts import DatasetRecord, JobDraft, JobType, Priority, ResourceRecord
from jobflow.core.selection import SelectionSet
from jobflow.ui import formatting
from jobflow.workflow.submission import SubmissionState


def test_format_cost_uses_two_decimals() -> None:
    assert formatting.format_cost(10) == "10.00 CAL"
    assert formatting.format_cost(None, "USD") == "0.00 USD"


def test_format_timestamp_truncates_to_seconds() -> None:
    assert formatting.format_timestamp("2026-01-02T10:58:23.123456+00:00") == "2026-01-02T10:58:23"
    assert formatting.format_timestamp(None) is None
    assert formatting.format_timestamp("not a date") is None


def test_summary_rows_recap_the_draft() -> None:
    draft = JobDraft(
        name="Sim",
        description="d",
        job_type=JobType.DATA_PROCESSING,
        priority=Priority.HIGH,
        selected_resources=SelectionSet.of(["r1"]),
        selected_datasets=SelectionSet.of(["d1", "d2"]),
        estimated_runtime_hours=4.0,
        estimated_cost=10.0,
    )
    resources = [ResourceRecord(id="r1", name="GPU box")]
    datasets = [DatasetRecord(id="d1", name="Sensor data"), DatasetRecord(id="d2")]

    rows = dict(formatting.build_summary_rows(draft, resources, datasets))

    assert rows["Job Type"] == "Data Processing"
    assert rows["Priority"] == "High"
    assert rows["Resources"] == "GPU box"
    assert rows["Datasets"] == "Sensor data, d2"
    assert rows["Estimated Runtime"] == "4 hours"
    assert rows["Estimated Cost"] == "10.00 CAL"
    assert "Custom Code" not in rows


def test_summary_rows_mention_custom_code() -> None:
    draft = JobDraft(job_type=JobType.CUSTOM_CODE, custom_code="a = 1\nb = 2\n")

    rows = dict(formatting.build_summary_rows(draft, [], []))

    assert rows["Custom Code"] == "2 line(s)"


def test_submission_notice() -> None:
    assert formatting.submission_notice(SubmissionState()) is None
    assert formatting.submission_notice(SubmissionState(status="SUCCEEDED", job_id="j")) == (
        "success",
        "Job created successfully!",
    )
    assert formatting.submission_notice(SubmissionState(status="FAILED", reason="insufficient balance")) == (
        "error",
        "insufficient balance",
    )


def test_recent_submissions_most_recent_first() -> None:
    events = [
        {"type": "submit_started", "ts_utc": "2026-01-01T00:00:00+00:00"},
        {"type": "submit_failed", "ts_utc": "2026-01-01T00:00:01+00:00", "reason": "boom"},
        {"type": "submit_succeeded", "ts_utc": "2026-01-01T00:00:05+00:00", "job_id": "j1"},
        {"type": "navigate", "ts_utc": "2026-01-01T00:00:07+00:00", "job_id": "j1"},
    ]

    df = formatting.recent_submissions(events)

    assert df["outcome"].tolist() == ["created", "failed"]
    assert df["job_id"].iloc[0] == "j1"
    assert df["time"].iloc[1] == "2026-01-01T00:00:01"
