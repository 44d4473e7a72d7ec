"""Daily JSONL log of submission attempts, outcomes and navigations.

One file per UTC day (``submissions_YYYYMMDD.jsonl``). Writers append and
fsync a single line; readers skip lines torn by an interrupted write.
"""

from __future__ import annotations

import json
import os
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from jobflow.config import get_workflow_config

SUBMIT_STARTED = "submit_started"
SUBMIT_SUCCEEDED = "submit_succeeded"
SUBMIT_FAILED = "submit_failed"
NAVIGATE = "navigate"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_event_log_dir() -> Path:
    return Path(get_workflow_config().event_log_dir)


def make_log_path(*, day: datetime | None = None, log_dir: Path | None = None) -> Path:
    d = log_dir or default_event_log_dir()
    d.mkdir(parents=True, exist_ok=True)
    t = day or datetime.now(timezone.utc)
    return d / f"submissions_{t.strftime('%Y%m%d')}.jsonl"


@dataclass(frozen=True)
class NavigationEvent:
    """Emitted once, after the success delay, for a successfully created job."""

    job_id: str
    target: str
    ts_utc: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _plain(value: Any) -> Any:
    """Lower enum members and nested containers to JSON values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def append_event(path: Path, event: dict[str, Any]) -> None:
    """Append one submission event as a JSON line, stamping ``ts_utc`` if absent."""
    record = {"ts_utc": _utc_now_iso(), **_plain(event)}
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
        f.flush()
        try:
            os.fsync(f.fileno())
        except OSError:
            pass  # fsync unsupported on this filesystem


def _parse_line(raw: str) -> dict[str, Any] | None:
    try:
        obj = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return obj if isinstance(obj, dict) else None


def read_events(path: Path, *, max_events: int | None = None) -> list[dict[str, Any]]:
    """Events in file order; blank or torn lines are skipped.

    With ``max_events`` only the newest ``max_events`` are returned.
    """
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as f:
        parsed = (_parse_line(raw) for raw in f if raw.strip())
        kept = deque((e for e in parsed if e is not None), maxlen=max_events)
    return list(kept)


def list_logs(log_dir: Path | None = None) -> list[Path]:
    """Submission log files, most recent first."""
    d = log_dir or default_event_log_dir()
    if not d.exists():
        return []
    return sorted(d.glob("submissions_*.jsonl"), reverse=True)


def latest_event(events: Iterable[dict[str, Any]], event_type: str) -> dict[str, Any] | None:
    for e in reversed(list(events)):
        if e.get("type") == event_type:
            return e
    return None
