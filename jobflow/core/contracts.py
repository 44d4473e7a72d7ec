from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from jobflow.core.selection import SelectionSet


class JobType(str, Enum):
    DATA_PROCESSING = "data_processing"
    CUSTOM_CODE = "custom_code"


class Priority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


def _first_present(d: dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if d.get(k) is not None:
            return d[k]
    return None


@dataclass(frozen=True)
class ResourceRecord:
    """One computing resource offered in the catalog (read-only input)."""

    id: str
    name: str = ""
    type: str | None = None
    cpu: int | None = None
    memory: int | None = None
    price_per_hour: float | None = None
    provider: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "ResourceRecord":
        rid = _first_present(d, "id", "_id")
        if rid is None:
            raise ValueError("resource record has no id")
        price = _first_present(d, "pricePerHour", "price_per_hour")
        return cls(
            id=str(rid),
            name=str(d.get("name") or ""),
            type=d.get("type"),
            cpu=d.get("cpu"),
            memory=d.get("memory"),
            price_per_hour=None if price is None else float(price),
            provider=d.get("provider"),
        )


@dataclass(frozen=True)
class DatasetRecord:
    """One dataset offered in the catalog (read-only input)."""

    id: str
    name: str = ""
    description: str = ""
    size: str | None = None
    format: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "DatasetRecord":
        did = _first_present(d, "id", "_id")
        if did is None:
            raise ValueError("dataset record has no id")
        size = d.get("size")
        return cls(
            id=str(did),
            name=str(d.get("name") or ""),
            description=str(d.get("description") or ""),
            size=None if size is None else str(size),
            format=d.get("format"),
        )


@dataclass(frozen=True)
class JobDraft:
    """The job specification accumulated across wizard steps.

    ``estimated_cost`` is derived and only ever written by the draft store.
    """

    name: str = ""
    description: str = ""
    job_type: JobType | None = JobType.DATA_PROCESSING
    priority: Priority = Priority.NORMAL
    selected_resources: SelectionSet[str] = field(default_factory=SelectionSet)
    selected_datasets: SelectionSet[str] = field(default_factory=SelectionSet)
    custom_code: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    estimated_runtime_hours: float | None = 1.0
    estimated_cost: float = 0.0


# Fields a caller may assign through ``JobDraftStore.set_field``.
EDITABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "job_type",
        "priority",
        "custom_code",
        "parameters",
        "estimated_runtime_hours",
    }
)

# Fields whose change requires the cost estimate to be recomputed.
COST_FIELDS = frozenset({"selected_resources", "estimated_runtime_hours"})


@dataclass(frozen=True)
class JobPayload:
    """Wire shape sent to the job-intake API."""

    name: str
    description: str
    type: str
    resources: list[str]
    datasets: list[str]
    estimated_runtime: float
    estimated_cost: float
    priority: str
    code: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "resources": list(self.resources),
            "datasets": list(self.datasets),
            "parameters": dict(self.parameters),
            "estimatedRuntime": self.estimated_runtime,
            "estimatedCost": self.estimated_cost,
            "priority": self.priority,
        }
        if self.code is not None:
            out["code"] = self.code
        return out

    @classmethod
    def from_draft(cls, draft: JobDraft) -> "JobPayload":
        if draft.job_type is None:
            raise ValueError("draft has no job type")
        is_custom = draft.job_type == JobType.CUSTOM_CODE
        return cls(
            name=draft.name,
            description=draft.description,
            type=draft.job_type.value,
            resources=draft.selected_resources.to_list(),
            datasets=draft.selected_datasets.to_list(),
            estimated_runtime=float(draft.estimated_runtime_hours or 0.0),
            estimated_cost=float(draft.estimated_cost),
            priority=draft.priority.value,
            code=draft.custom_code if is_custom else None,
            parameters=dict(draft.parameters),
        )
