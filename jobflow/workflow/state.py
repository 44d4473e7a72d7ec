"""Wizard state and the draft store that owns it.

``JobDraftStore`` holds a single immutable :class:`WorkflowState`. Every public
method is one named transition that swaps in a new state; there is no other way
to mutate the draft.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from jobflow.config import WorkflowConfig, get_workflow_config
from jobflow.core.contracts import (
    COST_FIELDS,
    EDITABLE_FIELDS,
    DatasetRecord,
    JobDraft,
    JobType,
    Priority,
    ResourceRecord,
)
from jobflow.core.cost import estimate_cost
from jobflow.core.errors import UnknownSelectionError, WorkflowClosedError
from jobflow.core.validation import LAST_STEP, Step, validate_step

logger = logging.getLogger(__name__)


def _frozen(errors: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(errors))


@dataclass(frozen=True)
class WorkflowState:
    active_step: int = int(Step.BASIC_INFO)
    draft: JobDraft = field(default_factory=JobDraft)
    field_errors: Mapping[str, str] = field(default_factory=lambda: _frozen({}))

    @property
    def is_summary(self) -> bool:
        return self.active_step == int(LAST_STEP)


def _coerce_runtime(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _coerce_field(name: str, value: Any) -> Any:
    if name == "job_type":
        return None if value in (None, "") else JobType(value)
    if name == "priority":
        return Priority(value)
    if name == "estimated_runtime_hours":
        return _coerce_runtime(value)
    if name == "parameters":
        return dict(value or {})
    return "" if value is None else str(value)


class JobDraftStore:
    """Owns the wizard state for one job creation run.

    Catalogs are injected read-only; toggling an id that is not in the matching
    catalog raises :class:`UnknownSelectionError`.
    """

    def __init__(
        self,
        resources: Sequence[ResourceRecord],
        datasets: Sequence[DatasetRecord],
        *,
        config: WorkflowConfig | None = None,
    ) -> None:
        self._config = config or get_workflow_config()
        self._resources = tuple(resources)
        self._datasets = tuple(datasets)
        self._resource_ids = frozenset(r.id for r in self._resources)
        self._dataset_ids = frozenset(d.id for d in self._datasets)
        self._closed = False

        draft = JobDraft(estimated_runtime_hours=self._config.default_runtime_hours)
        self._state = WorkflowState(draft=draft)

    # -- read-only views -------------------------------------------------

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def draft(self) -> JobDraft:
        return self._state.draft

    @property
    def resources(self) -> tuple[ResourceRecord, ...]:
        return self._resources

    @property
    def datasets(self) -> tuple[DatasetRecord, ...]:
        return self._datasets

    @property
    def closed(self) -> bool:
        return self._closed

    # -- transitions -----------------------------------------------------

    def set_field(self, name: str, value: Any) -> WorkflowState:
        """Assign an editable draft field and clear that field's error."""
        self._ensure_open()
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Field is not editable: {name!r}")

        draft = replace(self._state.draft, **{name: _coerce_field(name, value)})
        return self._commit(draft, cleared=name, recompute=name in COST_FIELDS)

    def toggle_resource(self, resource_id: str) -> WorkflowState:
        self._ensure_open()
        if resource_id not in self._resource_ids:
            raise UnknownSelectionError(f"Unknown resource id: {resource_id!r}")

        draft = self._state.draft
        draft = replace(draft, selected_resources=draft.selected_resources.toggle(resource_id))
        return self._commit(draft, cleared="selected_resources", recompute=True)

    def toggle_dataset(self, dataset_id: str) -> WorkflowState:
        self._ensure_open()
        if dataset_id not in self._dataset_ids:
            raise UnknownSelectionError(f"Unknown dataset id: {dataset_id!r}")

        draft = self._state.draft
        draft = replace(draft, selected_datasets=draft.selected_datasets.toggle(dataset_id))
        return self._commit(draft, cleared="selected_datasets", recompute=False)

    def advance(self) -> bool:
        """Move to the next step if the current one validates.

        Returns ``True`` when the step changed. On failure the state carries the
        step's field errors and ``active_step`` is unchanged.
        """
        self._ensure_open()
        state = self._state
        if state.active_step >= int(LAST_STEP):
            return False

        errors = validate_step(state.active_step, state.draft)
        if errors:
            logger.warning("Advance refused at step %d: %s", state.active_step, ", ".join(sorted(errors)))
            self._state = replace(state, field_errors=_frozen(errors))
            return False

        self._state = replace(state, active_step=state.active_step + 1, field_errors=_frozen({}))
        logger.info("Advanced to step %d", self._state.active_step)
        return True

    def retreat(self) -> bool:
        """Move back one step without validating or touching the draft."""
        self._ensure_open()
        state = self._state
        if state.active_step <= 0:
            logger.debug("Retreat ignored at first step")
            return False
        self._state = replace(state, active_step=state.active_step - 1)
        return True

    def close(self) -> None:
        """End the workflow (cancelled, or replaced by navigation after success)."""
        self._closed = True

    # -- internals -------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise WorkflowClosedError("Job creation workflow is closed")

    def _commit(self, draft: JobDraft, *, cleared: str, recompute: bool) -> WorkflowState:
        if recompute:
            cost = estimate_cost(
                self._resources,
                draft.selected_resources,
                draft.estimated_runtime_hours,
                default_price=self._config.default_price_per_hour,
            )
            draft = replace(draft, estimated_cost=cost)

        errors = self._state.field_errors
        if cleared in errors:
            errors = _frozen({k: v for k, v in errors.items() if k != cleared})

        self._state = replace(self._state, draft=draft, field_errors=errors)
        return self._state
