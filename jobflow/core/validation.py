"""Per-step validation gates for the job creation wizard.

``validate_step`` returns a mapping of draft field -> message; an empty mapping
means the step may be left forward. The summary step validates nothing.
"""

from __future__ import annotations

import math
from enum import IntEnum

from jobflow.core.contracts import JobDraft, JobType


class Step(IntEnum):
    BASIC_INFO = 0
    SELECT_RESOURCES = 1
    CONFIGURE = 2
    SUMMARY = 3


LAST_STEP = Step.SUMMARY

# Steps that must be clean before a draft can be submitted.
GATED_STEPS = (Step.BASIC_INFO, Step.SELECT_RESOURCES, Step.CONFIGURE)


def _blank(s: str | None) -> bool:
    return not (s or "").strip()


def _positive(x: float | None) -> bool:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return False
    return math.isfinite(x) and x > 0


def _validate_basic_info(draft: JobDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    if _blank(draft.name):
        errors["name"] = "Job name is required"
    if _blank(draft.description):
        errors["description"] = "Job description is required"
    if draft.job_type is None:
        errors["job_type"] = "Job type is required"
    return errors


def _validate_resources(draft: JobDraft) -> dict[str, str]:
    if draft.selected_resources.size() == 0:
        return {"selected_resources": "At least one computing resource is required"}
    return {}


def _validate_configure(draft: JobDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    if draft.job_type == JobType.CUSTOM_CODE and _blank(draft.custom_code):
        errors["custom_code"] = "Custom code is required for this job type"
    if draft.selected_datasets.size() == 0:
        errors["selected_datasets"] = "At least one dataset is required"
    if not _positive(draft.estimated_runtime_hours):
        errors["estimated_runtime_hours"] = "Estimated runtime must be greater than 0"
    return errors


_VALIDATORS = {
    Step.BASIC_INFO: _validate_basic_info,
    Step.SELECT_RESOURCES: _validate_resources,
    Step.CONFIGURE: _validate_configure,
}


def validate_step(step: int, draft: JobDraft) -> dict[str, str]:
    """Return field errors for ``step``; ``{}`` when the step is valid."""
    try:
        step = Step(int(step))
    except ValueError as exc:
        raise ValueError(f"Unknown wizard step: {step!r}") from exc

    validator = _VALIDATORS.get(step)
    if validator is None:
        return {}
    return validator(draft)


def validate_draft(draft: JobDraft) -> dict[str, str]:
    """Merged field errors of every gated step."""
    errors: dict[str, str] = {}
    for step in GATED_STEPS:
        errors.update(validate_step(step, draft))
    return errors
