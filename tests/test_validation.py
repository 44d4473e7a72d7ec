from __future__ import annotations

from dataclasses import replace

import pytest

from jobflow.core.contracts import JobDraft, JobType
from jobflow.core.selection import SelectionSet
from jobflow.core.validation import Step, validate_draft, validate_step


def _complete_draft(**overrides) -> JobDraft:
    base = JobDraft(
        name="Sim",
        description="d",
        job_type=JobType.DATA_PROCESSING,
        selected_resources=SelectionSet.of(["r1"]),
        selected_datasets=SelectionSet.of(["d1"]),
        estimated_runtime_hours=2.0,
    )
    return replace(base, **overrides)


class TestBasicInfo:
    def test_empty_draft_reports_name_and_description(self) -> None:
        errors = validate_step(Step.BASIC_INFO, JobDraft())

        assert errors == {
            "name": "Job name is required",
            "description": "Job description is required",
        }

    def test_whitespace_only_counts_as_empty(self) -> None:
        errors = validate_step(0, JobDraft(name="   ", description="\t"))

        assert set(errors) == {"name", "description"}

    def test_missing_job_type(self) -> None:
        errors = validate_step(0, _complete_draft(job_type=None))

        assert errors == {"job_type": "Job type is required"}


class TestSelectResources:
    def test_no_resources_selected(self) -> None:
        draft = _complete_draft(selected_resources=SelectionSet())

        assert validate_step(Step.SELECT_RESOURCES, draft) == {
            "selected_resources": "At least one computing resource is required"
        }

    def test_one_resource_is_enough(self) -> None:
        assert validate_step(1, _complete_draft()) == {}


class TestConfigure:
    def test_custom_code_required_for_custom_code_jobs(self) -> None:
        draft = _complete_draft(job_type=JobType.CUSTOM_CODE, custom_code="")

        assert validate_step(Step.CONFIGURE, draft) == {
            "custom_code": "Custom code is required for this job type"
        }

    def test_custom_code_not_required_for_data_processing(self) -> None:
        assert validate_step(2, _complete_draft(custom_code="")) == {}

    def test_datasets_and_runtime(self) -> None:
        draft = _complete_draft(selected_datasets=SelectionSet(), estimated_runtime_hours=0)

        assert validate_step(2, draft) == {
            "selected_datasets": "At least one dataset is required",
            "estimated_runtime_hours": "Estimated runtime must be greater than 0",
        }

    @pytest.mark.parametrize("runtime", [None, -2.0, 0.0])
    def test_runtime_must_be_positive(self, runtime) -> None:
        errors = validate_step(2, _complete_draft(estimated_runtime_hours=runtime))

        assert "estimated_runtime_hours" in errors


def test_summary_step_validates_nothing() -> None:
    assert validate_step(Step.SUMMARY, JobDraft(name="")) == {}


def test_unknown_step_raises() -> None:
    with pytest.raises(ValueError):
        validate_step(7, JobDraft())


def test_validate_draft_merges_every_gated_step() -> None:
    errors = validate_draft(JobDraft(estimated_runtime_hours=None))

    assert set(errors) == {
        "name",
        "description",
        "selected_resources",
        "selected_datasets",
        "estimated_runtime_hours",
    }


def test_validate_draft_accepts_complete_draft() -> None:
    assert validate_draft(_complete_draft()) == {}
