"""Error taxonomy for the job submission workflow."""

from __future__ import annotations

from typing import Mapping


class JobflowError(Exception):
    """Base class for all workflow errors."""


class ValidationError(JobflowError):
    """Required fields of one or more steps are unmet.

    ``field_errors`` maps a draft field name to a user-facing message.
    """

    def __init__(self, field_errors: Mapping[str, str], message: str | None = None) -> None:
        self.field_errors = dict(field_errors)
        if message is None:
            message = "; ".join(f"{k}: {v}" for k, v in self.field_errors.items()) or "invalid draft"
        super().__init__(message)


class InvariantViolation(ValidationError):
    """An invalid draft reached the submission controller despite step gating."""


class SubmissionTransportError(JobflowError):
    """The job-intake collaborator rejected the submission or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class UnknownSelectionError(JobflowError, KeyError):
    """A toggled identifier does not exist in the injected catalog."""

    def __str__(self) -> str:  # KeyError quotes its argument otherwise
        return str(self.args[0]) if self.args else ""


class WorkflowClosedError(JobflowError):
    """The workflow was cancelled or already submitted successfully."""
