"""Submit-and-track state machine for a finished job draft.

States::

    IDLE --submit()--> SUBMITTING --ok--> SUCCEEDED(job_id)
                       SUBMITTING --err--> FAILED(reason) --submit()--> SUBMITTING

``SUCCEEDED`` is terminal for the controller's draft. A ``submit()`` while a
request is in flight is ignored rather than queued. After success a
non-cancellable timer emits one :class:`NavigationEvent`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Literal

from jobflow.config import GENERIC_SUBMIT_FAILURE, WorkflowConfig, get_workflow_config
from jobflow.core.contracts import JobDraft, JobPayload
from jobflow.core.errors import InvariantViolation, SubmissionTransportError
from jobflow.core.validation import validate_draft
from jobflow.jobs.intake import JobIntake, extract_job_id
from jobflow.workflow import events

logger = logging.getLogger(__name__)

SubmissionStatus = Literal["IDLE", "SUBMITTING", "SUCCEEDED", "FAILED"]


@dataclass(frozen=True)
class SubmissionState:
    status: SubmissionStatus = "IDLE"
    attempt: int = 0
    job_id: str | None = None
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


NavigationListener = Callable[[events.NavigationEvent], None]


class SubmissionController:
    """Sends a validated draft to the job-intake collaborator and tracks the outcome."""

    def __init__(
        self,
        intake: JobIntake,
        *,
        on_navigate: NavigationListener | None = None,
        config: WorkflowConfig | None = None,
        event_log_path: Path | None = None,
    ) -> None:
        self._intake = intake
        self._config = config or get_workflow_config()
        self._listeners: list[NavigationListener] = [on_navigate] if on_navigate else []
        self._event_log_path = event_log_path
        self._state = SubmissionState()
        self._navigation: asyncio.Task | None = None

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def is_submitting(self) -> bool:
        return self._state.status == "SUBMITTING"

    def add_navigation_listener(self, listener: NavigationListener) -> None:
        self._listeners.append(listener)

    async def submit(self, draft: JobDraft) -> SubmissionState:
        """Submit ``draft`` once and return the resulting state.

        Raises :class:`InvariantViolation` (state unchanged) when the draft
        does not pass validation for every gated step.
        """
        if self._state.status == "SUBMITTING":
            logger.debug("Submit ignored: attempt %d still in flight", self._state.attempt)
            return self._state
        if self._state.status == "SUCCEEDED":
            logger.debug("Submit ignored: job %s already created", self._state.job_id)
            return self._state

        errors = validate_draft(draft)
        if errors:
            logger.error("Refusing to submit invalid draft: %s", ", ".join(sorted(errors)))
            raise InvariantViolation(errors)

        payload = JobPayload.from_draft(draft).to_dict()
        attempt = self._state.attempt + 1
        self._state = SubmissionState(status="SUBMITTING", attempt=attempt)
        logger.info("Submitting job %r (attempt %d)", draft.name, attempt)
        self._record(events.SUBMIT_STARTED, attempt=attempt, name=draft.name, estimated_cost=draft.estimated_cost)

        try:
            response = await self._intake.create_job(payload)
            job_id = extract_job_id(response)
        except SubmissionTransportError as exc:
            return self._fail(attempt, exc.message or GENERIC_SUBMIT_FAILURE)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Job intake raised unexpectedly")
            return self._fail(attempt, str(exc) or GENERIC_SUBMIT_FAILURE)

        self._state = SubmissionState(status="SUCCEEDED", attempt=attempt, job_id=job_id)
        logger.info("Job %s created", job_id)
        self._record(events.SUBMIT_SUCCEEDED, attempt=attempt, job_id=job_id)
        self._navigation = asyncio.get_running_loop().create_task(self._navigate_after_delay(job_id))
        return self._state

    async def wait_for_navigation(self) -> events.NavigationEvent | None:
        """Wait for the pending post-success navigation, if any."""
        if self._navigation is None:
            return None
        return await self._navigation

    def _fail(self, attempt: int, reason: str) -> SubmissionState:
        self._state = SubmissionState(status="FAILED", attempt=attempt, reason=reason)
        logger.warning("Job submission failed (attempt %d): %s", attempt, reason)
        self._record(events.SUBMIT_FAILED, attempt=attempt, reason=reason)
        return self._state

    async def _navigate_after_delay(self, job_id: str) -> events.NavigationEvent:
        await asyncio.sleep(self._config.navigation_delay_seconds)
        event = events.NavigationEvent(
            job_id=job_id,
            target=self._config.success_route,
            ts_utc=datetime.now(timezone.utc).isoformat(),
        )
        logger.info("Navigating to %s after creating job %s", event.target, job_id)
        self._record(events.NAVIGATE, **event.to_dict())
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("Navigation listener %r failed", listener)
        return event

    def _record(self, event_type: str, **fields: Any) -> None:
        if self._event_log_path is None:
            return
        try:
            events.append_event(self._event_log_path, {"type": event_type, **fields})
        except OSError:
            logger.exception("Could not record %s event to %s", event_type, self._event_log_path)
