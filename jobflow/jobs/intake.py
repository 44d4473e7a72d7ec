"""Job-intake collaborator boundary.

The workflow only needs ``create_job(payload) -> {"id": ...}``. Transport,
auth headers and retries belong to the implementation; failures surface as
:class:`SubmissionTransportError`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import requests

from jobflow.config import GENERIC_SUBMIT_FAILURE, IntakeConfig, get_intake_config
from jobflow.core.errors import SubmissionTransportError

logger = logging.getLogger(__name__)


class JobIntake(Protocol):
    async def create_job(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...


def extract_job_id(response: Any) -> str:
    """Return the created job's id from an intake response.

    Accepts ``{"id": ...}``, ``{"_id": ...}`` and the API envelope
    ``{"data": {"job": {"_id": ...}}}``.
    """
    candidates: list[Any] = []
    if isinstance(response, dict):
        candidates.append(response)
        data = response.get("data")
        if isinstance(data, dict):
            candidates.append(data)
            if isinstance(data.get("job"), dict):
                candidates.append(data["job"])

    for c in candidates:
        for key in ("id", "_id"):
            if c.get(key) not in (None, ""):
                return str(c[key])

    raise SubmissionTransportError("Job intake response did not include a job id")


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if msg:
            return str(msg)
    return f"{GENERIC_SUBMIT_FAILURE} (HTTP {response.status_code})"


class HttpJobIntake:
    """POSTs payloads to ``<api_url>/jobs`` with ``requests``."""

    def __init__(self, config: IntakeConfig | None = None, *, session: requests.Session | None = None) -> None:
        self._config = config or get_intake_config()
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    def create_job_sync(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = self._config.jobs_url()
        try:
            response = self._session.post(
                url,
                json=payload,
                headers=self._headers(),
                timeout=self._config.timeout_seconds,
            )
        except requests.Timeout as exc:
            raise SubmissionTransportError("Job intake timed out") from exc
        except requests.RequestException as exc:
            raise SubmissionTransportError(str(exc) or GENERIC_SUBMIT_FAILURE) from exc

        if not response.ok:
            message = _error_message(response)
            logger.warning("POST %s -> %d: %s", url, response.status_code, message)
            raise SubmissionTransportError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise SubmissionTransportError("Job intake returned a non-JSON response") from exc
        return body if isinstance(body, dict) else {"data": body}

    async def create_job(self, payload: dict[str, Any]) -> dict[str, Any]:
        # requests is blocking; keep the event loop free while it runs.
        return await asyncio.to_thread(self.create_job_sync, payload)
