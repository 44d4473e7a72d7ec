from __future__ import annotations

import asyncio
import json

import pytest
import requests

from jobflow.config import IntakeConfig
from jobflow.core.errors import SubmissionTransportError
from jobflow.jobs.intake import HttpJobIntake, extract_job_id


def _response(status: int, body) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r._content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    return r


class FakeSession:
    def __init__(self, response: requests.Response | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.mark.parametrize(
    "body",
    [
        {"id": "job-1"},
        {"_id": "job-1"},
        {"success": True, "message": "Job created successfully", "data": {"job": {"_id": "job-1"}}},
        {"data": {"id": "job-1"}},
    ],
)
def test_extract_job_id_accepts_known_shapes(body) -> None:
    assert extract_job_id(body) == "job-1"


@pytest.mark.parametrize("body", [{}, {"id": ""}, None, ["job-1"]])
def test_extract_job_id_rejects_missing_id(body) -> None:
    with pytest.raises(SubmissionTransportError):
        extract_job_id(body)


def test_posts_payload_with_auth_header() -> None:
    session = FakeSession(_response(201, {"id": "job-9"}))
    intake = HttpJobIntake(
        IntakeConfig(api_url="http://api.test/", timeout_seconds=5, token="t0k"),
        session=session,
    )

    body = asyncio.run(intake.create_job({"name": "Sim"}))

    assert body == {"id": "job-9"}
    call = session.calls[0]
    assert call["url"] == "http://api.test/jobs"
    assert call["json"] == {"name": "Sim"}
    assert call["timeout"] == 5
    assert call["headers"]["Authorization"] == "Bearer t0k"
    assert call["headers"]["Content-Type"] == "application/json"


def test_no_token_means_no_auth_header() -> None:
    session = FakeSession(_response(200, {"id": "x"}))
    intake = HttpJobIntake(IntakeConfig(api_url="http://api.test", token=None), session=session)

    intake.create_job_sync({})

    assert "Authorization" not in session.calls[0]["headers"]


def test_error_status_surfaces_server_message() -> None:
    session = FakeSession(_response(402, {"success": False, "message": "insufficient balance"}))
    intake = HttpJobIntake(IntakeConfig(api_url="http://api.test"), session=session)

    with pytest.raises(SubmissionTransportError) as excinfo:
        intake.create_job_sync({})

    assert excinfo.value.message == "insufficient balance"
    assert excinfo.value.status_code == 402


def test_error_status_without_json_body_uses_generic_message() -> None:
    session = FakeSession(_response(500, b"<html>oops</html>"))
    intake = HttpJobIntake(IntakeConfig(api_url="http://api.test"), session=session)

    with pytest.raises(SubmissionTransportError) as excinfo:
        intake.create_job_sync({})

    assert excinfo.value.message == "Failed to create job (HTTP 500)"


def test_timeouts_and_connection_errors_become_transport_errors() -> None:
    cfg = IntakeConfig(api_url="http://api.test")

    with pytest.raises(SubmissionTransportError, match="timed out"):
        HttpJobIntake(cfg, session=FakeSession(error=requests.Timeout())).create_job_sync({})

    with pytest.raises(SubmissionTransportError, match="refused"):
        HttpJobIntake(
            cfg, session=FakeSession(error=requests.ConnectionError("connection refused"))
        ).create_job_sync({})
