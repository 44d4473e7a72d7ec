"""UI state management for the Streamlit wizard.

One job creation run lives in ``st.session_state`` as a dict holding the draft
store and the submission controller. It is created on first render and dropped
on cancel or after the post-success navigation.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

import streamlit as st

from jobflow.core.contracts import DatasetRecord, ResourceRecord
from jobflow.jobs.intake import JobIntake
from jobflow.workflow.events import make_log_path
from jobflow.workflow.state import JobDraftStore
from jobflow.workflow.submission import SubmissionController

SESSION_KEY = "job_creation"
NAV_TARGET_KEY = "nav_target"
WIDGET_KEY_PREFIX = "jc_"


def _on_navigate(event) -> None:  # noqa: ANN001
    st.session_state[NAV_TARGET_KEY] = {"route": event.target, "job_id": event.job_id}


def get_job_creation_session(
    *,
    resources: Sequence[ResourceRecord],
    datasets: Sequence[DatasetRecord],
    intake_factory: Callable[[], JobIntake],
) -> dict[str, Any]:
    """Return the active wizard session, starting a fresh one if needed."""
    session = st.session_state.get(SESSION_KEY)
    if session is None or session["store"].closed:
        session = {
            "store": JobDraftStore(resources, datasets),
            "controller": SubmissionController(
                intake_factory(),
                on_navigate=_on_navigate,
                event_log_path=make_log_path(),
            ),
        }
        st.session_state[SESSION_KEY] = session
    return session


def end_job_creation_session() -> None:
    """Close and forget the active wizard session (cancel or after success)."""
    session = st.session_state.pop(SESSION_KEY, None)
    if session is not None:
        session["store"].close()
    # Widget values from a closed draft must not seed the next one.
    for key in [k for k in st.session_state.keys() if str(k).startswith(WIDGET_KEY_PREFIX)]:
        del st.session_state[key]
