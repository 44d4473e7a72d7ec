"""Streamlit UI entrypoint.

Run with::

    streamlit run jobflow/ui/app.py

Sets up the page, loads the read-only catalogs and delegates to the job
creation page module.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure repo root is on sys.path for imports.
repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

import logging

import streamlit as st

from jobflow.config import get_workflow_config
from jobflow.core.catalog import load_catalog_json, parse_datasets, parse_resources
from jobflow.jobs.intake import HttpJobIntake
from jobflow.ui import formatting
from jobflow.ui.pages import job_creation_page
from jobflow.ui.state import (
    NAV_TARGET_KEY,
    end_job_creation_session,
    get_job_creation_session,
)
from jobflow.workflow.events import list_logs, read_events

MAX_RECENT_SUBMISSIONS = 20


@st.cache_data
def _load_catalogs(catalog_dir: str) -> tuple[list[dict], list[dict]]:
    d = Path(catalog_dir)
    return load_catalog_json(d / "resources.json"), load_catalog_json(d / "datasets.json")


def _render_recent_submissions() -> None:
    logs = list_logs()
    if not logs:
        st.info("No submissions recorded yet.")
        return
    events = read_events(logs[0], max_events=200)
    df = formatting.recent_submissions(events, limit=MAX_RECENT_SUBMISSIONS)
    st.dataframe(df, use_container_width=True, hide_index=True)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    st.set_page_config(page_title="Create Job", layout="wide")

    cfg = get_workflow_config()

    nav = st.session_state.pop(NAV_TARGET_KEY, None)
    if nav:
        st.success(f"Job {nav['job_id']} created. Continue at {nav['route']}.")

    raw_resources, raw_datasets = _load_catalogs(cfg.catalog_dir)
    session = get_job_creation_session(
        resources=parse_resources(raw_resources),
        datasets=parse_datasets(raw_datasets),
        intake_factory=HttpJobIntake,
    )

    tab_create, tab_recent = st.tabs(["Create Job", "Recent Submissions"])

    with tab_create:
        job_creation_page.render_job_creation_tab(
            st=st,
            store=session["store"],
            controller=session["controller"],
            currency=cfg.currency,
            end_session=end_job_creation_session,
        )

    with tab_recent:
        _render_recent_submissions()


if __name__ == "__main__":  # pragma: no cover
    main()
