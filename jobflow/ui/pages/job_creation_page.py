from __future__ import annotations

import asyncio
from typing import Callable

from jobflow.config import STEP_LABELS
from jobflow.core.catalog import datasets_frame, filter_resources, resources_frame
from jobflow.core.contracts import JobDraft, JobType, Priority
from jobflow.core.errors import InvariantViolation
from jobflow.core.validation import Step
from jobflow.ui import formatting
from jobflow.workflow.state import JobDraftStore
from jobflow.workflow.submission import SubmissionController, SubmissionState


def _step_caption(active_step: int) -> str:
    return f"Step {int(active_step) + 1} of {len(STEP_LABELS)}: {STEP_LABELS[int(active_step)]}"


def _resource_type_options(store: JobDraftStore) -> list[str]:
    df = resources_frame(store.resources)
    return ["All"] + sorted(df["type"].astype(str).unique().tolist())


def _visible_resources(store: JobDraftStore, *, resource_type: str, max_price: float | None):
    df = resources_frame(store.resources)
    return filter_resources(
        df,
        resource_type=None if resource_type == "All" else resource_type,
        max_price=max_price,
    )


def _parse_parameters(text: str) -> dict:
    """Parse ``key=value`` lines from the advanced parameters box."""
    out: dict[str, str] = {}
    for raw in (text or "").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ValueError(f"Expected key=value, got {line!r}")
        k, v = line.split("=", 1)
        out[k.strip()] = v.strip()
    return out


def _format_parameters(params: dict) -> str:
    return "\n".join(f"{k}={v}" for k, v in (params or {}).items())


def _submit_and_wait(
    controller: SubmissionController,
    draft: JobDraft,
    *,
    on_result: Callable[[SubmissionState], None] | None = None,
) -> SubmissionState:
    """Drive one submit on a private event loop.

    ``on_result`` runs as soon as the outcome is known so the banner is visible
    while the navigation delay elapses.
    """

    async def _go() -> SubmissionState:
        state = await controller.submit(draft)
        if on_result is not None:
            on_result(state)
        await controller.wait_for_navigation()
        return state

    return asyncio.run(_go())


def _render_errors(st, store: JobDraftStore, *fields: str) -> None:
    errors = store.state.field_errors
    for f in fields:
        if errors.get(f):
            st.error(errors[f])


def _render_basic_info(st, store: JobDraftStore) -> None:
    draft = store.draft

    name = st.text_input("Job Name", value=draft.name, key="jc_name")
    if name != draft.name:
        store.set_field("name", name)
    _render_errors(st, store, "name")

    description = st.text_area("Job Description", value=draft.description, height=90, key="jc_description")
    if description != draft.description:
        store.set_field("description", description)
    _render_errors(st, store, "description")

    c1, c2 = st.columns(2)
    with c1:
        types = list(JobType)
        job_type = st.selectbox(
            "Job Type",
            types,
            index=types.index(draft.job_type) if draft.job_type in types else 0,
            format_func=formatting.format_job_type,
            key="jc_job_type",
        )
        if job_type != draft.job_type:
            store.set_field("job_type", job_type)
        _render_errors(st, store, "job_type")
    with c2:
        priorities = list(Priority)
        priority = st.selectbox(
            "Priority",
            priorities,
            index=priorities.index(draft.priority),
            format_func=lambda p: p.value.capitalize(),
            key="jc_priority",
        )
        if priority != draft.priority:
            store.set_field("priority", priority)
        st.caption("Higher priority may incur additional costs")


def _render_select_resources(st, store: JobDraftStore, *, currency: str) -> None:
    _render_errors(st, store, "selected_resources")

    if not store.resources:
        st.info("No computing resources available. Please try again later.")
        return

    c1, c2 = st.columns(2)
    with c1:
        resource_type = st.selectbox("Type", _resource_type_options(store), key="jc_resource_type")
    with c2:
        max_price = st.number_input("Max price per hour", min_value=0.0, value=0.0, step=0.5, key="jc_max_price")

    visible = _visible_resources(store, resource_type=resource_type, max_price=max_price or None)
    for row in visible.to_dict(orient="records"):
        checked = store.draft.selected_resources.contains(row["id"])
        label = (
            f"{row['name'] or row['id']} | {row['type']} | {row['cpu']} CPU Cores | "
            f"{row['memory']} GB RAM | {row['provider']} | {row['price_per_hour']:g} {currency}/hr"
        )
        if st.checkbox(label, value=checked, key=f"jc_res_{row['id']}") != checked:
            store.toggle_resource(row["id"])


def _render_configure(st, store: JobDraftStore, *, currency: str) -> None:
    left, right = st.columns(2)

    with left:
        st.markdown("**Select Datasets**")
        _render_errors(st, store, "selected_datasets")
        if not store.datasets:
            st.info("No datasets available. Please upload a dataset first.")
        for row in datasets_frame(store.datasets).to_dict(orient="records"):
            checked = store.draft.selected_datasets.contains(row["id"])
            label = f"{row['name'] or row['id']} | Size: {row['size']} | Format: {row['format']}"
            if st.checkbox(label, value=checked, key=f"jc_ds_{row['id']}", help=row["description"] or None) != checked:
                store.toggle_dataset(row["id"])

    with right:
        draft = store.draft
        if draft.job_type == JobType.CUSTOM_CODE:
            st.markdown("**Custom Code**")
            code = st.text_area("Code", value=draft.custom_code, height=240, key="jc_custom_code")
            if code != draft.custom_code:
                store.set_field("custom_code", code)
            _render_errors(st, store, "custom_code")
            st.caption("Supported languages: Python, R, Julia")

        st.markdown("**Runtime Settings**")
        runtime = st.number_input(
            "Estimated Runtime (hours)",
            min_value=0.0,
            value=float(draft.estimated_runtime_hours or 0.0),
            step=0.5,
            key="jc_runtime",
        )
        if runtime != draft.estimated_runtime_hours:
            store.set_field("estimated_runtime_hours", runtime)
        _render_errors(st, store, "estimated_runtime_hours")

        with st.expander("Advanced: job parameters", expanded=False):
            text = st.text_area("key=value per line", value=_format_parameters(draft.parameters), key="jc_params")
            try:
                params = _parse_parameters(text)
            except ValueError as exc:
                st.warning(str(exc))
            else:
                if params != draft.parameters:
                    store.set_field("parameters", params)

        if store.draft.estimated_cost > 0:
            st.success(f"Estimated Cost: {formatting.format_cost(store.draft.estimated_cost, currency)}")


def _render_summary(st, store: JobDraftStore, *, currency: str) -> None:
    rows = formatting.build_summary_rows(store.draft, store.resources, store.datasets, currency=currency)
    for label, value in rows:
        c1, c2 = st.columns([1, 3])
        c1.markdown(f"**{label}**")
        c2.write(value)


def render_job_creation_tab(
    *,
    st,
    store: JobDraftStore,
    controller: SubmissionController,
    currency: str,
    end_session,
) -> None:
    st.subheader("Create New Job")
    st.progress((store.state.active_step + 1) / len(STEP_LABELS), text=_step_caption(store.state.active_step))

    step = store.state.active_step
    if step == Step.BASIC_INFO:
        _render_basic_info(st, store)
    elif step == Step.SELECT_RESOURCES:
        _render_select_resources(st, store, currency=currency)
    elif step == Step.CONFIGURE:
        _render_configure(st, store, currency=currency)
    else:
        _render_summary(st, store, currency=currency)

    notice = formatting.submission_notice(controller.state)
    if notice is not None:
        getattr(st, notice[0])(notice[1])

    back_col, cancel_col, next_col = st.columns([1, 1, 1])
    with back_col:
        if st.button("Back", disabled=step == 0 or controller.is_submitting, key="jc_back"):
            store.retreat()
            st.rerun()
    with cancel_col:
        if st.button("Cancel", disabled=controller.is_submitting, key="jc_cancel"):
            end_session()
            st.rerun()
    with next_col:
        if step < Step.SUMMARY:
            if st.button("Next", type="primary", key="jc_next"):
                store.advance()
                st.rerun()
        else:
            done = controller.state.status == "SUCCEEDED"
            if st.button("Submit Job", type="primary", disabled=controller.is_submitting or done, key="jc_submit"):
                banner = st.empty()

                def _show(state: SubmissionState) -> None:
                    notice = formatting.submission_notice(state)
                    if notice is not None:
                        getattr(banner, notice[0])(notice[1])

                try:
                    with st.spinner("Submitting job..."):
                        result = _submit_and_wait(controller, store.draft, on_result=_show)
                except InvariantViolation as exc:
                    st.error(f"Job draft is incomplete: {exc}")
                    return
                if result.status == "SUCCEEDED":
                    end_session()
                st.rerun()
