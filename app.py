"""Streamlit UI for the JobHub dashboard."""
from __future__ import annotations

import sys
from pathlib import Path
from urllib.parse import parse_qsl, quote, urlencode

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobhub.config import ensure_dirs, load_settings
from jobhub.controller import RECRUITER, ROLES, DashboardController, job_to_form
from jobhub.errors import StorageError
from jobhub.log import get_logger
from jobhub.models import ALL_COMPANIES, APPLICATION_SORT_KEYS, FILTER_OPTIONS, SORT_KEYS, Job, format_salary
from jobhub.query import use_system_collation
from jobhub.sources import get_source
from jobhub.storage import LocalStore

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

SORT_LABELS: dict[str, str] = {
    "dateDesc": "Newest first",
    "dateAsc": "Oldest first",
    "salaryDesc": "Salary: high to low",
    "salaryAsc": "Salary: low to high",
    "titleAsc": "Title: A to Z",
    "titleDesc": "Title: Z to A",
}

DIMENSION_LABELS: dict[str, str] = {
    "type": "Job type",
    "location": "Location",
    "experience": "Experience",
}

_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #e8eaf6 0%, #f3e5f5 40%, #e0f2f1 100%);
}
.salary-box {
    padding: 0.75rem 1rem;
    background: rgba(255,255,255,0.65);
    border: 1px solid rgba(74,144,217,0.25);
    border-radius: 12px;
    font-size: 1.3rem;
    font-weight: 700;
}
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


def _seed_widgets(ctrl: DashboardController) -> None:
    """Copy the (URL-hydrated) query into widget state before first render."""
    d = ctrl.descriptor
    st.session_state["search"] = d.search
    st.session_state["sort"] = d.sort
    for dim, options in FILTER_OPTIONS.items():
        st.session_state[f"f_{dim}"] = [o for o in options if o in d.selected(dim)]
    company = d.company_filter
    st.session_state["company"] = company if company in ctrl.companies() else ALL_COMPANIES
    st.session_state["salary_min"] = None if d.salary_min is None else float(d.salary_min)
    st.session_state["salary_max"] = None if d.salary_max is None else float(d.salary_max)


def _controller() -> DashboardController:
    ctrl = st.session_state.get("controller")
    if ctrl is not None:
        return ctrl

    use_system_collation()
    settings = load_settings()
    ensure_dirs(settings)
    ctrl = DashboardController(LocalStore(settings.data_dir), get_source(settings))
    with st.spinner("Loading jobs…"):
        ctrl.load()
    ctrl.hydrate(urlencode(st.query_params.to_dict(), quote_via=quote))
    _seed_widgets(ctrl)
    st.session_state["controller"] = ctrl
    return ctrl


def _sync_url(ctrl: DashboardController) -> None:
    st.query_params.from_dict(dict(parse_qsl(ctrl.query_string())))


def _add_token(token: str) -> None:
    current = st.session_state.get("search", "").strip()
    st.session_state["search"] = f"{current} {token}" if current else token


def _clear_filters() -> None:
    st.session_state["search"] = ""
    st.session_state["sort"] = "dateDesc"
    for dim in FILTER_OPTIONS:
        st.session_state[f"f_{dim}"] = []


def _clear_salary() -> None:
    st.session_state["salary_min"] = None
    st.session_state["salary_max"] = None


def _apply(ctrl: DashboardController, job: Job) -> None:
    try:
        result = ctrl.apply(job.id)
    except StorageError as exc:
        st.error(f"Could not save application: {exc}")
        return
    if result.applied:
        st.success("Application submitted!")
    else:
        st.info("You already applied to this job.")


def _tag_buttons(job: Job, prefix: str, limit: int | None = None) -> None:
    tags = job.tags[:limit] if limit else job.tags
    if not tags:
        return
    cols = st.columns(len(tags))
    for i, (col, tag) in enumerate(zip(cols, tags)):
        col.button(tag, key=f"{prefix}-{job.id}-{i}", on_click=_add_token, args=(tag,))


# ── Sidebar ──────────────────────────────────────────────────────────────


def _sidebar(ctrl: DashboardController) -> None:
    counts = ctrl.counts()
    with st.sidebar:
        role = st.selectbox("Role", ROLES, index=ROLES.index(ctrl.role), key="role")
        ctrl.set_role(role)

        st.divider()
        st.markdown("**Filters**")
        for dim, options in FILTER_OPTIONS.items():
            st.multiselect(
                DIMENSION_LABELS[dim],
                options=options,
                key=f"f_{dim}",
                format_func=lambda o, dim=dim: f"{o} ({counts[dim].get(o, 0)})",
            )
        st.button("Clear filters", on_click=_clear_filters, use_container_width=True)

        st.divider()
        st.selectbox("Company", [ALL_COMPANIES] + ctrl.companies(), key="company")

        st.markdown("**Salary**")
        s1, s2 = st.columns(2)
        s1.number_input("Min", min_value=0.0, step=5000.0, key="salary_min")
        s2.number_input("Max", min_value=0.0, step=5000.0, key="salary_max")
        st.button("Clear salary", on_click=_clear_salary, use_container_width=True)


# ── Page: Jobs ───────────────────────────────────────────────────────────


def _job_details(ctrl: DashboardController, job: Job | None) -> None:
    if job is None:
        st.info("Select a job to see its details.")
        return
    st.markdown(
        f'<div class="salary-box">{format_salary(job.salary_min, job.salary_max)}'
        f'<div style="font-size:0.75rem">per year</div></div>',
        unsafe_allow_html=True,
    )
    st.subheader(job.title)
    st.caption(f"🏢 {job.company} · 📍 {job.location} · 💼 {job.employment_type} · {job.experience}")
    _tag_buttons(job, "detail")
    st.markdown("#### Job Description")
    st.write(job.description)
    st.markdown("#### Requirements")
    st.markdown("\n".join(f"- {r}" for r in job.requirements) or "—")
    st.markdown("#### Benefits")
    st.markdown("\n".join(f"- {b}" for b in job.benefits) or "—")

    if st.button("Apply for this Position", type="primary", key=f"detail-apply-{job.id}"):
        _apply(ctrl, job)
    if ctrl.role == RECRUITER and st.button("Edit", key=f"edit-{job.id}"):
        st.session_state["editing"] = job.id
        st.switch_page(post_page)


def page_jobs() -> None:
    ctrl = _controller()
    _sidebar(ctrl)

    st.header("Find your next role")
    if ctrl.last_fetch is not None and not ctrl.last_fetch.ok:
        st.warning("Remote job board unavailable. Showing locally saved jobs only.")

    c1, c2 = st.columns([3, 1])
    c1.text_input("Search", key="search", placeholder="Title, company, location, skill…")
    c2.selectbox("Sort", SORT_KEYS, key="sort", format_func=SORT_LABELS.get)

    view = ctrl.update_query(
        search=st.session_state["search"],
        sort=st.session_state["sort"],
        filters={dim: set(st.session_state[f"f_{dim}"]) for dim in FILTER_OPTIONS},
        company=None if st.session_state["company"] == ALL_COMPANIES else st.session_state["company"],
        salary_min=st.session_state["salary_min"],
        salary_max=st.session_state["salary_max"],
    )

    left, right = st.columns([3, 2])
    with left:
        st.caption(f"{len(view)} jobs found")
        for job in view:
            with st.container(border=True):
                st.markdown(f"**{job.title}** — {job.company}")
                st.caption(
                    f"📍 {job.location} · 💼 {job.employment_type} · "
                    f"💰 {format_salary(job.salary_min, job.salary_max)}"
                )
                _tag_buttons(job, "card", limit=6)
                b1, b2 = st.columns(2)
                b1.button("Details", key=f"select-{job.id}", on_click=ctrl.select_job, args=(job.id,))
                if b2.button("Apply Now", type="primary", key=f"apply-{job.id}"):
                    _apply(ctrl, job)
    with right:
        _job_details(ctrl, ctrl.selected_job())

    _sync_url(ctrl)


# ── Page: Applications ───────────────────────────────────────────────────


def page_applications() -> None:
    ctrl = _controller()
    st.header("My Applications")

    sort = st.selectbox("Sort", APPLICATION_SORT_KEYS, key="apps_sort", format_func=SORT_LABELS.get)
    rows = ctrl.applications(sort)
    if not rows:
        st.info("No applications yet.")
    else:
        import pandas as pd

        df = pd.DataFrame(
            [
                {
                    "title": a.job.title,
                    "company": a.job.company,
                    "location": a.job.location,
                    "type": a.job.employment_type,
                    "applied_at": a.applied_at,
                }
                for a in rows
            ]
        )
        df["applied_at"] = pd.to_datetime(df["applied_at"], errors="coerce", utc=True)
        st.dataframe(
            df,
            use_container_width=True,
            column_config={"applied_at": st.column_config.DatetimeColumn("Applied", format="YYYY-MM-DD")},
            hide_index=True,
        )

    if st.button("Clear application history"):
        ctrl.clear_applications()
        st.success("Application history cleared.")
        st.rerun()


# ── Page: Post a Job ─────────────────────────────────────────────────────


def page_post_job() -> None:
    ctrl = _controller()
    editing = ctrl.job(st.session_state["editing"]) if st.session_state.get("editing") else None
    st.header("Edit Job" if editing else "Post a Job")

    if ctrl.role != RECRUITER:
        st.warning("Only recruiters can post jobs. Switch role on the **Jobs** page.")
        return

    def _index(options: list[str], value: str | None) -> int:
        return options.index(value) if value in options else 0

    prefill = job_to_form(editing)
    with st.form("job_form"):
        title = st.text_input("Title", value=prefill["title"])
        company = st.text_input("Company", value=prefill["company"])
        c1, c2, c3 = st.columns(3)
        location = c1.selectbox(
            "Location", FILTER_OPTIONS["location"],
            index=_index(FILTER_OPTIONS["location"], prefill["location"]),
        )
        employment_type = c2.selectbox(
            "Job type", FILTER_OPTIONS["type"],
            index=_index(FILTER_OPTIONS["type"], prefill["employment_type"]),
        )
        experience = c3.selectbox(
            "Experience", FILTER_OPTIONS["experience"],
            index=_index(FILTER_OPTIONS["experience"], prefill["experience"] or "Mid"),
        )
        s1, s2 = st.columns(2)
        salary_min = s1.text_input("Min salary", value=prefill["salary_min"])
        salary_max = s2.text_input("Max salary", value=prefill["salary_max"])
        tags = st.text_input("Tags (comma separated)", value=prefill["tags"])
        description = st.text_area("Description", value=prefill["description"])
        requirements = st.text_area("Requirements (one per line)", value=prefill["requirements"])
        benefits = st.text_area("Benefits (one per line)", value=prefill["benefits"])
        save = st.form_submit_button("Save Job", type="primary", use_container_width=True)

    if save:
        try:
            job = ctrl.create_or_update_job({
                "id": editing.id if editing else "",
                "title": title, "company": company,
                "location": location, "employment_type": employment_type,
                "experience": experience,
                "salary_min": salary_min, "salary_max": salary_max,
                "tags": tags, "description": description,
                "requirements": requirements, "benefits": benefits,
            })
        except StorageError as exc:
            st.error(f"Could not save job: {exc}")
        else:
            st.session_state.pop("editing", None)
            st.success(f"Saved **{job.title}**.")

    if editing and st.button("Delete this job"):
        try:
            deleted = ctrl.delete_job(editing.id)
        except StorageError as exc:
            st.error(f"Could not delete job: {exc}")
        else:
            st.session_state.pop("editing", None)
            if deleted:
                st.success("Job deleted.")
            else:
                st.info("Only locally posted or edited jobs can be deleted.")


# ── Main ─────────────────────────────────────────────────────────────────


def _wrap(page):
    def run() -> None:
        st.markdown(_CSS, unsafe_allow_html=True)
        page()

    run.__name__ = page.__name__
    return run


jobs_page = st.Page(_wrap(page_jobs), title="Jobs", icon="💼", url_path="jobs", default=True)
applications_page = st.Page(_wrap(page_applications), title="Applications", icon="📋", url_path="applications")
post_page = st.Page(_wrap(page_post_job), title="Post a Job", icon="📝", url_path="post")

nav = st.navigation([jobs_page, applications_page, post_page])
nav.run()
