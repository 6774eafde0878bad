"""
Legal Eagle
AI-assisted dashboard for analyzing, tracking and comparing legal documents.
"""

from datetime import date

import streamlit as st

from legal_eagle.activity import FEED_DISPLAY_LIMIT, describe_event, time_ago
from legal_eagle.aggregations import aggregate, overall_risk
from legal_eagle.config import configure_logging, settings
from legal_eagle.controller import DashboardController
from legal_eagle.deadlines import DeadlineSelection, calendar_days, month_grid, shift_month
from legal_eagle.errors import LegalEagleError
from legal_eagle.gateway import build_gateway
from legal_eagle.history import HistoryTable, SortDirection, SortKey
from legal_eagle.layout import WIDGETS, available_widgets
from legal_eagle.models import DocumentStatus, ManualDeadline, RiskSeverity
from legal_eagle.seed import SAMPLE_DOCUMENT_NAME, SAMPLE_LEASE
from legal_eagle.storage import JsonFileStore
from legal_eagle.upload import SUPPORTED_SUFFIXES, extract_text, name_for_upload

configure_logging(settings.log_level)

# Page configuration
st.set_page_config(
    page_title="Legal Eagle",
    page_icon="⚖️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS
st.markdown(
    """
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        color: #1E3A5F;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }
    .analysis-card {
        background-color: #f8f9fa;
        border-radius: 10px;
        padding: 1rem 1.5rem;
        margin: 0.5rem 0;
        border-left: 4px solid #1E3A5F;
    }
    .risk-high {
        border-left-color: #dc3545 !important;
        background-color: #fff5f5 !important;
    }
    .risk-medium {
        border-left-color: #ffc107 !important;
        background-color: #fffdf5 !important;
    }
    .risk-low {
        border-left-color: #28a745 !important;
        background-color: #f5fff7 !important;
    }
    .stat-box {
        background: linear-gradient(135deg, #1E3A5F 0%, #2E5A8F 100%);
        color: white;
        padding: 1rem;
        border-radius: 8px;
        text-align: center;
    }
    .stat-number {
        font-size: 2rem;
        font-weight: 700;
    }
    .stat-label {
        font-size: 0.9rem;
        opacity: 0.9;
    }
</style>
""",
    unsafe_allow_html=True,
)

RISK_ICONS = {RiskSeverity.HIGH: "🔴", RiskSeverity.MEDIUM: "🟡", RiskSeverity.LOW: "🟢"}
PAGES = ["📊 Dashboard", "🔍 Analyze", "⚖️ Compare"]


def init_session_state():
    """Initialize session state variables."""
    if "controller" not in st.session_state:
        controller = DashboardController(JsonFileStore(settings.data_dir), settings, build_gateway(settings))
        controller.load()
        st.session_state.controller = controller
    if "history" not in st.session_state:
        st.session_state.history = HistoryTable()
    if "deadline_selection" not in st.session_state:
        st.session_state.deadline_selection = DeadlineSelection(settings.upcoming_limit)
    if "calendar_month" not in st.session_state:
        today = st.session_state.controller.today()
        st.session_state.calendar_month = (today.year, today.month)
    if "page" not in st.session_state:
        st.session_state.page = PAGES[0]
    # page switches requested by buttons land before the radio is drawn
    if st.session_state.get("next_page"):
        st.session_state.page = st.session_state.next_page
        st.session_state.next_page = None
    for key in ("doc_text", "doc_name"):
        if key not in st.session_state:
            st.session_state[key] = ""
    for key in ("analysis_result", "saved_doc_id", "comparison", "editing_deadline"):
        if key not in st.session_state:
            st.session_state[key] = None


def controller() -> DashboardController:
    return st.session_state.controller


def render_sidebar():
    """Render the sidebar with navigation and info."""
    with st.sidebar:
        st.markdown("### ⚖️ Legal Eagle")
        st.radio("Navigate", PAGES, key="page")

        st.markdown("---")
        st.markdown(f"👤 Signed in as **{settings.current_user}**")
        st.markdown(f"🧠 Model: `{settings.model}`")
        if not settings.has_api_key:
            st.info("💡 No API key configured; running in demo mode.")

        st.markdown("---")
        st.markdown("### 📊 Supported Documents")
        st.markdown("""
        - 📄 PDF files
        - 📝 Word documents (.docx)
        - 📃 Text files (.txt)
        """)


# ---------------------------------------------------------------------------
# Dashboard widgets
# ---------------------------------------------------------------------------


def stat_box(column, value, label):
    column.markdown(
        f"""
    <div class="stat-box">
        <div class="stat-number">{value}</div>
        <div class="stat-label">{label}</div>
    </div>
    """,
        unsafe_allow_html=True,
    )


def render_risk_overview(summary):
    risk = summary.risk
    col1, col2, col3, col4 = st.columns(4)
    stat_box(col1, risk.total, "Documents")
    stat_box(col2, f"🔴 {risk.high}", "High Risk")
    stat_box(col3, f"🟡 {risk.medium}", "Medium Risk")
    stat_box(col4, f"🟢 {risk.low}", "Low Risk")


def render_doc_status(summary):
    distribution = summary.status
    if not distribution.total:
        st.markdown("*No documents yet*")
        return
    for status, count in distribution.counts.items():
        st.markdown(f"**{status.value}** · {count}")
        st.progress(distribution.share(status))


def render_frequency(rows, empty_text):
    if not rows:
        st.markdown(f"*{empty_text}*")
        return
    st.bar_chart(
        [{"name": label, "count": count} for label, count in rows],
        x="name",
        y="count",
        horizontal=True,
    )


def render_activity_feed():
    events = controller().activity.latest(FEED_DISPLAY_LIMIT)
    if not events:
        st.markdown("*No recent activity.*")
        return
    for event in events:
        st.markdown(f"{describe_event(event)}  \n<small>{time_ago(event.timestamp)}</small>",
                    unsafe_allow_html=True)


def render_calendar(events):
    year, month = st.session_state.calendar_month
    selection = st.session_state.deadline_selection
    marked = calendar_days(events, year, month)
    today = controller().today()

    prev_col, title_col, next_col = st.columns([1, 3, 1])
    if prev_col.button("◀", key="cal_prev"):
        st.session_state.calendar_month = shift_month(year, month, -1)
        st.rerun()
    title_col.markdown(f"**{date(year, month, 1):%B %Y}**")
    if next_col.button("▶", key="cal_next"):
        st.session_state.calendar_month = shift_month(year, month, 1)
        st.rerun()

    header = st.columns(7)
    for col, label in zip(header, ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa")):
        col.markdown(f"<small>{label}</small>", unsafe_allow_html=True)
    for week in month_grid(year, month):
        cols = st.columns(7)
        for col, day in zip(cols, week):
            if day == 0:
                continue
            current = date(year, month, day)
            label = f"{day}•" if day in marked else str(day)
            kind = "primary" if current == selection.selected or current == today else "secondary"
            if col.button(label, key=f"cal_{current.isoformat()}", type=kind):
                selection.toggle(current)
                st.rerun()


def render_deadline_form():
    """Add or edit a manual deadline."""
    ctrl = controller()
    editing = next(
        (d for d in ctrl.state.manual_deadlines if d.id == st.session_state.editing_deadline), None
    )
    doc_options = [None] + [d.id for d in ctrl.state.documents]
    names = {d.id: d.name for d in ctrl.state.documents}

    with st.form("deadline_form", clear_on_submit=True):
        st.markdown("**✏️ Edit deadline**" if editing else "**➕ Add deadline**")
        event_name = st.text_input("Event", value=editing.event_name if editing else "")
        day = st.date_input(
            "Date", value=date.fromisoformat(editing.date) if editing else ctrl.today()
        )
        current_doc = editing.doc_id if editing and editing.doc_id in names else None
        doc_id = st.selectbox(
            "Related document",
            doc_options,
            index=doc_options.index(current_doc),
            format_func=lambda value: "None" if value is None else names[value],
        )
        submitted = st.form_submit_button("Save")

    if submitted:
        try:
            if editing:
                ctrl.update_manual_deadline(
                    ManualDeadline(editing.id, event_name, day.isoformat(), doc_id)
                )
                st.session_state.editing_deadline = None
            else:
                ctrl.add_manual_deadline(event_name, day.isoformat(), doc_id)
            st.rerun()
        except LegalEagleError as e:
            st.error(str(e))

    if editing and st.button("Cancel edit"):
        st.session_state.editing_deadline = None
        st.rerun()


def render_upcoming_deadlines():
    ctrl = controller()
    events = ctrl.calendar_events()
    selection = st.session_state.deadline_selection

    cal_col, list_col = st.columns([1, 1])
    with cal_col:
        render_calendar(events)
    with list_col:
        if selection.selected:
            st.markdown(f"**Deadlines on {selection.selected:%b %d, %Y}**")
            if st.button("Show all upcoming"):
                selection.clear()
                st.rerun()
        else:
            st.markdown("**Next deadlines**")

        visible = selection.visible(ctrl.upcoming_events())
        if not visible:
            st.markdown("*No deadlines on this date.*" if selection.selected else "*No upcoming deadlines.*")
        for event in visible:
            source = "👤" if event.is_manual else "🤖"
            doc = f" · {event.doc_name}" if event.doc_name else ""
            row, edit_col, delete_col = st.columns([6, 1, 1])
            row.markdown(f"{source} **{event.date:%b %d}** {event.event_name}{doc}")
            if event.is_manual:
                if edit_col.button("✏️", key=f"edit_{event.id}"):
                    st.session_state.editing_deadline = event.id
                    st.rerun()
                if delete_col.button("🗑️", key=f"del_{event.id}"):
                    try:
                        ctrl.delete_manual_deadline(event.id)
                    except LegalEagleError as e:
                        st.error(str(e))
                    st.rerun()

        render_deadline_form()


def render_doc_history():
    ctrl = controller()
    table = st.session_state.history
    table.query = st.text_input("🔎 Search documents", key="history_query")

    sort_cols = st.columns(4)
    for col, key in zip(sort_cols, SortKey):
        arrow = ""
        if table.sort_key == key:
            arrow = " ▲" if table.direction == SortDirection.ASCENDING else " ▼"
        if col.button(f"{key.value.title()}{arrow}", key=f"sort_{key.value}"):
            table.request_sort(key)
            st.rerun()

    rows = table.rows(ctrl.state.documents)
    if not rows:
        st.markdown("*No documents found.*")
    statuses = list(DocumentStatus)
    for doc in rows:
        pick, name, when, risk, status, delete = st.columns([0.5, 4, 2, 1.5, 2.5, 0.7])
        checked = pick.checkbox("Select", value=table.is_selected(doc.id), key=f"pick_{doc.id}",
                                label_visibility="collapsed")
        if checked != table.is_selected(doc.id):
            table.toggle_selection(doc.id)
            st.rerun()
        name.markdown(f"**{doc.name}**")
        when.markdown(f"{doc.created:%b %d, %Y}")
        level = overall_risk(doc)
        risk.markdown(f"{RISK_ICONS[level]} {level.value}")
        chosen = status.selectbox(
            "Status",
            statuses,
            index=statuses.index(doc.status),
            format_func=lambda s: s.value,
            key=f"status_{doc.id}",
            label_visibility="collapsed",
        )
        if chosen != doc.status:
            ctrl.update_document_status(doc.id, chosen)
            st.rerun()
        if delete.button("🗑️", key=f"delete_{doc.id}"):
            ctrl.delete_document(doc.id)
            st.rerun()

    if st.button("⚖️ Compare selected", disabled=not table.can_compare):
        pair = table.compare(ctrl.state.documents)
        for key in [k for k in st.session_state if k.startswith("pick_")]:
            del st.session_state[key]
        if pair is None:
            st.error("Could not find the selected documents for comparison.")
        else:
            run_comparison(pair[0].id, pair[1].id)
            st.session_state.next_page = PAGES[2]
            st.rerun()


WIDGET_RENDERERS = {
    "risk-overview": lambda summary: render_risk_overview(summary),
    "doc-status": lambda summary: render_doc_status(summary),
    "upcoming-deadlines": lambda summary: render_upcoming_deadlines(),
    "counterparty-overview": lambda summary: render_frequency(summary.counterparties, "No counterparties yet"),
    "team-activity-feed": lambda summary: render_activity_feed(),
    "clause-frequency": lambda summary: render_frequency(summary.clauses, "No clauses yet"),
    "doc-history": lambda summary: render_doc_history(),
}


def render_dashboard():
    ctrl = controller()
    summary = aggregate(ctrl.state.documents)

    for widget_id in ctrl.state.layout:
        renderer = WIDGET_RENDERERS.get(widget_id)
        if renderer is None:
            continue
        with st.container(border=True):
            title_col, remove_col = st.columns([10, 1])
            title_col.markdown(f"### {WIDGETS[widget_id]}")
            if remove_col.button("✖", key=f"remove_{widget_id}", help="Remove widget"):
                ctrl.remove_widget(widget_id)
                st.rerun()
            renderer(summary)

    spare = available_widgets(ctrl.state.layout)
    with st.expander("➕ Add widget", expanded=False):
        if not spare:
            st.markdown("*All widgets are on the dashboard.*")
        for widget_id, name in spare:
            if st.button(name, key=f"add_{widget_id}"):
                ctrl.add_widget(widget_id)
                st.rerun()


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def render_analysis_results(result, doc_id=None):
    """Render an AnalysisResult in a structured format."""
    ctrl = controller()

    st.markdown("## 📋 Document Summary")
    st.info(result.summary)

    col_left, col_right = st.columns(2)
    with col_left:
        st.markdown("### 📜 Key Clauses")
        for clause in result.key_clauses:
            st.markdown(
                f"""
            <div class="analysis-card">
                <strong>{clause.title}</strong><br>
                <p>{clause.explanation}</p>
                <small><em>{clause.source_snippet}</em></small>
            </div>
            """,
                unsafe_allow_html=True,
            )

        st.markdown("### 👥 Counterparties")
        if result.counterparties:
            for party in result.counterparties:
                st.markdown(f"- {party}")
        else:
            st.markdown("*No counterparties identified*")

    with col_right:
        st.markdown("### ⚠️ Potential Risks")
        if not result.potential_risks:
            st.success("✅ No significant risks identified")
        for risk in result.potential_risks:
            st.markdown(
                f"""
            <div class="analysis-card risk-{risk.severity.value.lower()}">
                <strong>{RISK_ICONS[risk.severity]} {risk.title}</strong>
                <span style="float: right; font-size: 0.8rem;">{risk.severity.value}</span><br>
                <p>{risk.description}</p>
            </div>
            """,
                unsafe_allow_html=True,
            )

        st.markdown("### 📅 Key Dates")
        if not result.key_dates:
            st.markdown("*No specific dates identified*")
        for key_date in result.key_dates:
            text_col, action_col = st.columns([4, 1])
            text_col.markdown(f"- **{key_date.date}:** {key_date.event_name}")
            if doc_id is None:
                continue
            if ctrl.is_key_date_tracked(doc_id, key_date):
                action_col.markdown("✅ Tracked")
            elif action_col.button("📌 Track", key=f"track_{doc_id}_{key_date.date}_{key_date.event_name}"):
                try:
                    ctrl.track_key_date(doc_id, key_date)
                except LegalEagleError as e:
                    st.error(str(e))
                st.rerun()


def render_analyze_page():
    ctrl = controller()
    st.markdown('<p class="main-header">🔍 Analyze a Document</p>', unsafe_allow_html=True)

    uploaded_file = st.file_uploader(
        "Upload your legal document",
        type=[suffix.lstrip(".") for suffix in SUPPORTED_SUFFIXES],
        help="Supported formats: PDF, Word (.docx), Text (.txt, .md)",
    )
    if uploaded_file and st.session_state.get("uploaded_name") != uploaded_file.name:
        with st.spinner("📄 Extracting text from document..."):
            try:
                st.session_state.doc_text = extract_text(uploaded_file.name, uploaded_file.getvalue())
                st.session_state.doc_name = name_for_upload(st.session_state.get("doc_name"), uploaded_file.name)
                st.session_state.uploaded_name = uploaded_file.name
                st.session_state.analysis_result = None
                st.session_state.saved_doc_id = None
            except LegalEagleError as e:
                st.error(str(e))

    col1, col2 = st.columns(2)
    if col1.button("📄 Use sample lease"):
        st.session_state.doc_text = SAMPLE_LEASE.strip()
        st.session_state.doc_name = SAMPLE_DOCUMENT_NAME
        st.session_state.analysis_result = None
        st.session_state.saved_doc_id = None
        st.rerun()
    if col2.button("✨ Suggest title", disabled=not st.session_state.doc_text):
        with st.spinner("Thinking of a title..."):
            st.session_state.doc_name = ctrl.suggest_title(st.session_state.doc_text or "")
        st.rerun()

    name = st.text_input("Document name", key="doc_name")
    text = st.text_area("Document text", key="doc_text", height=250)

    if st.button("🔍 Analyze Document", type="primary", use_container_width=True):
        with st.spinner("🧠 AI is analyzing your document... This may take a minute."):
            try:
                st.session_state.analysis_result = ctrl.analyze_text(text, name)
                st.session_state.saved_doc_id = None
            except LegalEagleError as e:
                st.error(str(e))

    result = st.session_state.analysis_result
    if result is None:
        return

    st.markdown("---")
    if st.session_state.saved_doc_id is None:
        if st.button("💾 Save to dashboard", type="primary"):
            try:
                doc = ctrl.save_document(text, result, name)
                st.session_state.saved_doc_id = doc.id
                st.success(f"✅ Saved {doc.name}")
            except LegalEagleError as e:
                st.error(str(e))
    render_analysis_results(result, st.session_state.saved_doc_id)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def run_comparison(doc_id_a, doc_id_b):
    with st.spinner("⚖️ Comparing documents..."):
        try:
            st.session_state.comparison = controller().compare_documents(doc_id_a, doc_id_b)
        except LegalEagleError as e:
            st.session_state.comparison = None
            st.error(str(e))


def render_compare_page():
    ctrl = controller()
    st.markdown('<p class="main-header">⚖️ Compare Documents</p>', unsafe_allow_html=True)

    documents = ctrl.state.documents
    if len(documents) < 2:
        st.info("Save at least two documents to compare them.")
        return
    names = {d.id: d.name for d in documents}
    ids = list(names)
    col1, col2 = st.columns(2)
    first_id = col1.selectbox("Document 1", ids, format_func=names.get, key="compare_a")
    second_id = col2.selectbox("Document 2", ids, index=1, format_func=names.get, key="compare_b")
    if st.button("⚖️ Compare", type="primary", disabled=first_id == second_id):
        run_comparison(first_id, second_id)

    if st.session_state.comparison is None:
        return
    first, second, result = st.session_state.comparison

    st.markdown(f"## {first.name} vs {second.name}")
    st.info(result.overall_summary)

    st.markdown("### 📜 Clause Comparison")
    st.dataframe(
        [
            {
                "Clause": c.clause_title,
                "Difference": c.summary_of_difference,
                first.name: c.details_doc1,
                second.name: c.details_doc2,
            }
            for c in result.clause_comparisons
        ],
        use_container_width=True,
    )

    st.markdown("### ⚠️ Risk Profile Differences")
    st.dataframe(
        [
            {
                "Risk": r.risk_title,
                "Difference": r.summary_of_difference,
                first.name: r.risk_in_doc1,
                second.name: r.risk_in_doc2,
            }
            for r in result.risk_profile_differences
        ],
        use_container_width=True,
    )


def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()

    page = st.session_state.page
    if page == PAGES[1]:
        render_analyze_page()
    elif page == PAGES[2]:
        render_compare_page()
    else:
        st.markdown('<p class="main-header">⚖️ Legal Eagle</p>', unsafe_allow_html=True)
        st.markdown(
            '<p class="sub-header">Your documents, deadlines and risks at a glance</p>',
            unsafe_allow_html=True,
        )
        render_dashboard()


if __name__ == "__main__":
    main()
