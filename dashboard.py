"""
Mentorship Evaluation Dashboard

Interactive Streamlit dashboard over the interview panel's CSV export.
Search a student by name to see their radar chart, per-skill ratings
and the panel's written feedback.

Features:
- Student Lookup: name search, radar chart vs cohort median, feedback
- Program Overview: cohort medians, band distribution, panelist summary
"""

import html
import re
from typing import Dict, List, Optional

import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd

import config
from config import BAND_COLORS, DASHBOARD_SUBTITLE, MAX_RATING, PROGRAM_NAME
from load_data import EvaluationRecord, load_evaluations, records_to_dataframe
from scoring import (
    BAND_ORDER,
    average_band,
    average_score,
    calculate_cohort_statistics,
    chart_points,
    cohort_skill_medians,
    rating_band,
    summarize_panelists,
)
from session import DashboardSession


MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|<>~$:])")

CUSTOM_CSS = """
<style>
    .score-card {
        background-color: #f8f9fa;
        border-radius: 10px;
        padding: 12px 16px;
        margin: 6px 0;
    }
    .score-card .skill-label {
        color: #4b5563;
        font-size: 0.8em;
        margin-bottom: 2px;
    }
    .score-card .skill-value {
        font-size: 1.6em;
        font-weight: bold;
    }
    .average-score {
        font-size: 2.6em;
        font-weight: bold;
        text-align: right;
        line-height: 1.1;
    }
    .average-caption {
        color: #6b7280;
        font-size: 0.85em;
        text-align: right;
    }
    .overall-summary {
        background-color: #eef2ff;
        border-left: 4px solid #4f46e5;
        padding: 16px 20px;
        border-radius: 8px;
        color: #312e81;
        font-weight: 500;
        font-size: 1.1em;
    }
    .feedback-text {
        background-color: #f9fafb;
        border: 1px solid #e5e7eb;
        padding: 16px 20px;
        border-radius: 8px;
        color: #374151;
        line-height: 1.6;
    }
</style>
"""


# ==================== DATA LOADING ====================

@st.cache_data
def fetch_evaluations(path: str) -> List[EvaluationRecord]:
    """Load evaluations from CSV (with caching for performance)."""
    return load_evaluations(path)


def get_session() -> DashboardSession:
    """Return this browser session's state, loading the data on first use."""
    if "session" not in st.session_state:
        st.session_state.session = DashboardSession()

    session = st.session_state.session
    if not session.is_loaded:
        with st.spinner("Loading student data..."):
            session.load(lambda: fetch_evaluations(config.DATA_PATH))
    return session


def select_student(record: EvaluationRecord) -> None:
    """Button callback: select a match and clear the search box."""
    st.session_state.session.select(record)
    st.session_state.search_term = ""


# ==================== HELPER FUNCTIONS ====================

def get_band_color(score: float) -> str:
    """Return the display colour for a score."""
    return BAND_COLORS[rating_band(score)]


def escape_markdown(text: str) -> str:
    """Backslash-escape markdown syntax in free text from the export."""
    return MARKDOWN_SPECIAL.sub(r"\\\1", text)


def format_match_label(record: EvaluationRecord) -> str:
    """Search result line: name, average and panelist."""
    return (f"{escape_markdown(record.student_name)} · Avg Score: {average_score(record)}/{MAX_RATING:.1f}"
            f" · Evaluated by {escape_markdown(record.panelist_name)}")


def build_roster(records: List[EvaluationRecord]) -> pd.DataFrame:
    """All evaluations, best average first."""
    df = records_to_dataframe(records)
    roster = pd.DataFrame({
        'Student': df['student_name'],
        'Panelist': df['panelist_name'],
        'Timestamp': df['timestamp'],
        'Average Score': df['average_score'].round(1),
        'Band': [average_band(r) for r in records]
    })
    return roster.sort_values(['Average Score', 'Student'], ascending=[False, True])


# ==================== CHART FUNCTIONS ====================

def create_radar_chart(record: EvaluationRecord,
                       cohort_medians: Optional[Dict[str, float]] = None) -> go.Figure:
    """Create radar chart of a student's six ratings, optionally vs cohort median."""
    points = chart_points(record)
    skills = [p.skill for p in points]
    values = [p.value for p in points]

    fig = go.Figure()

    fig.add_trace(go.Scatterpolar(
        r=values + [values[0]],
        theta=skills + [skills[0]],
        fill='toself',
        name='Rating',
        line_color='#4f46e5',
        line_width=2,
        fillcolor='rgba(79, 70, 229, 0.5)'
    ))

    if cohort_medians:
        medians = [cohort_medians[s] for s in skills]
        fig.add_trace(go.Scatterpolar(
            r=medians + [medians[0]],
            theta=skills + [skills[0]],
            name='Cohort Median',
            line_color='#9ca3af',
            line_dash='dash',
            line_width=2
        ))

    fig.update_layout(
        polar=dict(radialaxis=dict(visible=True, range=[0, MAX_RATING], dtick=1)),
        showlegend=True,
        legend=dict(orientation='h', y=-0.1),
        height=450
    )

    return fig


def create_skill_chart(skill_medians: Dict[str, float], title: str = "Cohort Median by Skill") -> go.Figure:
    """Create horizontal bar chart of per-skill medians, coloured by band."""
    skill_names = list(skill_medians.keys())
    medians = list(skill_medians.values())
    colors = [get_band_color(m) for m in medians]

    fig = go.Figure(go.Bar(
        x=medians,
        y=skill_names,
        orientation='h',
        marker_color=colors,
        text=[f"{m:.1f}" for m in medians],
        textposition='outside'
    ))

    fig.update_layout(
        title=title,
        xaxis_title="Rating",
        yaxis_title="",
        xaxis=dict(range=[0, MAX_RATING + 0.5]),
        yaxis=dict(autorange='reversed'),
        height=max(300, len(skill_names) * 50)
    )

    return fig


def create_band_distribution_chart(band_counts: Dict[str, int]) -> go.Figure:
    """Create bar chart of how many evaluations fall in each band."""
    df = pd.DataFrame({
        'Band': BAND_ORDER,
        'Evaluations': [band_counts.get(band, 0) for band in BAND_ORDER]
    })

    fig = px.bar(
        df,
        x='Band',
        y='Evaluations',
        color='Band',
        color_discrete_map=BAND_COLORS,
        category_orders={'Band': BAND_ORDER},
        text_auto=True
    )

    fig.update_layout(
        title="Average Score Bands",
        showlegend=False,
        height=350
    )

    return fig


# ==================== PAGES ====================

def render_student_lookup(session: DashboardSession) -> None:
    if not session.records:
        st.warning("No student data loaded.")
        return

    term = st.text_input(
        "Search",
        key="search_term",
        placeholder="Search for a student by name...",
        label_visibility="collapsed"
    )
    session.set_search_term(term)

    # Search Results
    matches = session.matches
    if session.search_term and matches:
        with st.container(height=min(64 * len(matches), 320), border=True):
            for i, record in enumerate(matches):
                st.button(
                    format_match_label(record),
                    key=f"match_{i}",
                    on_click=select_student,
                    args=(record,),
                    use_container_width=True
                )
    elif session.search_term:
        st.info(f'No students found matching "{session.search_term}"')

    record = session.selection
    if record is None:
        st.divider()
        st.subheader("Search for a Student")
        st.caption("Use the search bar above to find and view student performance data")
        return

    st.divider()

    # Header Card
    col_name, col_score = st.columns([3, 1])
    with col_name:
        st.header(escape_markdown(record.student_name))
        st.markdown(f"Evaluated by: **{escape_markdown(record.panelist_name)}**")
        st.caption(escape_markdown(record.timestamp))
    with col_score:
        avg = average_score(record)
        st.markdown(
            f"<div class='average-score' style='color: {BAND_COLORS[average_band(record)]};'>{avg}</div>"
            f"<div class='average-caption'>Average Score<br>out of {MAX_RATING:.1f}</div>",
            unsafe_allow_html=True
        )

    # Chart
    st.subheader("Performance Metrics")
    st.plotly_chart(
        create_radar_chart(record, cohort_skill_medians(session.records)),
        use_container_width=True
    )

    # Rating Cards
    cols = st.columns(3)
    for i, point in enumerate(chart_points(record)):
        with cols[i % 3]:
            st.markdown(
                f"<div class='score-card'>"
                f"<div class='skill-label'>{point.skill}</div>"
                f"<div class='skill-value' style='color: {get_band_color(point.value)};'>"
                f"{point.value}/{MAX_RATING}</div>"
                f"</div>",
                unsafe_allow_html=True
            )

    st.subheader("Overall Interview Performance")
    st.markdown(
        f"<div class='overall-summary'>{html.escape(record.overall)}</div>",
        unsafe_allow_html=True
    )

    st.subheader("Qualitative Feedback & Comments")
    st.markdown(
        f"<div class='feedback-text'>{html.escape(record.feedback)}</div>",
        unsafe_allow_html=True
    )


def render_program_overview(session: DashboardSession) -> None:
    st.header("Program Overview")

    records = list(session.records)
    stats = calculate_cohort_statistics(records)
    if stats is None:
        st.warning("No student data loaded.")
        return

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Median Average Score", f"{stats['median']:.1f}")
        st.caption(f"Average: {stats['average']:.1f}")
    with col2:
        st.metric("Evaluations", stats['count'])
    with col3:
        st.metric("Students", stats['unique_students'])
    with col4:
        st.metric("Panelists", stats['panelists'])

    st.divider()

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(create_skill_chart(cohort_skill_medians(records)), use_container_width=True)
    with col2:
        st.plotly_chart(create_band_distribution_chart(stats['band_counts']), use_container_width=True)

    st.subheader("Panelists")
    st.dataframe(summarize_panelists(records), use_container_width=True, hide_index=True)

    st.subheader("All Evaluations")
    st.dataframe(build_roster(records), use_container_width=True, hide_index=True)


# ==================== MAIN DASHBOARD ====================

def main():
    # Page configuration
    st.set_page_config(
        page_title=f"{PROGRAM_NAME} - {DASHBOARD_SUBTITLE}",
        page_icon="🎓",
        layout="wide"
    )
    st.markdown(CUSTOM_CSS, unsafe_allow_html=True)

    session = get_session()

    st.title(PROGRAM_NAME)
    st.caption(DASHBOARD_SUBTITLE)

    # Sidebar navigation
    st.sidebar.title("Navigation")
    tab_selection = st.sidebar.radio(
        "Select View:",
        ["Student Lookup", "Program Overview"]
    )

    st.sidebar.markdown("---")
    st.sidebar.caption(f"{len(session.records)} evaluations loaded")
    if session.selection is not None:
        st.sidebar.button("Clear selection", on_click=session.clear_selection)

    if tab_selection == "Student Lookup":
        render_student_lookup(session)
    elif tab_selection == "Program Overview":
        render_program_overview(session)


if __name__ == "__main__":
    main()
