"""
Chart, view helper and app interaction tests for the Streamlit dashboard.

Interaction tests drive the script with Streamlit's AppTest; no server is needed.

Run with: pytest test_dashboard.py
"""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import config
from config import BAND_COLORS
from dashboard import (
    build_roster,
    create_band_distribution_chart,
    create_radar_chart,
    create_skill_chart,
    escape_markdown,
    format_match_label,
    get_band_color,
)
from load_data import load_evaluations, parse_evaluation_row
from scoring import calculate_cohort_statistics, cohort_skill_medians


SAMPLE_CSV = Path(__file__).parent / "data.csv"
DASHBOARD_SCRIPT = Path(__file__).parent / "dashboard.py"
ALEX_ROW = "2024-01-01,a@x.com,Jane,Alex Kim,5,4,3,5,4,5,Great job,Solid analytical depth"


@pytest.fixture
def sample_records():
    return load_evaluations(str(SAMPLE_CSV))


def test_radar_chart_closes_the_polygon():
    fig = create_radar_chart(parse_evaluation_row(ALEX_ROW))

    assert len(fig.data) == 1
    assert list(fig.data[0].r) == [5, 4, 3, 5, 4, 5, 5]
    assert list(fig.data[0].theta) == [
        "Communication", "Body Language", "Domain Knowledge",
        "Analytical Thinking", "Leadership", "Cultural Fit", "Communication",
    ]
    assert tuple(fig.layout.polar.radialaxis.range) == (0, 5)


def test_radar_chart_with_cohort_median(sample_records):
    medians = cohort_skill_medians(sample_records)
    fig = create_radar_chart(sample_records[0], medians)

    assert [trace.name for trace in fig.data] == ["Rating", "Cohort Median"]
    assert list(fig.data[1].r) == [4.0] * 7


def test_skill_chart_colours_by_band():
    medians = {"Communication": 4.5, "Leadership": 2.0}
    fig = create_skill_chart(medians)

    assert list(fig.data[0].y) == ["Communication", "Leadership"]
    assert list(fig.data[0].marker.color) == [BAND_COLORS["strong"], BAND_COLORS["weak"]]


def test_band_distribution_chart_counts(sample_records):
    stats = calculate_cohort_statistics(sample_records)
    fig = create_band_distribution_chart(stats['band_counts'])

    total = sum(sum(trace.y) for trace in fig.data)
    assert total == len(sample_records)


def test_get_band_color():
    assert get_band_color(4.5) == BAND_COLORS["strong"]
    assert get_band_color(3) == BAND_COLORS["fair"]


def test_format_match_label():
    label = format_match_label(parse_evaluation_row(ALEX_ROW))
    assert label == "Alex Kim · Avg Score: 4.3/5.0 · Evaluated by Jane"


def test_build_roster_sorted_by_average(sample_records):
    roster = build_roster(sample_records)

    assert roster.iloc[0]['Student'] == "Anaya Sharma"
    assert roster.iloc[0]['Band'] == "strong"
    assert roster['Average Score'].tolist() == [4.5, 4.3, 4.2, 3.2, 2.5]


def test_escape_markdown():
    assert escape_markdown("Alex Kim") == "Alex Kim"
    assert escape_markdown("*Sam* #1_x") == r"\*Sam\* \#1\_x"


def test_match_label_escapes_names():
    record = parse_evaluation_row(ALEX_ROW.replace("Alex Kim", "__Alex__"))
    assert format_match_label(record).startswith(r"\_\_Alex\_\_ · Avg Score")


# ==================== APP INTERACTION ====================

def match_buttons(at):
    return [b for b in at.button if (getattr(b, "key", None) or "").startswith("match_")]


@pytest.fixture
def app():
    at = AppTest.from_file(str(DASHBOARD_SCRIPT), default_timeout=30)
    at.run()
    assert not at.exception
    return at


def test_no_selection_shows_prompt(app):
    assert app.text_input(key="search_term").value == ""
    assert match_buttons(app) == []
    assert "Search for a Student" in [s.value for s in app.subheader]


def test_search_lists_matches_in_order(app):
    app.text_input(key="search_term").input("an").run()

    labels = [b.label for b in match_buttons(app)]
    assert len(labels) == 4
    assert labels[0].startswith("Anaya Sharma")
    assert labels[1].startswith("Susan Thomas")


def test_search_without_matches_shows_message(app):
    app.text_input(key="search_term").input("zzz").run()

    assert match_buttons(app) == []
    assert app.info[0].value == 'No students found matching "zzz"'


def test_selecting_a_match_clears_search(app):
    app.text_input(key="search_term").input("an").run()
    app.button(key="match_0").click().run()

    assert not app.exception
    assert app.text_input(key="search_term").value == ""
    assert app.session_state["session"].search_term == ""
    assert app.header[0].value == "Anaya Sharma"


def test_selection_with_empty_search_has_no_match_buttons(app):
    app.text_input(key="search_term").input("kim").run()
    app.button(key="match_0").click().run()
    app.run()

    assert match_buttons(app) == []
    assert app.header[0].value == "Alex Kim"
    assert app.session_state["session"].selection.student_name == "Alex Kim"


def test_failed_load_shows_no_data_warning(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "DATA_PATH", str(tmp_path / "missing.csv"))

    at = AppTest.from_file(str(DASHBOARD_SCRIPT), default_timeout=30)
    at.run()

    assert not at.exception
    assert at.warning[0].value == "No student data loaded."
    assert len(at.text_input) == 0
    assert at.session_state["session"].records == ()
