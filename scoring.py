"""
Evaluation scoring and lookup.

Search, per-student aggregates and cohort roll-ups over the loaded
evaluation records. Everything here is a pure function of its inputs.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from load_data import SKILLS, EvaluationRecord, records_to_dataframe


# Inclusive lower bounds, checked top-down; first match wins
RATING_BANDS = (
    (4.5, "strong"),
    (3.5, "good"),
    (2.5, "fair"),
)
LOWEST_BAND = "weak"
BAND_ORDER = [band for _, band in RATING_BANDS] + [LOWEST_BAND]


@dataclass(frozen=True)
class ChartPoint:
    """One radar chart spoke."""
    skill: str
    value: int


def search_students(records: Sequence[EvaluationRecord], term: str) -> List[EvaluationRecord]:
    """
    Find records whose student name contains the term (case-insensitive).

    An empty term returns no matches rather than every record.
    """
    if not term:
        return []
    needle = term.lower()
    return [r for r in records if needle in r.student_name.lower()]


def average_rating(record: EvaluationRecord) -> float:
    """Mean of the six skill ratings."""
    return sum(record.ratings) / len(SKILLS)


def average_score(record: EvaluationRecord) -> str:
    """Mean of the six skill ratings, formatted to one decimal place."""
    return f"{average_rating(record):.1f}"


def rating_band(score: float) -> str:
    """Map a score (average or single rating) to its display band."""
    for lower_bound, band in RATING_BANDS:
        if score >= lower_bound:
            return band
    return LOWEST_BAND


def average_band(record: EvaluationRecord) -> str:
    """Band of the average as displayed, i.e. after rounding."""
    return rating_band(float(average_score(record)))


def chart_points(record: EvaluationRecord) -> List[ChartPoint]:
    """Radar chart points in fixed skill order."""
    return [ChartPoint(skill=label, value=getattr(record, name)) for name, label in SKILLS]


# ==================== COHORT ROLL-UPS ====================

def calculate_cohort_statistics(records: Sequence[EvaluationRecord]) -> Optional[Dict[str, Any]]:
    """
    Calculate median and average statistics across all evaluations.

    Median of the per-evaluation averages is the primary metric; the
    mean is secondary.

    Returns:
        Dictionary with median, average, min, max, quartiles, counts and
        band distribution, or None when there are no records
    """
    if not records:
        return None

    averages = np.array([average_rating(r) for r in records])

    band_counts = {band: 0 for band in BAND_ORDER}
    for r in records:
        band_counts[average_band(r)] += 1

    return {
        'median': float(np.median(averages)),
        'average': float(round(np.mean(averages), 1)),
        'min': float(averages.min()),
        'max': float(averages.max()),
        'q1': float(np.percentile(averages, 25)),
        'q3': float(np.percentile(averages, 75)),
        'count': len(records),
        'unique_students': len({r.student_name for r in records}),
        'panelists': len({r.panelist_name for r in records}),
        'band_counts': band_counts
    }


def cohort_skill_medians(records: Sequence[EvaluationRecord]) -> Dict[str, float]:
    """Median rating per skill, keyed by skill label in skill order."""
    if not records:
        return {}
    return {
        label: float(np.median([getattr(r, name) for r in records]))
        for name, label in SKILLS
    }


def summarize_panelists(records: Sequence[EvaluationRecord]) -> pd.DataFrame:
    """
    Evaluations per panelist with the mean of their average scores.

    Sorted by evaluation count (descending), then panelist name.
    """
    if not records:
        return pd.DataFrame(columns=['Panelist', 'Evaluations', 'Mean Average Score'])

    df = records_to_dataframe(list(records))
    summary = (
        df.groupby('panelist_name')
        .agg(evaluations=('student_name', 'size'), mean_average=('average_score', 'mean'))
        .reset_index()
        .sort_values(['evaluations', 'panelist_name'], ascending=[False, True])
    )
    summary['mean_average'] = summary['mean_average'].round(1)
    summary.columns = ['Panelist', 'Evaluations', 'Mean Average Score']
    return summary.reset_index(drop=True)
