"""
Mentorship Evaluation Data Loader - CSV Edition

Loads interview-panel evaluations from the panel's CSV export and
transforms them into dashboard-ready records.

Parses the export's fixed column layout:
- Row 0: Header (ignored)
- Rows 1+: Timestamp, Email, Panelist Name, Student Name,
  six skill ratings, Overall summary, Feedback
"""

import re
import sys
from pathlib import Path
from typing import List, Tuple
from dataclasses import dataclass

import pandas as pd


# Skill columns in export order: (record field, display label)
SKILLS: List[Tuple[str, str]] = [
    ("communication", "Communication"),
    ("body_language", "Body Language"),
    ("domain_knowledge", "Domain Knowledge"),
    ("analytical_thinking", "Analytical Thinking"),
    ("leadership", "Leadership"),
    ("cultural_fit", "Cultural Fit"),
]

DEFAULT_RATING = 3

# Column positions in the export
TIMESTAMP_COL = 0
EMAIL_COL = 1
PANELIST_COL = 2
STUDENT_COL = 3
FIRST_RATING_COL = 4
OVERALL_COL = 10
FEEDBACK_COL = 11

# A quoted run (commas allowed) or an unquoted run, then a comma or end of line
FIELD_PATTERN = re.compile(r'\s*("[^"]*"|[^",]*)\s*(,|$)')
LEADING_DIGIT_PATTERN = re.compile(r'^([0-9])')


class LoadFailure(Exception):
    """The evaluation export could not be read."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Could not read {self.path}: {reason}")


@dataclass(frozen=True)
class EvaluationRecord:
    """One panel evaluation of one student."""
    timestamp: str
    email: str
    panelist_name: str
    student_name: str
    communication: int
    body_language: int
    domain_knowledge: int
    analytical_thinking: int
    leadership: int
    cultural_fit: int
    overall: str
    feedback: str

    @property
    def ratings(self) -> List[int]:
        """The six skill ratings in SKILLS order."""
        return [getattr(self, name) for name, _ in SKILLS]


def clean_field(token: str) -> str:
    """Strip surrounding quotes and whitespace from a raw field."""
    return re.sub(r'^"|"$', '', token).strip()


def split_fields(line: str) -> List[str]:
    """
    Split one export line into cleaned field values.

    Handles:
    - "a,b,c" -> ["a", "b", "c"]
    - 'a,"b, c",d' -> ["a", "b, c", "d"]
    - "a,,c" -> ["a", "", "c"]

    Doubled quotes inside a quoted field are not unescaped.
    """
    fields = []
    pos = 0
    while True:
        match = FIELD_PATTERN.match(line, pos)
        if match is None:
            # Stray quote inside an unquoted run: take it up to the next comma
            end = line.find(',', pos)
            if end == -1:
                fields.append(clean_field(line[pos:]))
                break
            fields.append(clean_field(line[pos:end]))
            pos = end + 1
            continue

        fields.append(clean_field(match.group(1)))
        if match.group(2) != ',':
            break
        pos = match.end()

    return fields


def parse_rating(raw) -> int:
    """
    Coerce a raw rating cell to an integer.

    Handles variations like:
    - "4" -> 4
    - "4 - Good" -> 4
    - "" / None / "N/A" -> 3
    """
    if not raw:
        return DEFAULT_RATING
    match = LEADING_DIGIT_PATTERN.match(raw)
    if match:
        return int(match.group(1))
    return DEFAULT_RATING


def parse_evaluation_row(line: str) -> EvaluationRecord:
    """Map one export line onto an EvaluationRecord by column position."""
    cols = split_fields(line)
    # Short rows: missing trailing columns read as empty
    cols += [''] * (FEEDBACK_COL + 1 - len(cols))

    ratings = {
        name: parse_rating(cols[FIRST_RATING_COL + i])
        for i, (name, _) in enumerate(SKILLS)
    }

    return EvaluationRecord(
        timestamp=cols[TIMESTAMP_COL],
        email=cols[EMAIL_COL],
        panelist_name=cols[PANELIST_COL],
        student_name=cols[STUDENT_COL],
        overall=cols[OVERALL_COL],
        feedback=cols[FEEDBACK_COL],
        **ratings
    )


def parse_evaluations_csv(csv_text: str) -> List[EvaluationRecord]:
    """
    Parse the full export text.

    The first line is the header and is skipped. Every following
    non-blank line becomes one record, in file order. Only '\\n' ends a
    line; a trailing '\\r' is trimmed with the last field.
    """
    lines = csv_text.strip().split('\n')
    return [parse_evaluation_row(line) for line in lines[1:] if line.strip()]


def load_evaluations(file_path: str) -> List[EvaluationRecord]:
    """
    Load all evaluations from an export file.

    Raises:
        LoadFailure: if the file is missing, unreadable or not UTF-8
    """
    try:
        csv_text = Path(file_path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise LoadFailure(file_path, e) from e

    records = parse_evaluations_csv(csv_text)
    print(f"  Loaded: {Path(file_path).name} ({len(records)} evaluations)")
    return records


def records_to_dataframe(records: List[EvaluationRecord]) -> pd.DataFrame:
    """
    Flatten records into a DataFrame, one row per evaluation.

    Adds an 'average_score' column (mean of the six ratings, unrounded).
    """
    columns = ['timestamp', 'email', 'panelist_name', 'student_name'] + \
              [name for name, _ in SKILLS] + ['overall', 'feedback']

    df = pd.DataFrame(
        [[getattr(r, col) for col in columns] for r in records],
        columns=columns
    )
    rating_cols = [name for name, _ in SKILLS]
    df[rating_cols] = df[rating_cols].astype(int)
    df['average_score'] = df[rating_cols].mean(axis=1)
    return df


def main(argv: List[str]) -> int:
    from config import DATA_PATH

    data_path = argv[1] if len(argv) > 1 else DATA_PATH

    print("=" * 60)
    print("Mentorship Evaluation Data Loader")
    print("=" * 60)

    try:
        records = load_evaluations(data_path)
    except LoadFailure as e:
        print(f"  Error: {e}")
        return 1

    df = records_to_dataframe(records)

    print("\n" + "=" * 60)
    print("Data Summary")
    print("=" * 60)
    print(f"  Evaluations: {len(df)}")
    print(f"  Students: {df['student_name'].nunique()}")
    print(f"  Panelists: {df['panelist_name'].nunique()}")
    if len(df) > 0:
        print(f"  Median Average Score: {df['average_score'].median():.1f}")
        print(f"  Mean Average Score: {df['average_score'].mean():.1f}")
    return 0


# CLI entry point
if __name__ == "__main__":
    sys.exit(main(sys.argv))
