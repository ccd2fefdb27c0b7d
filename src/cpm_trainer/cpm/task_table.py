import re
from typing import List, Sequence

import pandas as pd

from cpm_trainer.models import Task

# ---------------------------------------------------------
# PREDECESSOR PARSING
# ---------------------------------------------------------

def parse_predecessor_cell(cell) -> List[str]:
    """
    Parse a Predecessors cell like:
      "A"
      "A, B"
      "A; C"
    into a list of task ids: ["A", "C"].
    Blank cells and NaN mean no predecessors.
    """
    if cell is None or (not isinstance(cell, str) and pd.isna(cell)):
        return []

    text = str(cell).strip()
    if not text:
        return []

    return [part.strip() for part in re.split(r"[;,]", text) if part.strip()]


# ---------------------------------------------------------
# FIELD CLEANUP & PREPARATION
# ---------------------------------------------------------

def _cell_text(value) -> str:
    # Numeric id columns come back from read_csv as floats once a blank is present
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def normalize_task_frame(df_input: pd.DataFrame) -> pd.DataFrame:
    """
    Clean and normalize an uploaded task table.

    Guarantees:
      - TaskID and Name are stripped strings
      - Duration is an integer
      - Predecessors exists (blank when missing)
    """
    df = df_input.copy()

    # Normalize column names (strip whitespace)
    df.columns = [str(c).strip() for c in df.columns]

    for col in ["TaskID", "Name", "Duration"]:
        if col not in df.columns:
            raise ValueError(f"Missing required column: '{col}'")

    df["TaskID"] = df["TaskID"].map(_cell_text)
    df["Name"] = df["Name"].fillna("").astype(str).str.strip()

    # ---- Duration ----
    df["Duration"] = pd.to_numeric(df["Duration"], errors="coerce")
    if df["Duration"].isna().any():
        bad = df[df["Duration"].isna()][["TaskID", "Name"]].head()
        raise ValueError(
            "Non-numeric Duration values found. Example rows:\n"
            f"{bad.to_string(index=False)}"
        )
    df["Duration"] = df["Duration"].round().astype(int)

    # ---- Predecessors (optional) ----
    if "Predecessors" not in df.columns:
        df["Predecessors"] = ""
    df["Predecessors"] = df["Predecessors"].map(_cell_text)

    return df[["TaskID", "Name", "Duration", "Predecessors"]]


def tasks_from_frame(df_input: pd.DataFrame) -> List[Task]:
    df = normalize_task_frame(df_input)
    return [
        Task(
            id=row["TaskID"],
            name=row["Name"],
            duration=int(row["Duration"]),
            deps=parse_predecessor_cell(row["Predecessors"]),
        )
        for _, row in df.iterrows()
    ]


def tasks_to_frame(tasks: Sequence[Task]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "TaskID": [t.id for t in tasks],
            "Name": [t.name for t in tasks],
            "Duration": [t.duration for t in tasks],
            "Predecessors": [", ".join(t.deps) for t in tasks],
        },
        columns=["TaskID", "Name", "Duration", "Predecessors"],
    )
