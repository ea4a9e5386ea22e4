"""Parse subject list CSV files."""

import csv
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SubjectEntry:
    """One row of a subject list."""

    subject_id: str
    timeseries: Path
    retest: Path | None = None


def parse_sub_list(csv_path: str | Path) -> list[SubjectEntry]:
    """Parse a subject list CSV with subject_id, timeseries[, retest] columns.

    Relative paths are resolved against the CSV's directory.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Subject list not found: {csv_path}")
    base = csv_path.parent

    result = []
    with csv_path.open(newline="") as f:
        reader = csv.DictReader(f)
        fields = reader.fieldnames or []
        for col in ("subject_id", "timeseries"):
            if col not in fields:
                raise ValueError(f"Subject list {csv_path} lacks a '{col}' column")
        for row in reader:
            retest = (row.get("retest") or "").strip()
            result.append(SubjectEntry(
                subject_id=row["subject_id"].strip(),
                timeseries=base / row["timeseries"].strip(),
                retest=base / retest if retest else None,
            ))
    return result
