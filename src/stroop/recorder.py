"""
Data recording: TrialResult, CsvWriter, ResultsCsvWriter, results frames,
sequence/manifest/summary export and results loading.
"""
from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

import pandas as pd

if TYPE_CHECKING:
    from stroop.scoring import NoData, StroopSummary
    from stroop.session import TimelineOptions


@dataclass
class TrialResult:
    trial_n: int
    task: str                        # "fixation" | "practice" | "response"
    word: str | None
    color: str | None
    correct_response: int | None
    congruent: bool | None
    response: int | None             # button index, None on timeout
    rt: int | None                   # ms, None on timeout
    correct: bool


RESULT_COLUMNS: list[str] = [
    "trial_n", "task", "word", "color", "correct_response", "congruent",
    "response", "rt", "correct",
]

EXPORT_COLUMNS: list[str] = ["participant_id"] + RESULT_COLUMNS

SEQUENCE_COLUMNS: list[str] = [
    "step_n", "kind", "task", "word", "color", "correct_response", "congruent", "duration_ms",
]

REQUIRED_RESULT_COLUMNS: set[str] = {"task", "congruent", "correct", "rt"}


class CsvWriter:
    def __init__(self, path: Path, columns: list[str], constants: dict | None = None) -> None:
        self._file = open(path, "w", newline="")
        self._writer = csv.DictWriter(self._file, fieldnames=columns)
        self._writer.writeheader()
        self._constants = dict(constants or {})
        self._columns = [c for c in columns if c not in self._constants]

    def append(self, record: object) -> None:
        row = {k: getattr(record, k) for k in self._columns}
        row.update(self._constants)
        self._writer.writerow(row)
        self._file.flush()

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> CsvWriter:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ResultsCsvWriter(CsvWriter):
    """One row per completed step result, tagged with the participant ID."""

    def __init__(self, path: Path, participant_id: str) -> None:
        super().__init__(path, EXPORT_COLUMNS, constants={"participant_id": participant_id})

    def append(self, record: TrialResult) -> None:  # type: ignore[override]
        super().append(record)


def results_frame(results: Iterable[TrialResult]) -> pd.DataFrame:
    """Return results as a DataFrame with RESULT_COLUMNS (empty frame if none)."""
    rows = [{k: getattr(r, k) for k in RESULT_COLUMNS} for r in results]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def results_csv(results: Iterable[TrialResult], participant_id: str) -> str:
    """Return the export CSV as text, the body handed to the data uploader."""
    df = results_frame(results)
    df.insert(0, "participant_id", participant_id)
    return df.to_csv(index=False)


def write_sequence(path: Path, rows: list[dict]) -> None:
    """Write the built timeline (one row per step) to CSV."""
    pd.DataFrame(rows, columns=SEQUENCE_COLUMNS).to_csv(path, index=False)


def _optional(value, cast):
    if value is None or pd.isna(value):
        return None
    return cast(value)


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def load_results(path: Path) -> list[TrialResult]:
    """Read a results CSV written by ResultsCsvWriter back into TrialResults."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Results file not found: {path}")
    df = pd.read_csv(path)
    if not REQUIRED_RESULT_COLUMNS.issubset(df.columns):
        raise ValueError(
            f"Results file must have columns {sorted(REQUIRED_RESULT_COLUMNS)}; got {sorted(df.columns)}"
        )

    results: list[TrialResult] = []
    for idx, row in df.iterrows():
        results.append(TrialResult(
            trial_n=int(row["trial_n"]) if "trial_n" in df.columns else int(idx) + 1,
            task=str(row["task"]),
            word=_optional(row.get("word"), str),
            color=_optional(row.get("color"), str),
            correct_response=_optional(row.get("correct_response"), int),
            congruent=_optional(row["congruent"], _as_bool),
            response=_optional(row.get("response"), int),
            rt=_optional(row["rt"], int),
            correct=bool(_optional(row["correct"], _as_bool)),  # blank cell: not correct
        ))
    return results


def write_manifest(
    run_dir: Path,
    participant_id: str,
    session_time: datetime,
    options: "TimelineOptions",
    seed: int | None,
    n_steps: int,
    total_trials: int,
) -> None:
    from stroop import __version__
    from stroop.config import COLORS, FEEDBACK_DUR_MS, PRACTICE_INCONGRUENT_RATIO, WORDS

    manifest = {
        "stroop_task_version": __version__,
        "participant_id": participant_id,
        "session_time": session_time.isoformat(timespec="seconds"),
        "seed": seed,
        "n_steps": n_steps,
        "total_trials": total_trials,
        "options": options.as_dict(),
        "study_params": {
            "words": WORDS,
            "ink_colors": [c["hex"] for c in COLORS],
            "practice_incongruent_ratio": PRACTICE_INCONGRUENT_RATIO,
            "feedback_dur_ms": FEEDBACK_DUR_MS,
        },
    }
    with open(run_dir / "manifest.json", "w") as f:
        json.dump(manifest, f, indent=2)


def write_summary(
    run_dir: Path,
    participant_id: str,
    summary: "StroopSummary | NoData",
) -> None:
    payload = {"participant_id": participant_id, **summary.as_dict()}
    with open(run_dir / "summary.json", "w") as f:
        json.dump(payload, f, indent=2)
