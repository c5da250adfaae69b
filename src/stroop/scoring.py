"""
Trial scoring, practice feedback text and session summary statistics.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Iterable

import pandas as pd

from stroop import config
from stroop.recorder import TrialResult, results_frame


def score_response(response: int | None, correct_response: int) -> bool:
    """A trial is correct only when a response was made and matches the ink index."""
    return response is not None and response == correct_response


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf (not banker's rounding)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ConditionSummary:
    n_trials: int
    n_correct: int
    accuracy_pct: int     # 0 when n_trials == 0
    mean_rt_ms: int       # mean over correct trials; 0 when none correct


@dataclass(frozen=True)
class StroopSummary:
    n_trials: int
    congruent: ConditionSummary
    incongruent: ConditionSummary
    stroop_effect_ms: int

    def as_dict(self) -> dict:
        return {
            "no_data": False,
            "n_trials": self.n_trials,
            "congruent": asdict(self.congruent),
            "incongruent": asdict(self.incongruent),
            "stroop_effect_ms": self.stroop_effect_ms,
        }


@dataclass(frozen=True)
class NoData:
    """Returned by summarize() when there are no response-phase trials."""

    message: str = config.NO_DATA_TEXT

    def __bool__(self) -> bool:
        return False

    def as_dict(self) -> dict:
        return {"no_data": True, "message": self.message}


NO_DATA = NoData()


def _condition_summary(trials: pd.DataFrame) -> ConditionSummary:
    n_trials = len(trials)
    correct = trials[trials["correct"].astype(bool)]
    n_correct = len(correct)
    accuracy = round_half_up(n_correct / n_trials * 100) if n_trials > 0 else 0
    rts = correct["rt"].astype(float).dropna()
    mean_rt = round_half_up(rts.mean()) if len(rts) > 0 else 0
    return ConditionSummary(
        n_trials=n_trials,
        n_correct=n_correct,
        accuracy_pct=accuracy,
        mean_rt_ms=mean_rt,
    )


def summarize(results: Iterable[TrialResult]) -> StroopSummary | NoData:
    """
    Compute congruent/incongruent accuracy and mean correct RT over the
    response-phase trials, and the Stroop effect (incongruent - congruent RT).

    Practice and fixation rows are ignored. Returns NO_DATA if no
    response-phase trials are present.
    """
    df = results_frame(results)
    trials = df[df["task"] == config.TASK_RESPONSE]
    if trials.empty:
        return NO_DATA

    is_congruent = trials["congruent"].astype(bool)
    congruent = _condition_summary(trials[is_congruent])
    incongruent = _condition_summary(trials[~is_congruent])
    return StroopSummary(
        n_trials=len(trials),
        congruent=congruent,
        incongruent=incongruent,
        stroop_effect_ms=incongruent.mean_rt_ms - congruent.mean_rt_ms,
    )


def format_summary(summary: StroopSummary | NoData) -> str:
    """Text for the results screen."""
    if not summary:
        return summary.message
    c, i = summary.congruent, summary.incongruent
    return (
        "Experiment Complete!\n\n"
        f"Congruent trials: {c.accuracy_pct}% correct, {c.mean_rt_ms}ms average\n"
        f"Incongruent trials: {i.accuracy_pct}% correct, {i.mean_rt_ms}ms average\n"
        f"Stroop Effect: {summary.stroop_effect_ms}ms\n\n"
        "Thank you for participating!"
    )


def feedback_message(result: TrialResult | None) -> str:
    """Practice feedback for the most recently completed trial."""
    if result is None or result.correct_response is None:
        raise RuntimeError("Practice feedback requested before any trial was completed")
    if result.correct:
        return "✓ CORRECT!"
    correct_name = config.COLORS[result.correct_response]["name"]
    return (
        f"✗ INCORRECT. The correct answer was {correct_name} "
        f"for {(result.color or '').upper()} ink."
    )
