"""
Simulated participant for development and pilot runs without a display.

SimulatedParticipant – answers trial steps with a configurable accuracy and
                       condition-dependent normal RTs
run_simulated_session – walks a Timeline through finish_step() in order
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from stroop import config
from stroop.recorder import TrialResult
from stroop.timeline import Timeline, TrialStep

log = logging.getLogger(__name__)


@dataclass
class SimulatedParticipant:
    rng: np.random.Generator
    accuracy: float = config.SIM_ACCURACY
    congruent_rt_ms: float = config.SIM_CONGRUENT_RT_MS
    incongruent_rt_ms: float = config.SIM_INCONGRUENT_RT_MS
    rt_sd_ms: float = config.SIM_RT_SD_MS

    def __post_init__(self) -> None:
        if not 0.0 <= self.accuracy <= 1.0:
            raise ValueError(f"accuracy must be within [0, 1]; got {self.accuracy}")
        if self.rt_sd_ms < 0:
            raise ValueError(f"rt_sd_ms must be >= 0; got {self.rt_sd_ms}")

    def respond(self, step: TrialStep) -> tuple[int | None, int | None]:
        """
        Return (response, rt_ms) for one trial step.
        An RT beyond the trial duration is a timeout: (None, None).
        """
        stim = step.stimulus
        mean_rt = self.congruent_rt_ms if stim.congruent else self.incongruent_rt_ms
        rt_ms = max(config.SIM_MIN_RT_MS, int(round(self.rng.normal(mean_rt, self.rt_sd_ms))))
        if rt_ms > step.trial_duration_ms:
            return None, None

        if self.rng.random() < self.accuracy:
            response = stim.correct_response
        else:
            wrong = [i for i in range(len(step.choices)) if i != stim.correct_response]
            response = wrong[int(self.rng.integers(0, len(wrong)))]
        return response, rt_ms


def run_simulated_session(timeline: Timeline, participant: SimulatedParticipant) -> list[TrialResult]:
    """Complete every step of timeline in order and return its result log."""
    n_main = timeline.state.total_trials
    for step in timeline:
        if isinstance(step, TrialStep):
            response, rt_ms = participant.respond(step)
            result = timeline.finish_step(step, response, rt_ms)
            if not step.is_practice:
                log.info(
                    "Trial %3d/%d  %-6s on %-6s  %-11s  response=%s  RT=%s  %s",
                    timeline.state.main_trials_completed, n_main,
                    result.word, result.color,
                    "congruent" if result.congruent else "incongruent",
                    result.response, result.rt,
                    "correct" if result.correct else "incorrect",
                )
        else:
            timeline.finish_step(step)
    return timeline.results
