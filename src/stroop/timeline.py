"""
Timeline steps, build_timeline() and the Timeline completion calls.

The whole timeline is built eagerly; a presentation layer walks the steps in
order and reports each completed step through Timeline.finish_step().
No rendering happens here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterator, Union

import numpy as np

from stroop import config
from stroop.recorder import TrialResult
from stroop.scoring import NoData, StroopSummary, feedback_message, score_response, summarize
from stroop.session import SessionState, TimelineOptions
from stroop.stimuli import Stimulus, generate_stimuli, partition, shuffle

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class WelcomeStep:
    kind: ClassVar[str] = "welcome"
    text: str = config.WELCOME_TEXT
    choices: tuple[str, ...] = (config.WELCOME_BUTTON,)
    post_trial_gap_ms: int = config.POST_TRIAL_GAP_MS


@dataclass(frozen=True)
class InstructionsStep:
    kind: ClassVar[str] = "instructions"
    pages: tuple[str, ...] = config.INSTRUCTION_PAGES
    button_labels: tuple[tuple[str, str], ...] = tuple(config.INSTRUCTIONS_BUTTONS.items())


@dataclass(frozen=True)
class FixationStep:
    kind: ClassVar[str] = "fixation"
    duration_ms: int
    task: str = config.TASK_FIXATION
    stimulus_text: str = "+"


@dataclass(frozen=True)
class TrialStep:
    kind: ClassVar[str] = "trial"
    stimulus: Stimulus
    task: str                       # "practice" | "response"
    trial_duration_ms: int
    choices: tuple[str, ...] = config.CHOICES

    @property
    def is_practice(self) -> bool:
        return self.task == config.TASK_PRACTICE

    @property
    def data(self) -> dict:
        """Fields attached to the trial's recorded data."""
        return {
            "task": self.task,
            "word": self.stimulus.word,
            "color": self.stimulus.color,
            "correct_response": self.stimulus.correct_response,
            "congruent": self.stimulus.congruent,
        }


@dataclass(frozen=True)
class FeedbackStep:
    kind: ClassVar[str] = "feedback"
    duration_ms: int = config.FEEDBACK_DUR_MS
    choices: tuple[str, ...] = (config.FEEDBACK_BUTTON,)


@dataclass(frozen=True)
class PracticeDebriefStep:
    kind: ClassVar[str] = "debrief"
    text: str = config.DEBRIEF_TEXT
    choices: tuple[str, ...] = (config.DEBRIEF_BUTTON,)
    post_trial_gap_ms: int = config.POST_TRIAL_GAP_MS


@dataclass(frozen=True)
class ResultsStep:
    kind: ClassVar[str] = "results"
    choices: tuple[str, ...] = (config.RESULTS_BUTTON,)


Step = Union[WelcomeStep, InstructionsStep, FixationStep, TrialStep,
             FeedbackStep, PracticeDebriefStep, ResultsStep]


@dataclass
class Timeline:
    steps: list[Step]
    state: SessionState
    practice_stimuli: list[Stimulus]
    main_stimuli: list[Stimulus]
    results: list[TrialResult] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def trial_steps(self, task: str | None = None) -> list[TrialStep]:
        return [
            s for s in self.steps
            if isinstance(s, TrialStep) and (task is None or s.task == task)
        ]

    def finish_step(
        self,
        step: Step,
        response: int | None = None,
        rt_ms: int | None = None,
    ) -> TrialResult | None:
        """
        Record completion of one step, called in timeline order.

        Trial steps are scored and logged (main trials also advance the
        session state); fixation steps log a fixation row; the practice
        debrief marks practice as completed. Other steps record nothing.
        """
        if isinstance(step, TrialStep):
            stim = step.stimulus
            result = TrialResult(
                trial_n=len(self.results) + 1,
                task=step.task,
                word=stim.word,
                color=stim.color,
                correct_response=stim.correct_response,
                congruent=stim.congruent,
                response=response,
                rt=rt_ms if response is not None else None,
                correct=score_response(response, stim.correct_response),
            )
            if not step.is_practice:
                self.state.record_main_trial()
            self.results.append(result)
            return result

        if isinstance(step, FixationStep):
            result = TrialResult(
                trial_n=len(self.results) + 1,
                task=config.TASK_FIXATION,
                word=None,
                color=None,
                correct_response=None,
                congruent=None,
                response=None,
                rt=None,
                correct=False,
            )
            self.results.append(result)
            return result

        if isinstance(step, PracticeDebriefStep):
            self.state.practice_completed = True
            log.info("Practice completed (%d practice trials)", len(self.practice_stimuli))
        return None

    def last_result(self) -> TrialResult | None:
        """Most recent trial result (fixation rows skipped)."""
        for result in reversed(self.results):
            if result.task != config.TASK_FIXATION:
                return result
        return None

    def feedback_text(self) -> str:
        return feedback_message(self.last_result())

    def summary(self) -> StroopSummary | NoData:
        return summarize(self.results)

    def sequence_rows(self) -> list[dict]:
        """One row per step, for write_sequence()."""
        rows: list[dict] = []
        for step_n, step in enumerate(self.steps, start=1):
            row = {"step_n": step_n, "kind": step.kind}
            if isinstance(step, TrialStep):
                row.update(step.data)
                row["duration_ms"] = step.trial_duration_ms
            elif isinstance(step, (FixationStep, FeedbackStep)):
                row["duration_ms"] = step.duration_ms
                if isinstance(step, FixationStep):
                    row["task"] = step.task
            rows.append(row)
        return rows


def sample_fixation_ms(options: TimelineOptions, rng: np.random.Generator) -> int:
    """Uniform integer duration in [fixation_min_ms, fixation_max_ms], inclusive."""
    return int(rng.integers(options.fixation_min_ms, options.fixation_max_ms, endpoint=True))


def build_practice_stimuli(
    congruent: list[Stimulus],
    incongruent: list[Stimulus],
    n_per_condition: int,
    rng: np.random.Generator,
) -> list[Stimulus]:
    """First n congruent plus first 3n incongruent stimuli, shuffled."""
    practice = (
        congruent[:n_per_condition]
        + incongruent[:n_per_condition * config.PRACTICE_INCONGRUENT_RATIO]
    )
    return shuffle(practice, rng)


def build_main_stimuli(
    congruent: list[Stimulus],
    incongruent: list[Stimulus],
    n_per_condition: int,
    rng: np.random.Generator,
) -> list[Stimulus]:
    """n passes over congruent plus n // 2 passes over incongruent, shuffled."""
    main = congruent * n_per_condition + incongruent * (n_per_condition // 2)
    return shuffle(main, rng)


def build_timeline(
    options: TimelineOptions | None = None,
    state: SessionState | None = None,
    rng: np.random.Generator | None = None,
) -> Timeline:
    """
    Assemble the full ordered timeline for one session.

    welcome -> [instructions] -> practice ([fixation] trial [feedback]) ->
    practice debrief -> main ([fixation] trial) -> [results]

    The given state (or a new one) is reset first and its total_trials set to
    the main-set length. rng drives both shuffling and fixation durations.
    """
    options = options or TimelineOptions()
    if state is None:
        state = SessionState()
    state.reset()
    if rng is None:
        rng = np.random.default_rng()

    congruent, incongruent = partition(generate_stimuli())
    practice_stimuli = build_practice_stimuli(
        congruent, incongruent, options.practice_trials_per_condition, rng
    )
    main_stimuli = build_main_stimuli(
        congruent, incongruent, options.main_trials_per_condition, rng
    )
    state.total_trials = len(main_stimuli)

    steps: list[Step] = [WelcomeStep()]
    if options.show_instructions:
        steps.append(InstructionsStep())

    for stimulus in practice_stimuli:
        if options.include_fixation:
            steps.append(FixationStep(duration_ms=sample_fixation_ms(options, rng)))
        steps.append(TrialStep(
            stimulus=stimulus,
            task=config.TASK_PRACTICE,
            trial_duration_ms=options.trial_timeout_ms,
        ))
        if options.show_practice_feedback:
            steps.append(FeedbackStep())

    steps.append(PracticeDebriefStep())

    for stimulus in main_stimuli:
        if options.include_fixation:
            steps.append(FixationStep(duration_ms=sample_fixation_ms(options, rng)))
        steps.append(TrialStep(
            stimulus=stimulus,
            task=config.TASK_RESPONSE,
            trial_duration_ms=options.trial_timeout_ms,
        ))

    if options.show_results:
        steps.append(ResultsStep())

    log.info(
        "Built timeline: %d steps, %d practice trials, %d main trials",
        len(steps), len(practice_stimuli), len(main_stimuli),
    )
    return Timeline(
        steps=steps,
        state=state,
        practice_stimuli=practice_stimuli,
        main_stimuli=main_stimuli,
    )
