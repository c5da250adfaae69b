"""
Session initialisation: timeline options, per-session state, participant IDs
and the output directory.
"""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

import numpy as np

from stroop import config

log = logging.getLogger(__name__)

_COUNT_FIELDS = ("practice_trials_per_condition", "main_trials_per_condition")
_FLAG_FIELDS = ("show_practice_feedback", "include_fixation", "show_instructions", "show_results")


def _is_int(value: object) -> bool:
    # bool is an int subclass; True is not a trial count
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


@dataclass(frozen=True)
class TimelineOptions:
    """
    Options recognised by build_timeline(). Validated on construction so an
    invalid value fails before any timeline exists.
    """

    practice_trials_per_condition: int = config.DEFAULT_PRACTICE_TRIALS_PER_CONDITION
    main_trials_per_condition: int = config.DEFAULT_MAIN_TRIALS_PER_CONDITION
    trial_timeout_ms: int = config.DEFAULT_TRIAL_TIMEOUT_MS
    fixation_min_ms: int = config.DEFAULT_FIXATION_MIN_MS
    fixation_max_ms: int = config.DEFAULT_FIXATION_MAX_MS
    show_practice_feedback: bool = config.DEFAULT_SHOW_PRACTICE_FEEDBACK
    include_fixation: bool = config.DEFAULT_INCLUDE_FIXATION
    show_instructions: bool = config.DEFAULT_SHOW_INSTRUCTIONS
    show_results: bool = config.DEFAULT_SHOW_RESULTS

    def __post_init__(self) -> None:
        for name in _COUNT_FIELDS:
            value = getattr(self, name)
            if not _is_int(value):
                raise ValueError(f"{name} must be an integer; got {value!r}")
            if value < 0:
                raise ValueError(f"{name} must be >= 0; got {value}")

        if not _is_int(self.trial_timeout_ms) or self.trial_timeout_ms <= 0:
            raise ValueError(f"trial_timeout_ms must be a positive integer; got {self.trial_timeout_ms!r}")

        for name in ("fixation_min_ms", "fixation_max_ms"):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer; got {value!r}")
        if self.fixation_min_ms > self.fixation_max_ms:
            raise ValueError(
                f"fixation_min_ms ({self.fixation_min_ms}) must not exceed "
                f"fixation_max_ms ({self.fixation_max_ms})"
            )

        for name in _FLAG_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be a bool; got {value!r}")

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class SessionState:
    """Progress through one session. Owned by the caller, never persisted."""

    practice_completed: bool = False
    main_trials_completed: int = 0
    total_trials: int = 0

    def reset(self) -> None:
        self.practice_completed = False
        self.main_trials_completed = 0
        self.total_trials = 0

    def record_main_trial(self) -> None:
        if self.main_trials_completed >= self.total_trials:
            raise RuntimeError(
                f"Main trial completed beyond total_trials ({self.total_trials})"
            )
        self.main_trials_completed += 1

    @property
    def finished(self) -> bool:
        return self.practice_completed and self.main_trials_completed == self.total_trials


def generate_participant_id(rng: np.random.Generator) -> str:
    """Return a random ID of the form XXXX-XXXX-XXXX-XXXX (uppercase hex)."""
    alphabet = config.PARTICIPANT_ID_ALPHABET
    groups = []
    for _ in range(config.PARTICIPANT_ID_GROUPS):
        idx = rng.integers(0, len(alphabet), size=config.PARTICIPANT_ID_GROUP_LEN)
        groups.append("".join(alphabet[i] for i in idx))
    return "-".join(groups)


def resolve_participant_id(entered: str | None, rng: np.random.Generator) -> str:
    """Use the entered ID if valid, generate one if blank."""
    participant_id = (entered or "").strip()
    if not participant_id:
        participant_id = generate_participant_id(rng)
        log.info("Generated new participant ID: %s", participant_id)
        return participant_id
    if not re.match(config.PARTICIPANT_ID_PATTERN, participant_id):
        raise ValueError(
            f"Participant ID may contain only letters, numbers, and hyphens; got {participant_id!r}"
        )
    log.info("Using entered participant ID: %s", participant_id)
    return participant_id


def make_run_dir(data_dir: Path, participant_id: str, session_time: datetime) -> Path:
    """Create and return data/{participant_id}_{YYYYMMDDTHHMMSS}/."""
    ts = session_time.strftime("%Y%m%dT%H%M%S")
    run_dir = data_dir / f"{participant_id}_{ts}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir
