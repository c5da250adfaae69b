"""
Stimulus record, the fixed 4 x 4 word/ink cross product, and an unbiased shuffle.
No randomness is drawn here except through an explicitly passed Generator.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeVar

import numpy as np

from stroop import config

T = TypeVar("T")


@dataclass(frozen=True)
class Stimulus:
    word: str               # "RED" | "GREEN" | "BLUE" | "YELLOW"
    color: str              # ink: "red" | "green" | "blue" | "yellow"
    correct_response: int   # index into config.CHOICES
    congruent: bool


def generate_stimuli() -> list[Stimulus]:
    """Return all 16 word/ink combinations, words outer, colors inner."""
    stimuli: list[Stimulus] = []
    for word in config.WORDS:
        for color in config.COLORS:
            stimuli.append(Stimulus(
                word=word,
                color=color["hex"],
                correct_response=color["index"],
                congruent=word == color["name"],
            ))
    return stimuli


def partition(stimuli: Sequence[Stimulus]) -> tuple[list[Stimulus], list[Stimulus]]:
    """Split into (congruent, incongruent), preserving order."""
    congruent = [s for s in stimuli if s.congruent]
    incongruent = [s for s in stimuli if not s.congruent]
    return congruent, incongruent


def shuffle(items: Sequence[T], rng: np.random.Generator) -> list[T]:
    """
    Return a shuffled copy of items (backward Fisher-Yates).

    For i from the last index down to 1, swap item i with a uniformly chosen
    item at index <= i. The input sequence is not modified.
    """
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        out[i], out[j] = out[j], out[i]
    return out
