from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

# fallback order when the preferred potency is not stocked for a remedy
POTENCY_PRIORITY = ("200C", "1M", "30C", "6C", "12C")

HIGH_POTENCY_MIN_SCORE = 80.0
ACUTE_MEDIUM_MIN_SCORE = 50.0
CHRONIC_MEDIUM_MIN_SCORE = 60.0

_ACUTE_REPETITION = {"200C": "Every 1-2 hours", "30C": "Every 2-4 hours"}
_CHRONIC_REPETITION = {"200C": "Once daily", "30C": "Twice daily"}


@dataclass(frozen=True)
class PotencyAdvice:
    potency: str
    repetition: str


def preferred_potency(final_score: float, is_acute: bool) -> str:
    if final_score >= HIGH_POTENCY_MIN_SCORE:
        return "200C"
    medium_floor = ACUTE_MEDIUM_MIN_SCORE if is_acute else CHRONIC_MEDIUM_MIN_SCORE
    if final_score >= medium_floor:
        return "30C"
    return "6C"


def choose_potency(final_score: float, is_acute: bool, supported: Sequence[str] = ()) -> str:
    preferred = preferred_potency(final_score, is_acute)
    if not supported:
        return preferred
    if preferred in supported:
        return preferred
    for potency in POTENCY_PRIORITY:
        if potency in supported:
            return potency
    return supported[0]


def repetition_for(potency: str, is_acute: bool) -> str:
    if is_acute:
        return _ACUTE_REPETITION.get(potency, "Every 4-6 hours")
    return _CHRONIC_REPETITION.get(potency, "Three times daily")


def suggest_potency(final_score: float, is_acute: bool, supported: Sequence[str] = ()) -> PotencyAdvice:
    potency = choose_potency(final_score, is_acute, supported)
    return PotencyAdvice(potency=potency, repetition=repetition_for(potency, is_acute))
