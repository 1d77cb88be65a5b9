from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from .models import CaseProfile, RemedyReference, ScoredCandidate

_CENTS = Decimal("0.01")


def _fixed2(value: float) -> str:
    """Two decimals from the exact binary value, ties away from zero (12.125 -> 12.13)."""
    return str(Decimal(float(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _num(value: float) -> str:
    """Render a bonus the way clinicians see it: 5 not 5.0, 2.5 stays 2.5."""
    v = float(value)
    if v.is_integer():
        return str(int(v))
    return repr(v)


def matching_keynotes(reference: Optional[RemedyReference], case: CaseProfile) -> List[str]:
    if reference is None or not reference.keynotes:
        return []

    names = [s.symptom_name.lower() for s in case.mental_symptoms]
    matched: List[str] = []
    for keynote in reference.keynotes:
        needle = keynote.lower()
        if keynote in matched:
            continue
        if any(needle in name for name in names):
            matched.append(keynote)
    return matched


def build_clinical_reasoning(
    candidate: ScoredCandidate,
    case: CaseProfile,
    reference: Optional[RemedyReference],
) -> str:
    s = candidate.scores
    reasons: List[str] = [
        f"Base score: {_fixed2(s.base_score)} (from {len(candidate.matched_rubrics)} matched rubrics)"
    ]

    if s.constitution_bonus > 0:
        reasons.append(
            f"Constitution match: +{_num(s.constitution_bonus)} (matches patient's constitutional traits)"
        )
    if s.modality_bonus > 0:
        reasons.append(
            f"Modality match: +{_num(s.modality_bonus)} (matches patient's better/worse conditions)"
        )
    if s.pathology_support > 0:
        reasons.append(
            f"Pathology support: +{_num(s.pathology_support)} (indicated for {', '.join(case.pathology_tags)})"
        )
    if s.keynote_bonus > 0:
        reasons.append(
            f"Keynote match: +{_num(s.keynote_bonus)} (remedy's keynotes match patient symptoms)"
        )
    if s.coverage_bonus > 0:
        reasons.append(
            f"Symptom coverage: +{_num(s.coverage_bonus)} (covers high percentage of patient symptoms)"
        )
    if s.contradiction_penalty > 0:
        reasons.append(f"Safety adjustment: -{_num(s.contradiction_penalty)} (contradictions detected)")

    keynotes = matching_keynotes(reference, case)
    if keynotes:
        reasons.append(f"Keynotes match: {', '.join(keynotes)}")

    return ". ".join(reasons)
