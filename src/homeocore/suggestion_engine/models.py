"""
Data contracts of the remedy suggestion engine.

Inputs (ScoredCandidate, CaseProfile) are produced upstream by the case
normalizer, the matching engine and the contradiction engine. RemedyReference
comes from the remedy catalog. Suggestion / SuggestionResult are what the
engine hands to the presentation layer.

All models are frozen and hold tuples so the engine can never mutate what the
caller passed in.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple


# ----------------------------
# Enumerations
# ----------------------------

Confidence = Literal["low", "medium", "high", "very_high"]
WarningType = Literal["contradiction", "incompatibility", "repetition", "contraindication"]
Severity = Literal["low", "medium", "high"]

HIGH_CONFIDENCE = frozenset({"high", "very_high"})


# ----------------------------
# Inputs
# ----------------------------

@dataclass(frozen=True)
class ScoreBreakdown:
    base_score: float = 0.0
    constitution_bonus: float = 0.0
    modality_bonus: float = 0.0
    pathology_support: float = 0.0
    keynote_bonus: float = 0.0
    coverage_bonus: float = 0.0
    contradiction_penalty: float = 0.0
    final_score: float = 0.0  # authoritative ranking value, not necessarily the sum

    def as_output(self) -> Dict[str, float]:
        """Breakdown as exposed on a Suggestion: final_score is renamed total."""
        return {
            "base_score": self.base_score,
            "constitution_bonus": self.constitution_bonus,
            "modality_bonus": self.modality_bonus,
            "pathology_support": self.pathology_support,
            "keynote_bonus": self.keynote_bonus,
            "coverage_bonus": self.coverage_bonus,
            "contradiction_penalty": self.contradiction_penalty,
            "total": self.final_score,
        }


@dataclass(frozen=True)
class SafetyWarning:
    type: WarningType
    message: str
    severity: Severity


@dataclass(frozen=True)
class ScoredCandidate:
    remedy_id: str
    remedy_name: str
    scores: ScoreBreakdown
    confidence: Confidence = "low"
    matched_symptoms: Tuple[str, ...] = ()
    matched_rubrics: Tuple[str, ...] = ()
    warnings: Tuple[SafetyWarning, ...] = ()

    @property
    def final_score(self) -> float:
        return self.scores.final_score


@dataclass(frozen=True)
class MentalSymptom:
    symptom_name: str


@dataclass(frozen=True)
class CaseProfile:
    is_acute: bool = False
    pathology_tags: Tuple[str, ...] = ()
    mental_symptoms: Tuple[MentalSymptom, ...] = ()


# ----------------------------
# Catalog reference data
# ----------------------------

@dataclass(frozen=True)
class MateriaMedica:
    keynotes: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class RemedyReference:
    remedy_id: str
    category: str
    contra_indications: Optional[str] = None
    supported_potencies: Tuple[str, ...] = ()
    materia_medica: Optional[MateriaMedica] = None

    @property
    def keynotes(self) -> Optional[Tuple[str, ...]]:
        if self.materia_medica is None:
            return None
        return self.materia_medica.keynotes


# ----------------------------
# Outputs
# ----------------------------

@dataclass(frozen=True)
class Suggestion:
    remedy_id: str
    remedy_name: str
    category: str
    match_score: float
    confidence: Confidence
    matched_symptoms: Tuple[str, ...]
    matched_rubrics: Tuple[str, ...]
    clinical_reasoning: str
    suggested_potency: str
    repetition: str
    score_breakdown: Dict[str, float]
    warnings: Tuple[SafetyWarning, ...] = ()


@dataclass(frozen=True)
class SuggestionSummary:
    total_remedies: int
    high_confidence: int
    warnings: int


@dataclass(frozen=True)
class SuggestionResult:
    top_remedies: Tuple[Suggestion, ...] = ()
    summary: SuggestionSummary = field(default_factory=lambda: SuggestionSummary(0, 0, 0))
