# src/homeocore/api/schemas.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from homeocore.suggestion_engine.models import (
    CaseProfile,
    Confidence,
    MentalSymptom,
    SafetyWarning,
    ScoreBreakdown,
    ScoredCandidate,
    Severity,
    WarningType,
)


# ── Request models ────────────────────────────────────────────────────────────

class WarningIn(BaseModel):
    type: WarningType
    message: str
    severity: Severity

    def to_domain(self) -> SafetyWarning:
        return SafetyWarning(type=self.type, message=self.message, severity=self.severity)


class ScoreBreakdownIn(BaseModel):
    base_score: float = 0.0
    constitution_bonus: float = 0.0
    modality_bonus: float = 0.0
    pathology_support: float = 0.0
    keynote_bonus: float = 0.0
    coverage_bonus: float = 0.0
    contradiction_penalty: float = 0.0
    final_score: float


class CandidateIn(BaseModel):
    remedy_id: str = Field(..., min_length=1, max_length=64)
    remedy_name: str = Field(..., min_length=1, max_length=128)
    scores: ScoreBreakdownIn
    confidence: Confidence = "low"
    matched_symptoms: List[str] = Field(default_factory=list)
    matched_rubrics: List[str] = Field(default_factory=list)
    warnings: List[WarningIn] = Field(default_factory=list)

    @field_validator("matched_symptoms")
    @classmethod
    def dedupe_symptoms(cls, v: List[str]) -> List[str]:
        """Upstream promises unique symptom names; keep first occurrence if not."""
        return list(dict.fromkeys(v))

    def to_domain(self) -> ScoredCandidate:
        return ScoredCandidate(
            remedy_id=self.remedy_id,
            remedy_name=self.remedy_name,
            scores=ScoreBreakdown(**self.scores.model_dump()),
            confidence=self.confidence,
            matched_symptoms=tuple(self.matched_symptoms),
            matched_rubrics=tuple(self.matched_rubrics),
            warnings=tuple(w.to_domain() for w in self.warnings),
        )


class MentalSymptomIn(BaseModel):
    symptom_name: str


class CaseProfileIn(BaseModel):
    is_acute: bool = False
    pathology_tags: List[str] = Field(default_factory=list)
    mental_symptoms: List[MentalSymptomIn] = Field(default_factory=list)

    def to_domain(self) -> CaseProfile:
        return CaseProfile(
            is_acute=self.is_acute,
            pathology_tags=tuple(self.pathology_tags),
            mental_symptoms=tuple(MentalSymptom(m.symptom_name) for m in self.mental_symptoms),
        )


class SuggestionRequest(BaseModel):
    candidates: List[CandidateIn]
    case_profile: CaseProfileIn = Field(default_factory=CaseProfileIn)


# ── Response models ───────────────────────────────────────────────────────────

class WarningOut(BaseModel):
    type: WarningType
    message: str
    severity: Severity


class SuggestionOut(BaseModel):
    remedy_id: str
    remedy_name: str
    category: str
    match_score: float
    confidence: Confidence
    matched_symptoms: List[str]
    matched_rubrics: List[str]
    clinical_reasoning: str
    suggested_potency: str
    repetition: str
    score_breakdown: Dict[str, float]
    warnings: List[WarningOut]


class SummaryOut(BaseModel):
    total_remedies: int
    high_confidence: int
    warnings: int


class SuggestionResponse(BaseModel):
    top_remedies: List[SuggestionOut]
    summary: SummaryOut
    signature: str
    request_id: Optional[str] = None
