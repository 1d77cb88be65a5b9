"""
Remedy Suggestion Engine

- Shortlists pre-scored, safety-checked candidates (qualification, confidence, score gap)
- Resolves catalog reference data for the shortlist concurrently
- Adds potency/repetition advice, contraindication re-check and clinical reasoning
- Summarizes the result for the presentation layer
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from .catalog import RemedyCatalog
from .models import (
    HIGH_CONFIDENCE,
    CaseProfile,
    RemedyReference,
    ScoredCandidate,
    Suggestion,
    SuggestionResult,
    SuggestionSummary,
)
from .params import RankingConfig
from .potency import suggest_potency
from .reasoning import build_clinical_reasoning
from .safety import check_contraindications
from .selection import select_candidates

_log = logging.getLogger("homeocore.suggestions")

ENGINE_VERSION = "suggestion_engine_v1"
UNKNOWN_CATEGORY = "Unknown"


class EngineError(Exception):
    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(message or code)
        self.code = code


class SuggestionEngine:
    def __init__(self, catalog: RemedyCatalog, config: Optional[RankingConfig] = None) -> None:
        self.catalog = catalog
        self.config = config or RankingConfig()

    async def _lookup(self, remedy_id: str) -> Optional[RemedyReference]:
        try:
            return await self.catalog.get(remedy_id)
        except Exception as exc:  # noqa: BLE001
            _log.warning(
                "remedy lookup failed for %s (treated as missing): %s",
                remedy_id,
                exc,
                extra={"remedy_id": remedy_id},
            )
            return None

    def _build(
        self,
        candidate: ScoredCandidate,
        case: CaseProfile,
        reference: Optional[RemedyReference],
    ) -> Suggestion:
        supported = reference.supported_potencies if reference else ()
        advice = suggest_potency(candidate.final_score, case.is_acute, supported)

        warnings = list(candidate.warnings)
        if reference is not None:
            contra = check_contraindications(reference.contra_indications, case.pathology_tags)
            if contra is not None:
                warnings.append(contra)

        return Suggestion(
            remedy_id=str(candidate.remedy_id),
            remedy_name=candidate.remedy_name,
            category=reference.category if reference and reference.category else UNKNOWN_CATEGORY,
            match_score=candidate.final_score,
            confidence=candidate.confidence,
            matched_symptoms=tuple(candidate.matched_symptoms),
            matched_rubrics=tuple(candidate.matched_rubrics),
            clinical_reasoning=build_clinical_reasoning(candidate, case, reference),
            suggested_potency=advice.potency,
            repetition=advice.repetition,
            score_breakdown=candidate.scores.as_output(),
            warnings=tuple(warnings),
        )

    async def generate_suggestions(
        self,
        candidates: Sequence[ScoredCandidate],
        case: CaseProfile,
    ) -> SuggestionResult:
        selected = select_candidates(candidates, self.config)

        # fan-out / fan-in: one barrier for all catalog reads
        references = await asyncio.gather(*(self._lookup(c.remedy_id) for c in selected))

        suggestions: List[Suggestion] = [
            self._build(candidate, case, reference)
            for candidate, reference in zip(selected, references)
        ]

        summary = SuggestionSummary(
            total_remedies=len(candidates),
            high_confidence=sum(1 for s in suggestions if s.confidence in HIGH_CONFIDENCE),
            warnings=sum(len(s.warnings) for s in suggestions),
        )
        _log.info(
            "suggestions generated: candidates=%d shown=%d high_confidence=%d warnings=%d",
            summary.total_remedies,
            len(suggestions),
            summary.high_confidence,
            summary.warnings,
            extra={"candidates": summary.total_remedies, "shown": len(suggestions)},
        )
        return SuggestionResult(top_remedies=tuple(suggestions), summary=summary)
