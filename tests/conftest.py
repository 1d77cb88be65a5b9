from __future__ import annotations

import asyncio
import sys
from typing import Callable, Sequence

# ---- FIX WINDOWS + PSYCOPG ASYNC ----
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import pytest

from homeocore.suggestion_engine.catalog import MappingRemedyCatalog
from homeocore.suggestion_engine.models import (
    CaseProfile,
    MateriaMedica,
    MentalSymptom,
    RemedyReference,
    SafetyWarning,
    ScoreBreakdown,
    ScoredCandidate,
)


def _candidate(
    remedy_id: str,
    final_score: float,
    *,
    confidence: str = "high",
    rubrics: int = 3,
    name: str | None = None,
    warnings: Sequence[SafetyWarning] = (),
    **scores: float,
) -> ScoredCandidate:
    return ScoredCandidate(
        remedy_id=remedy_id,
        remedy_name=name or remedy_id.title(),
        scores=ScoreBreakdown(
            base_score=scores.get("base_score", final_score),
            constitution_bonus=scores.get("constitution_bonus", 0.0),
            modality_bonus=scores.get("modality_bonus", 0.0),
            pathology_support=scores.get("pathology_support", 0.0),
            keynote_bonus=scores.get("keynote_bonus", 0.0),
            coverage_bonus=scores.get("coverage_bonus", 0.0),
            contradiction_penalty=scores.get("contradiction_penalty", 0.0),
            final_score=final_score,
        ),
        confidence=confidence,
        matched_symptoms=("SYM_ANXIETY_001",),
        matched_rubrics=tuple(f"RUBRIC_{i}" for i in range(1, rubrics + 1)),
        warnings=tuple(warnings),
    )


@pytest.fixture
def make_candidate() -> Callable[..., ScoredCandidate]:
    return _candidate


@pytest.fixture
def acute_case() -> CaseProfile:
    return CaseProfile(
        is_acute=True,
        pathology_tags=("Acute", "Fever"),
        mental_symptoms=(MentalSymptom("Anxiety about health"), MentalSymptom("Restlessness at night")),
    )


@pytest.fixture
def chronic_case() -> CaseProfile:
    return CaseProfile(is_acute=False, pathology_tags=(), mental_symptoms=())


@pytest.fixture
def remedy_refs() -> dict[str, RemedyReference]:
    return {
        "ars": RemedyReference(
            remedy_id="ars",
            category="Mineral Kingdom",
            contra_indications="Avoid in acute kidney failure",
            supported_potencies=("6C", "30C", "200C", "1M"),
            materia_medica=MateriaMedica(keynotes=("anxiety", "restless", "burning")),
        ),
        "acon": RemedyReference(
            remedy_id="acon",
            category="Plant Kingdom",
            contra_indications="Use with caution in pregnancy",
            supported_potencies=("6C", "30C"),
            materia_medica=MateriaMedica(keynotes=("fear", "sudden")),
        ),
        "bell": RemedyReference(
            remedy_id="bell",
            category="Plant Kingdom",
            contra_indications="None known",
            supported_potencies=(),
            materia_medica=None,
        ),
    }


@pytest.fixture
def catalog(remedy_refs) -> MappingRemedyCatalog:
    return MappingRemedyCatalog(remedy_refs)
