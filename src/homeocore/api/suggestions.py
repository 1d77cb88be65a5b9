"""
Suggestion endpoints.
POST /suggestions: rank safety-checked candidates into an explained shortlist
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Request

from homeocore.api.schemas import SuggestionRequest, SuggestionResponse
from homeocore.config import get_settings
from homeocore.db import get_catalog_engine
from homeocore.suggestion_engine.catalog import SqlRemedyCatalog
from homeocore.suggestion_engine.engine import EngineError, SuggestionEngine
from homeocore.suggestion_engine.params import RankingConfig, load_ranking_config
from homeocore.suggestion_engine.snapshot import ranking_signature, result_to_dict

router = APIRouter(tags=["suggestions"])


@lru_cache
def _ranking_config(path: Optional[str]) -> RankingConfig:
    try:
        return load_ranking_config(path)
    except (OSError, ValueError) as exc:
        raise EngineError("CONFIG_ERROR", f"Invalid ranking config {path}: {exc}") from exc


def get_suggestion_engine() -> SuggestionEngine:
    settings = get_settings()
    return SuggestionEngine(
        catalog=SqlRemedyCatalog(get_catalog_engine()),
        config=_ranking_config(settings.RANKING_CONFIG_PATH),
    )


@router.post("/suggestions", response_model=SuggestionResponse)
async def create_suggestions(
    payload: SuggestionRequest,
    request: Request,
    engine: SuggestionEngine = Depends(get_suggestion_engine),
) -> SuggestionResponse:
    candidates = [c.to_domain() for c in payload.candidates]
    case = payload.case_profile.to_domain()

    result = await engine.generate_suggestions(candidates, case)

    body = result_to_dict(result)
    body["signature"] = ranking_signature(result)
    body["request_id"] = getattr(request.state, "request_id", None)
    return SuggestionResponse.model_validate(body)
