"""
Candidate selection: qualification gate, confidence filter, ranking and the
score-gap cutoff that decides how many remedies reach the clinician.
"""
from __future__ import annotations

import logging
from typing import List, Sequence

import pandas as pd

from .models import ScoredCandidate
from .params import RankingConfig

_log = logging.getLogger("homeocore.suggestions")

NO_QUALIFIED_FALLBACK_N = 3


def _frame(candidates: Sequence[ScoredCandidate]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "pos": list(range(len(candidates))),
            "remedy_id": [str(c.remedy_id) for c in candidates],
            "final_score": [float(c.final_score) for c in candidates],
            "rubrics_hit": [len(c.matched_rubrics) for c in candidates],
            "confidence": [str(c.confidence) for c in candidates],
        }
    )


def _ranked(df: pd.DataFrame) -> pd.DataFrame:
    # score desc, remedy_id asc for ties (deterministic)
    return df.sort_values(
        by=["final_score", "remedy_id"],
        ascending=[False, True],
        kind="mergesort",
    ).reset_index(drop=True)


def score_gap_pct(top_score: float, second_score: float) -> float:
    if top_score <= 0:
        return 0.0
    return (top_score - second_score) / top_score * 100.0


def shortlist_size(scores: Sequence[float], config: RankingConfig) -> int:
    """
    How many of the (already sorted) scores to keep:
      - large gap between #1 and #2 -> 2
      - medium gap                  -> 3
      - otherwise                   -> max_suggestions
    Every branch is capped by max_suggestions, so a wider gap never
    yields a longer shortlist.
    """
    if len(scores) <= 1:
        return len(scores)

    cap = int(config.max_suggestions)
    gap = score_gap_pct(float(scores[0]), float(scores[1]))
    if gap > config.large_gap_threshold:
        return min(2, cap)
    if gap > config.medium_gap_threshold:
        return min(3, cap)
    return cap


def select_candidates(candidates: Sequence[ScoredCandidate], config: RankingConfig) -> List[ScoredCandidate]:
    if not candidates:
        return []

    df = _frame(candidates)

    qualified = df[
        (df["final_score"] >= float(config.min_score_threshold))
        & (df["rubrics_hit"] >= int(config.min_rubrics))
    ]

    if qualified.empty:
        # nothing qualified: still show the best few for clinician review
        picked = _ranked(df).head(NO_QUALIFIED_FALLBACK_N)
        _log.debug(
            "no qualified remedies among %d candidates; showing top %d unfiltered",
            len(df),
            len(picked),
        )
        return [candidates[int(p)] for p in picked["pos"]]

    confident = qualified[qualified["confidence"] != "low"]
    active = _ranked(confident if not confident.empty else qualified)

    n = shortlist_size(active["final_score"].tolist(), config)
    picked = active.head(n)
    _log.debug(
        "selection: candidates=%d qualified=%d confident=%d shortlist=%d",
        len(df),
        len(qualified),
        len(confident),
        len(picked),
    )
    return [candidates[int(p)] for p in picked["pos"]]
