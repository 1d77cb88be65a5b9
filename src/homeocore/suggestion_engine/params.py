from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# ----------------------------
# Ranking thresholds
# ----------------------------

@dataclass(frozen=True)
class RankingConfig:
    # qualification gate
    min_score_threshold: float = 30.0
    min_rubrics: int = 2

    # score-gap cutoff (percentages of the top score)
    large_gap_threshold: float = 50.0   # gap above this -> top 2
    medium_gap_threshold: float = 30.0  # gap above this -> top 3

    # cap for the small-gap branch
    max_suggestions: int = 5

    def __post_init__(self) -> None:
        if self.min_score_threshold < 0:
            raise ValueError("min_score_threshold must be >= 0")
        if self.min_rubrics < 0:
            raise ValueError("min_rubrics must be >= 0")
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be >= 1")
        if self.medium_gap_threshold < 0 or self.large_gap_threshold < 0:
            raise ValueError("gap thresholds must be >= 0")
        if self.medium_gap_threshold > self.large_gap_threshold:
            raise ValueError("medium_gap_threshold must not exceed large_gap_threshold")


# ----------------------------
# Config loading
# ----------------------------

def _read_text_best_effort(path: str) -> str:
    data = Path(path).read_bytes()
    for enc in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            return data.decode(enc)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1", errors="replace")


def load_ranking_config(config_path: Optional[str] = None) -> RankingConfig:
    """
    Build a RankingConfig from a JSON file. Missing keys keep their defaults;
    no path at all returns the defaults.

    Example file:
      {"min_score_threshold": 30, "min_rubrics": 2,
       "large_gap_threshold": 50, "medium_gap_threshold": 30,
       "max_suggestions": 5}
    """
    if not config_path:
        return RankingConfig()

    cfg = json.loads(_read_text_best_effort(config_path))
    if not isinstance(cfg, dict):
        raise ValueError(f"ranking config must be a JSON object: {config_path}")

    defaults = RankingConfig()
    return RankingConfig(
        min_score_threshold=float(cfg.get("min_score_threshold", defaults.min_score_threshold)),
        min_rubrics=int(cfg.get("min_rubrics", defaults.min_rubrics)),
        large_gap_threshold=float(cfg.get("large_gap_threshold", defaults.large_gap_threshold)),
        medium_gap_threshold=float(cfg.get("medium_gap_threshold", defaults.medium_gap_threshold)),
        max_suggestions=int(cfg.get("max_suggestions", defaults.max_suggestions)),
    )
