"""
Canonical ranking snapshot + signature for replay verification.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from typing import Any, Dict, List

from .models import SuggestionResult


def canonical_json_dumps(data: Any) -> str:
    """Deterministic JSON serialization: sorted keys, compact separators."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def ranking_snapshot(result: SuggestionResult) -> List[Dict[str, Any]]:
    return [
        {"rank": i, "remedy": s.remedy_id, "score": float(s.match_score)}
        for i, s in enumerate(result.top_remedies, start=1)
    ]


def ranking_signature(result: SuggestionResult) -> str:
    payload = canonical_json_dumps(ranking_snapshot(result)).encode("utf-8")
    return sha256_hex(payload)


def verify_signature(snapshot: List[Dict[str, Any]], expected: str) -> bool:
    computed = sha256_hex(canonical_json_dumps(snapshot).encode("utf-8"))
    return computed == expected


def result_to_dict(result: SuggestionResult) -> Dict[str, Any]:
    return asdict(result)
