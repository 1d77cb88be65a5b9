#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line runner for the remedy suggestion engine.

Inputs are JSON files in the same shape the HTTP API accepts:
  --candidates  list of scored candidates (or {"candidates": [...]})
  --case        case profile object
  --catalog     optional remedy catalog (JSON list of remedy records)
  --config      optional ranking thresholds JSON
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd
from pydantic import ValidationError

from homeocore.api.schemas import SuggestionRequest
from homeocore.suggestion_engine.catalog import MappingRemedyCatalog, load_catalog_file
from homeocore.suggestion_engine.engine import SuggestionEngine
from homeocore.suggestion_engine.models import SuggestionResult
from homeocore.suggestion_engine.params import load_ranking_config
from homeocore.suggestion_engine.snapshot import ranking_signature, result_to_dict


def _read_json(path: str, label: str) -> Any:
    p = Path(path)
    if not p.exists():
        raise SystemExit(f"[ERROR] {label} file not found: {path}")
    try:
        return json.loads(p.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"[ERROR] {label} file is not valid JSON: {path} ({exc})")


def result_table(result: SuggestionResult) -> pd.DataFrame:
    rows = [
        {
            "rank": i,
            "remedy": s.remedy_name,
            "category": s.category,
            "score": s.match_score,
            "confidence": s.confidence,
            "potency": s.suggested_potency,
            "repetition": s.repetition,
            "warnings": len(s.warnings),
        }
        for i, s in enumerate(result.top_remedies, start=1)
    ]
    return pd.DataFrame(rows)


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="HomeoCore remedy suggestion engine")
    ap.add_argument("--candidates", required=True, help="Scored candidates JSON")
    ap.add_argument("--case", required=True, help="Case profile JSON")
    ap.add_argument("--catalog", default=None, help="Remedy catalog JSON (list of remedy records)")
    ap.add_argument("--config", default=None, help="Ranking thresholds JSON")
    ap.add_argument("--out", default="output", help="Output folder")

    args = ap.parse_args(argv)

    raw_candidates = _read_json(args.candidates, "candidates")
    if isinstance(raw_candidates, dict):
        raw_candidates = raw_candidates.get("candidates", [])
    raw_case = _read_json(args.case, "case")

    try:
        request = SuggestionRequest.model_validate(
            {"candidates": raw_candidates, "case_profile": raw_case}
        )
    except ValidationError as exc:
        raise SystemExit(f"[ERROR] invalid input:\n{exc}")

    if args.catalog:
        if not Path(args.catalog).exists():
            raise SystemExit(f"[ERROR] catalog file not found: {args.catalog}")
        catalog = load_catalog_file(args.catalog)
        print(f"[OK] catalog: {len(catalog)} remedies")
    else:
        print("[WARN] no catalog given (categories will be 'Unknown')")
        catalog = MappingRemedyCatalog({})

    if args.config and not Path(args.config).exists():
        raise SystemExit(f"[ERROR] config file not found: {args.config}")
    config = load_ranking_config(args.config)

    engine = SuggestionEngine(catalog, config)
    result = asyncio.run(
        engine.generate_suggestions(
            [c.to_domain() for c in request.candidates],
            request.case_profile.to_domain(),
        )
    )

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "suggestions.json"
    payload = result_to_dict(result)
    payload["signature"] = ranking_signature(result)
    out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    if not result.top_remedies:
        print("\n[INFO] No candidates given.\n")
        print(f"Saved to: {out_path}")
        return

    print("\n=== SUGGESTIONS ===\n")
    print(result_table(result).to_string(index=False))
    print(
        f"\ntotal={result.summary.total_remedies} "
        f"high_confidence={result.summary.high_confidence} "
        f"warnings={result.summary.warnings}"
    )
    print(f"Saved to: {out_path}")


if __name__ == "__main__":
    main()
