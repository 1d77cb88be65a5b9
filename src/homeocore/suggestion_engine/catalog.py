"""
Remedy catalog lookups (keyed, single-item reads).

Contract: ``await catalog.get(remedy_id)`` returns a RemedyReference or None
when the remedy is unknown. "Not found" never raises; storage errors may, and
the engine contains them per candidate.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from .models import MateriaMedica, RemedyReference

_log = logging.getLogger("homeocore.catalog")

_REMEDY_SQL = text(
    """
    SELECT id, category, contra_indications, supported_potencies, keynotes
    FROM remedies
    WHERE id = :remedy_id
    LIMIT 1
    """
)


class RemedyCatalog(Protocol):
    async def get(self, remedy_id: str) -> Optional[RemedyReference]: ...


# ----------------------------
# Row decoding
# ----------------------------

def _json_list(value: Any, field: str, remedy_id: str) -> Optional[List[str]]:
    """jsonb columns arrive decoded (PostgreSQL) or as text (SQLite)."""
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            _log.warning("remedy %s: malformed %s payload, ignoring", remedy_id, field)
            return []
    if not isinstance(value, (list, tuple)):
        _log.warning("remedy %s: %s is not a list, ignoring", remedy_id, field)
        return []
    return [str(v) for v in value if str(v).strip()]


def reference_from_record(record: Mapping[str, Any]) -> RemedyReference:
    remedy_id = str(record.get("id") or record.get("remedy_id") or "")

    keynotes = record.get("keynotes")
    if keynotes is None and isinstance(record.get("materia_medica"), Mapping):
        keynotes = record["materia_medica"].get("keynotes")
    keynote_list = _json_list(keynotes, "keynotes", remedy_id)

    potencies = _json_list(record.get("supported_potencies"), "supported_potencies", remedy_id) or []
    contra = record.get("contra_indications")

    return RemedyReference(
        remedy_id=remedy_id,
        category=str(record.get("category") or "Unknown"),
        contra_indications=str(contra) if contra is not None else None,
        supported_potencies=tuple(potencies),
        materia_medica=MateriaMedica(keynotes=tuple(keynote_list)) if keynote_list is not None else None,
    )


# ----------------------------
# SQL-backed catalog
# ----------------------------

class SqlRemedyCatalog:
    """Reads the ``remedies`` table through a SQLAlchemy async engine."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def get(self, remedy_id: str) -> Optional[RemedyReference]:
        async with self._engine.connect() as conn:
            row = (
                await conn.execute(_REMEDY_SQL, {"remedy_id": str(remedy_id)})
            ).mappings().first()

        if not row:
            return None
        return reference_from_record(dict(row))

    async def ping(self) -> None:
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))


# ----------------------------
# In-memory catalog
# ----------------------------

class MappingRemedyCatalog:
    def __init__(self, references: Mapping[str, RemedyReference]) -> None:
        self._references: Dict[str, RemedyReference] = dict(references)

    async def get(self, remedy_id: str) -> Optional[RemedyReference]:
        return self._references.get(str(remedy_id))

    def __len__(self) -> int:
        return len(self._references)


def load_catalog_file(path: str) -> MappingRemedyCatalog:
    """
    Accepts a JSON list of remedy records:
      [{"id": "...", "category": "...", "contra_indications": "...",
        "supported_potencies": [...], "materia_medica": {"keynotes": [...]}}]
    """
    data = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    if not isinstance(data, list):
        raise ValueError(f"catalog file must contain a JSON list: {path}")

    refs: Dict[str, RemedyReference] = {}
    for record in data:
        ref = reference_from_record(record)
        if ref.remedy_id:
            refs[ref.remedy_id] = ref
    return MappingRemedyCatalog(refs)
