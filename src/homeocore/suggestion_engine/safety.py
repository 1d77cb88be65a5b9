from __future__ import annotations

from typing import Iterable, Optional

from .models import SafetyWarning

_HIGH_RISK_MARKERS = ("pregnancy", "child")


def check_contraindications(
    contra_indications: Optional[str],
    pathology_tags: Iterable[str],
) -> Optional[SafetyWarning]:
    """
    Cross-check a remedy's free-text contraindications against the case
    pathology tags. Returns a warning for the first tag found in the text,
    or None. Never more than one warning per remedy.
    """
    if not contra_indications or not contra_indications.strip():
        return None

    text = contra_indications.lower()
    for tag in pathology_tags:
        needle = str(tag).strip().lower()
        if not needle:
            continue
        if needle in text:
            severity = "high" if any(m in needle for m in _HIGH_RISK_MARKERS) else "medium"
            return SafetyWarning(
                type="contraindication",
                message=f"Contraindicated for {str(tag).strip()}: {contra_indications.strip()}",
                severity=severity,
            )
    return None
