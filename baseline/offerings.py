"""
baseline/offerings.py
"""

from __future__ import annotations

from baseline.text import collapse
from baseline.types import OfferingComplexity, OfferingProfile
from intelligence.types import EvidenceItem, SnapshotSignal

RULE_ID = "BP-OFF-001"
MULTI_SERVICE_MAX = 6


def complexity_for(offering_count: int) -> str:
    if offering_count <= 1:
        return OfferingComplexity.SINGLE
    if offering_count <= MULTI_SERVICE_MAX:
        return OfferingComplexity.MULTI_SERVICE
    return OfferingComplexity.BROAD_PORTFOLIO


def analyze_offerings(
    *,
    services_snapshot: SnapshotSignal | None,
    nav_snapshot: SnapshotSignal | None,
) -> OfferingProfile:
    """Collect distinct offering names from service headings and nav labels."""
    evidence: list[EvidenceItem] = []
    offerings: list[str] = []
    seen: set[str] = set()

    def collect(source: str, key: str, values: list[str]) -> None:
        if not values:
            return
        for value in values:
            name = collapse(value)
            if not name or name.lower() in seen:
                continue
            seen.add(name.lower())
            offerings.append(name)
        evidence.append(EvidenceItem(source, key, values[:10]))

    if services_snapshot is not None:
        collect("services", "h2_headings", services_snapshot.h2_headings)
        collect("services", "h3_headings", services_snapshot.h3_headings)
    if nav_snapshot is not None:
        collect("nav", "nav_labels", nav_snapshot.nav_labels)

    section_count = None
    if services_snapshot is not None:
        raw = services_snapshot.structured_content.get("section_count")
        section_count = int(raw) if isinstance(raw, (int, float)) else None
    evidence.append(EvidenceItem("services", "section_count", section_count))

    return OfferingProfile(
        core_offerings=offerings,
        offering_count=len(offerings),
        offering_complexity_level=complexity_for(len(offerings)),
        rule_id=RULE_ID,
        evidence=evidence,
    )
