"""
strategic/signals.py

Aggregates stored page signals and the baseline trust profile into the
counts the dimension formulas read.
"""

from __future__ import annotations

from typing import Any

from baseline.types import TrustProfile
from intelligence.types import ServiceSnapshotSignal, SnapshotSignal
from strategic.types import StrategicRawSignals


def pricing_flags(pricing_page: SnapshotSignal | None) -> tuple[bool, bool, bool]:
    """(transparent, multiple tiers, enterprise tier) from stored pricing signals."""
    if pricing_page is None:
        return False, False, False
    payload: Any = pricing_page.structured_content.get("pricing_signals") or {}
    prices = payload.get("prices") if isinstance(payload, dict) else None
    plans = payload.get("plans") if isinstance(payload, dict) else None
    prices = prices if isinstance(prices, list) else []
    plans = [str(plan).lower() for plan in plans] if isinstance(plans, list) else []
    return bool(prices), len(plans) >= 2, any("enterprise" in plan for plan in plans)


def build_strategic_signals(
    *,
    competitor_id: str,
    services: ServiceSnapshotSignal | None,
    pricing_page: SnapshotSignal | None,
    trust: TrustProfile | None,
    recent_change_count_30d: int,
    structural_shift_detected: bool,
) -> StrategicRawSignals:
    transparent, multiple_tiers, enterprise_tier = pricing_flags(pricing_page)
    indicators = trust.trust_indicators if trust is not None else None
    return StrategicRawSignals(
        competitor_id=competitor_id,
        strategic_terms=services.strategic_keywords_count if services else 0,
        execution_terms=services.execution_keywords_count if services else 0,
        lifecycle_terms=services.lifecycle_keywords_count if services else 0,
        service_count=services.section_count if services else 0,
        industries_detected=list(services.industries) if services else [],
        enterprise_keywords=services.enterprise_keywords_count if services else 0,
        case_studies_present=indicators.case_studies_present if indicators else False,
        certifications_count=len(indicators.certifications_detected) if indicators else 0,
        pricing_transparent=transparent,
        multiple_tiers_detected=multiple_tiers,
        enterprise_tier_detected=enterprise_tier,
        recent_change_count_30d=recent_change_count_30d,
        structural_trait_shifts_detected=structural_shift_detected,
    )
