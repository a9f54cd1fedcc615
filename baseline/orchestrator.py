"""
baseline/orchestrator.py

Runs the baseline stages in order and records one trace event per stage.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from app.scraping.logging_utils import log_event
from baseline.about import extract_about_snapshot
from baseline.composer import compose_baseline
from baseline.industry import classify_industry
from baseline.offerings import analyze_offerings
from baseline.segment import detect_target_segment
from baseline.trust import extract_trust_profile
from baseline.types import BaselineInput, BaselineResult
from baseline.value_prop import parse_value_prop
from intelligence.types import TraceEvent

logger = logging.getLogger(__name__)

COMPOSE_RULE_ID = "BP-COMP-001"


def run_baseline_profile(data: BaselineInput) -> BaselineResult:
    trace: list[TraceEvent] = []

    about = extract_about_snapshot(homepage=data.homepage, about_page=data.about_page)
    trace.append(
        TraceEvent(
            step="about",
            rule_id=about.rule_id,
            message="Extracted about/company snapshot.",
            data={
                "has_summary": about.company_summary_raw is not None,
                "founding_year": about.founding_year,
                "regions": about.detected_regions,
            },
        )
    )

    industry = classify_industry(about=about, homepage=data.homepage, services=data.services_page)
    trace.append(
        TraceEvent(
            step="industry",
            rule_id=industry.rule_id,
            message="Classified primary and secondary industries.",
            data={
                "primary_industry": industry.primary_industry,
                "secondary_industries": industry.secondary_industries,
                "confidence": industry.industry_confidence,
            },
        )
    )

    segment = detect_target_segment(about=about, homepage=data.homepage, services=data.services_page)
    trace.append(
        TraceEvent(
            step="segment",
            rule_id=segment.rule_id,
            message="Detected target segment profile.",
            data={"target_segment": segment.target_segment},
        )
    )

    offerings = analyze_offerings(services_snapshot=data.services_page, nav_snapshot=data.nav_snapshot)
    trace.append(
        TraceEvent(
            step="offerings",
            rule_id=offerings.rule_id,
            message="Analyzed core offerings and complexity.",
            data={
                "offering_count": offerings.offering_count,
                "complexity": offerings.offering_complexity_level,
            },
        )
    )

    value_prop = parse_value_prop(about=about, homepage=data.homepage)
    trace.append(
        TraceEvent(
            step="value_prop",
            rule_id=value_prop.rule_id,
            message="Parsed value proposition theme and narrative.",
            data={"type": value_prop.value_prop_type, "dominant_narrative": value_prop.dominant_narrative},
        )
    )

    trust = extract_trust_profile(homepage=data.homepage, case_studies_page=data.case_studies_page)
    trace.append(
        TraceEvent(
            step="trust",
            rule_id=trust.rule_id,
            message="Extracted trust indicators.",
            data=asdict(trust.trust_indicators),
        )
    )

    profile = compose_baseline(
        competitor_id=data.competitor_id,
        about=about,
        industry=industry,
        segment=segment,
        offerings=offerings,
        value_prop=value_prop,
        trust=trust,
    )
    trace.append(
        TraceEvent(
            step="compose",
            rule_id=COMPOSE_RULE_ID,
            message="Composed company baseline profile and summaries.",
            data={
                "has_biography": bool(profile.biography_summary),
                "has_offerings": offerings.offering_count > 0,
            },
        )
    )

    log_event(
        logger,
        logging.DEBUG,
        "baseline_profile_built",
        competitor_id=data.competitor_id,
        industry=industry.primary_industry,
        segment=segment.target_segment,
    )
    return BaselineResult(profile=profile, trace=trace)
