"""
tests/test_baseline_profile.py

Pytest tests for the company baseline profile.

Coverage
--------
- About snapshot: summary assembly, founding year, whole-word regions
- Industry keyword scoring and margin-based confidence
- Target segment detection including the mixed tie
- Offering collection, dedupe and complexity bands
- Value proposition theme selection
- Trust indicators: certifications, logo grid, testimonial quotes
- Orchestrator: trace per stage, composed summaries, empty input
"""

from __future__ import annotations

import pytest

from baseline.about import detect_regions, extract_about_snapshot, extract_founding_year
from baseline.industry import classify_industry
from baseline.offerings import analyze_offerings, complexity_for
from baseline.orchestrator import run_baseline_profile
from baseline.segment import detect_target_segment
from baseline.trust import extract_trust_profile
from baseline.types import (
    AboutSnapshot,
    BaselineInput,
    OfferingComplexity,
    TargetSegment,
    ValuePropType,
)
from baseline.value_prop import parse_value_prop
from intelligence.types import ConfidenceLevel, SnapshotSignal

HOMEPAGE = SnapshotSignal(
    title="Acme",
    h1_text="Cloud software for enterprise banking",
    h2_headings=["Payments platform", "Trusted by global banks"],
    list_items=['"Best partner we have had"', "SOC 2 certified"],
    nav_labels=["Platform", "Pricing", "Customers"],
)
ABOUT = SnapshotSignal(
    h1_text="About Acme",
    h2_headings=["Founded in 2012 in Canada", "Our mission"],
    list_items=["Offices across Europe"],
)


def _about(text: str) -> AboutSnapshot:
    return extract_about_snapshot(homepage=SnapshotSignal(h1_text=text), about_page=None)


class TestAboutSnapshot:
    def test_summary_prefers_about_page_first(self) -> None:
        about = extract_about_snapshot(homepage=HOMEPAGE, about_page=ABOUT)

        assert about.company_summary_raw is not None
        assert about.company_summary_raw.startswith("About Acme Founded in 2012")
        assert about.founding_year == 2012
        assert about.detected_regions == ["North America", "Europe"]
        assert about.mission_keywords == ["mission"]
        assert about.company_size_signals == ["global", "enterprise"]

    def test_no_pages(self) -> None:
        about = extract_about_snapshot(homepage=None, about_page=None)
        assert about.company_summary_raw is None
        assert about.detected_regions == []

    def test_founding_year_range(self) -> None:
        assert extract_founding_year("Since 1999") == 1999
        assert extract_founding_year("Over 3000 clients") is None

    def test_regions_match_whole_words(self) -> None:
        assert detect_regions("a neutral vendor") == []
        assert detect_regions("serving the EU and India") == ["Europe", "APAC"]


class TestIndustry:
    def test_clear_leader_is_high_confidence(self) -> None:
        about = extract_about_snapshot(homepage=HOMEPAGE, about_page=ABOUT)
        profile = classify_industry(about=about, homepage=HOMEPAGE, services=None)

        assert profile.primary_industry == "SaaS"
        assert profile.secondary_industries == ["Fintech"]
        assert profile.industry_confidence == ConfidenceLevel.HIGH

    def test_close_scores_are_medium(self) -> None:
        about = _about("Healthcare consulting")
        profile = classify_industry(about=about, homepage=None, services=None)

        assert profile.primary_industry == "Healthcare"
        assert profile.secondary_industries == ["Consulting"]
        assert profile.industry_confidence == ConfidenceLevel.MEDIUM

    def test_no_keywords(self) -> None:
        profile = classify_industry(about=_about("Hello world"), homepage=None, services=None)
        assert profile.primary_industry is None
        assert profile.industry_confidence == ConfidenceLevel.LOW


class TestSegment:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Built for enterprise teams", TargetSegment.ENTERPRISE),
            ("Tools for mid-market and mid sized firms", TargetSegment.MID_MARKET),
            ("Made for startups", TargetSegment.SMB),
            ("From startups to enterprise", TargetSegment.MIXED),
            ("Nothing to see", TargetSegment.UNKNOWN),
        ],
    )
    def test_segments(self, text: str, expected: str) -> None:
        profile = detect_target_segment(about=_about(text), homepage=None, services=None)
        assert profile.target_segment == expected


class TestOfferings:
    def test_collects_distinct_names(self) -> None:
        services = SnapshotSignal(
            h2_headings=["Strategy", "Delivery"],
            h3_headings=["strategy", "Managed  cloud"],
            structured_content={"section_count": 4},
        )
        nav = SnapshotSignal(nav_labels=["Pricing", "Delivery"])

        profile = analyze_offerings(services_snapshot=services, nav_snapshot=nav)

        assert profile.core_offerings == ["Strategy", "Delivery", "Managed cloud", "Pricing"]
        assert profile.offering_complexity_level == OfferingComplexity.MULTI_SERVICE
        assert profile.evidence[-1].value == 4

    @pytest.mark.parametrize(
        "count, expected",
        [
            (0, OfferingComplexity.SINGLE),
            (1, OfferingComplexity.SINGLE),
            (6, OfferingComplexity.MULTI_SERVICE),
            (7, OfferingComplexity.BROAD_PORTFOLIO),
        ],
    )
    def test_complexity_bands(self, count: int, expected: str) -> None:
        assert complexity_for(count) == expected


class TestValueProp:
    def test_highest_theme_wins(self) -> None:
        homepage = SnapshotSignal(h1_text="Security and compliance without the risk", h2_headings=["Work faster"])
        profile = parse_value_prop(about=_about(""), homepage=homepage)

        assert profile.value_prop_type == ValuePropType.RISK_COMPLIANCE
        assert profile.dominant_narrative == "Risk and compliance-focused narrative"

    def test_tie_keeps_earlier_theme(self) -> None:
        homepage = SnapshotSignal(h1_text="Results, faster")
        profile = parse_value_prop(about=_about(""), homepage=homepage)
        assert profile.value_prop_type == ValuePropType.OUTCOME_DRIVEN

    def test_unknown(self) -> None:
        profile = parse_value_prop(about=_about(""), homepage=None)
        assert profile.value_prop_type == ValuePropType.UNKNOWN
        assert profile.dominant_narrative is None


class TestTrust:
    def test_homepage_indicators(self) -> None:
        indicators = extract_trust_profile(homepage=HOMEPAGE, case_studies_page=None).trust_indicators

        assert indicators.case_studies_present is False
        assert indicators.certifications_detected == ["SOC 2"]
        assert indicators.logo_grid_detected is True
        assert indicators.testimonial_count == 1

    def test_case_studies_page_counts(self) -> None:
        cases = SnapshotSignal(h1_text="Customers", h2_headings=["HIPAA-ready deployments"])
        indicators = extract_trust_profile(homepage=None, case_studies_page=cases).trust_indicators

        assert indicators.case_studies_present is True
        assert indicators.certifications_detected == ["HIPAA"]


class TestBaselineOrchestrator:
    def test_full_profile(self) -> None:
        result = run_baseline_profile(
            BaselineInput(competitor_id="competitor-1", homepage=HOMEPAGE, about_page=ABOUT, nav_snapshot=HOMEPAGE)
        )
        profile = result.profile

        assert [event.step for event in result.trace] == [
            "about",
            "industry",
            "segment",
            "offerings",
            "value_prop",
            "trust",
            "compose",
        ]
        assert profile.biography_summary == (
            "Industry: SaaS (High confidence)\nFounded: 2012\nRegions Mentioned: North America, Europe"
        )
        assert profile.industry_summary == "Primary industry: SaaS; Secondary: Fintech. Confidence: High."
        assert profile.target_market_summary == "Enterprise-focused positioning"
        assert profile.offering_structure_summary == (
            "Offering Structure: Multi-service model with a defined set of offerings."
        )
        assert profile.trust_profile_summary.splitlines() == [
            "Certifications detected: SOC 2",
            'Logo grid / "Trusted by" section detected',
            "Testimonials detected (approx. 1)",
        ]

    def test_empty_input(self) -> None:
        profile = run_baseline_profile(BaselineInput(competitor_id="competitor-1")).profile

        assert profile.biography_summary == (
            "Industry: Not clearly specified\n"
            "Founded year: Not explicitly stated\n"
            "Regions Mentioned: Not clearly specified"
        )
        assert profile.target_market_summary == "Target segment not explicitly signaled yet"
        assert profile.value_proposition_summary == "Value proposition is present but not yet strongly classified."
        assert profile.trust_profile_summary == "Trust signals will strengthen as more surfaces are crawled."

    def test_serializes(self) -> None:
        payload = run_baseline_profile(BaselineInput(competitor_id="competitor-1", homepage=HOMEPAGE)).to_dict()
        assert payload["profile"]["industry_profile"]["primary_industry"] == "SaaS"
