"""
tests/test_change_detection.py

Pytest tests for snapshot diffing, change classification, impact levels,
PM-signal diffs and change-derived insights.

Coverage
--------
- Identical captures produce no changes; script/style noise is ignored
- Text, element added/removed, CTA text and navigation changes
- Large structural edits are itemised up to a cap plus one summary
- Category rules in fixed order (CTA, page type, product keywords, trust)
- Impact rules and interpretation templates
- Typed change details round-trip through the stored payload
- PM-signal diffs: headline, CTA, nav, pricing, product sections, proof
- Change insights: one per type, fixed text and confidence
- Observational and webpage-signal insight builders
"""

from __future__ import annotations

import uuid
from dataclasses import replace

import pytest

from app.scraping.taxonomy import PageType
from change_detection.classifier import classify_change, is_logo_or_testimonial
from change_detection.details import (
    ChangeReference,
    ChangeType,
    ElementChangeDetails,
    NavChangeDetails,
    TextChangeDetails,
    parse_details,
)
from change_detection.detector import MAX_ITEMISED_STRUCTURE_CHANGES, detect_changes
from change_detection.impact import assess_impact, interpret_change
from change_detection.insights import (
    build_webpage_signal_insights,
    generate_change_insights,
    gtm_motion,
    latest_by_page_type,
    observation_text,
    pricing_narrative,
)
from change_detection.pm_signals import (
    PmSignalChangeType,
    PmSignalSnapshot,
    detect_pm_signal_changes,
)
from change_detection.types import ChangeCategory, DetectedChange, ImpactLevel
from db.models.insight import InsightType
from tests.conftest import stored_snapshot

URL = "https://acme.test/"


def _page(body: str) -> str:
    return f"<html><body>{body}</body></html>"


def _change(
    change_type: str,
    *,
    page_type: str = "homepage",
    key: str = "",
    category: str | None = None,
) -> DetectedChange:
    details = (
        ElementChangeDetails(kind=change_type, element_key=key)
        if change_type in (ChangeType.ELEMENT_ADDED, ChangeType.ELEMENT_REMOVED)
        else TextChangeDetails(before_length=1, after_length=2)
    )
    change = DetectedChange(
        change_type=change_type,
        page_url=URL,
        page_type=page_type,
        summary="s",
        details=details,
        after=ChangeReference(key=key, label=key) if key else None,
    )
    if category is not None:
        change = replace(change, category=category)
    return change


class TestDetector:
    def test_identical_pages_have_no_changes(self) -> None:
        html = _page("<main><h1>Hello</h1><li>One</li></main>")
        assert detect_changes(before_html=html, after_html=html, page_url=URL, page_type="homepage") == []

    def test_script_noise_is_ignored(self) -> None:
        before = _page("<h1>Hello</h1><script>var a = 1;</script>")
        after = _page("<h1>Hello</h1><script>var a = 2;</script><style>p{}</style>")
        assert detect_changes(before_html=before, after_html=after, page_url=URL, page_type="homepage") == []

    def test_heading_change_yields_text_and_structure(self) -> None:
        before = _page("<h1>Old headline</h1>")
        after = _page("<h1>New headline</h1>")

        changes = detect_changes(before_html=before, after_html=after, page_url=URL, page_type="homepage")

        assert [change.change_type for change in changes] == [
            ChangeType.TEXT_CHANGE,
            ChangeType.ELEMENT_ADDED,
            ChangeType.ELEMENT_REMOVED,
        ]
        assert changes[1].element_key == "heading:h1:new headline"
        assert changes[2].element_key == "heading:h1:old headline"

    def test_cta_text_change_matched_by_href(self) -> None:
        before = _page('<a href="/signup">Start free</a>')
        after = _page('<a href="/signup">Get started</a>')

        changes = detect_changes(before_html=before, after_html=after, page_url=URL, page_type="homepage")
        cta = [change for change in changes if change.change_type == ChangeType.CTA_TEXT_CHANGE]

        assert len(cta) == 1
        assert cta[0].details.before_text == "Start free"
        assert cta[0].details.after_text == "Get started"
        assert cta[0].category == ChangeCategory.POSITIONING_MESSAGING

    def test_nav_change(self) -> None:
        before = _page('<nav><a href="/pricing">Pricing</a></nav>')
        after = _page('<nav><a href="/pricing">Pricing</a><a href="/partners">Partners</a></nav>')

        changes = detect_changes(before_html=before, after_html=after, page_url=URL, page_type="navigation")
        nav = [change for change in changes if change.change_type == ChangeType.NAV_CHANGE]

        assert len(nav) == 1
        assert nav[0].details.added == ["https://acme.test/partners::partners"]
        assert nav[0].details.removed == []

    def test_structural_changes_are_capped(self) -> None:
        before = _page("<main></main>")
        after = _page("<main>" + "".join(f"<li>Item {i}</li>" for i in range(30)) + "</main>")

        changes = detect_changes(before_html=before, after_html=after, page_url=URL, page_type="homepage")
        added = [change for change in changes if change.change_type == ChangeType.ELEMENT_ADDED]

        assert len(added) == MAX_ITEMISED_STRUCTURE_CHANGES + 1
        assert added[-1].summary == "Many structural changes detected"
        assert added[-1].details.added[-1] == "… (+20 more)"

    def test_deterministic(self) -> None:
        before = _page("<h1>A</h1><nav><a href='/x'>X</a></nav>")
        after = _page("<h1>B</h1><nav><a href='/y'>Y</a></nav>")
        first = detect_changes(before_html=before, after_html=after, page_url=URL, page_type="homepage")
        second = detect_changes(before_html=before, after_html=after, page_url=URL, page_type="homepage")
        assert first == second


class TestClassifier:
    @pytest.mark.parametrize(
        "page_type, category",
        [
            ("pricing", ChangeCategory.PRICING_OFFERS),
            ("cta_elements", ChangeCategory.POSITIONING_MESSAGING),
            ("product_or_services", ChangeCategory.PRODUCT_SERVICES),
            ("use_cases_or_industries", ChangeCategory.PRODUCT_SERVICES),
            ("case_studies_or_customers", ChangeCategory.TRUST_CREDIBILITY),
            ("navigation", ChangeCategory.NAVIGATION_STRUCTURE),
        ],
    )
    def test_page_type_rules(self, page_type: str, category: str) -> None:
        assert classify_change(_change(ChangeType.TEXT_CHANGE, page_type=page_type)) == category

    def test_cta_change_beats_page_type(self) -> None:
        change = DetectedChange(
            change_type=ChangeType.CTA_TEXT_CHANGE,
            page_url=URL,
            page_type="pricing",
            summary="s",
            details=None,
        )
        assert classify_change(change) == ChangeCategory.POSITIONING_MESSAGING

    def test_product_keyword_on_added_element(self) -> None:
        change = _change(ChangeType.ELEMENT_ADDED, key="heading:h2:new analytics product")
        assert classify_change(change) == ChangeCategory.PRODUCT_SERVICES

    def test_logo_added_is_trust(self) -> None:
        change = _change(ChangeType.ELEMENT_ADDED, key="block:section:logo-wall")
        assert classify_change(change, "<section>logos</section>") == ChangeCategory.TRUST_CREDIBILITY

    def test_testimonial_heading_context(self) -> None:
        html = "<section><h2>What our clients say</h2><p>great team</p></section>"
        assert is_logo_or_testimonial(html, "li:what our clients say great team")

    def test_empty_key_never_matches_context(self) -> None:
        html = "<header><img alt='Acme logo' src='/logo.png'></header>"
        assert not is_logo_or_testimonial(html, "")

    def test_default_is_navigation(self) -> None:
        assert classify_change(_change(ChangeType.TEXT_CHANGE)) == ChangeCategory.NAVIGATION_STRUCTURE


class TestImpact:
    def test_cta_change_is_moderate(self) -> None:
        change = _change(ChangeType.CTA_TEXT_CHANGE, category=ChangeCategory.POSITIONING_MESSAGING)
        assert assess_impact(change) == ImpactLevel.MODERATE

    def test_pricing_copy_is_moderate(self) -> None:
        change = _change(ChangeType.TEXT_CHANGE, page_type="pricing", category=ChangeCategory.PRICING_OFFERS)
        assert assess_impact(change) == ImpactLevel.MODERATE

    def test_nav_change_is_minor(self) -> None:
        change = _change(ChangeType.NAV_CHANGE, page_type="pricing", category=ChangeCategory.PRICING_OFFERS)
        assert assess_impact(change) == ImpactLevel.MINOR

    def test_product_section_structure_is_strategic(self) -> None:
        change = _change(
            ChangeType.ELEMENT_REMOVED,
            page_type="services",
            key="heading:h2:consulting service",
            category=ChangeCategory.PRODUCT_SERVICES,
        )
        assert assess_impact(change) == ImpactLevel.STRATEGIC

    def test_homepage_structure_is_strategic(self) -> None:
        change = _change(ChangeType.ELEMENT_ADDED, key="x", category=ChangeCategory.NAVIGATION_STRUCTURE)
        assert assess_impact(change) == ImpactLevel.STRATEGIC

    def test_trust_addition_is_moderate(self) -> None:
        change = _change(
            ChangeType.ELEMENT_ADDED,
            page_type="case_studies_or_customers",
            key="logo",
            category=ChangeCategory.TRUST_CREDIBILITY,
        )
        assert assess_impact(change) == ImpactLevel.MODERATE

    def test_text_change_elsewhere_is_minor(self) -> None:
        change = _change(ChangeType.TEXT_CHANGE, page_type="services", category=ChangeCategory.NAVIGATION_STRUCTURE)
        assert assess_impact(change) == ImpactLevel.MINOR

    def test_every_pair_has_interpretation(self) -> None:
        for category in ChangeCategory.ALL:
            for level in ImpactLevel.ALL:
                interpretation = interpret_change(category, level)
                assert interpretation.strategic_interpretation
                assert interpretation.monitoring_action

    def test_unknown_pair_falls_back(self) -> None:
        fallback = interpret_change(ChangeCategory.NAVIGATION_STRUCTURE, ImpactLevel.MINOR)
        assert interpret_change("Unknown", "Huge") == fallback


class TestDetailsPayload:
    def test_round_trip_by_kind(self) -> None:
        change = DetectedChange(
            change_type=ChangeType.NAV_CHANGE,
            page_url=URL,
            page_type="homepage",
            summary="Navigation changed",
            details=NavChangeDetails(added=["a"], removed=["b"]),
        )
        payload = change.details_payload()

        assert payload["kind"] == "nav_change"
        assert payload["before"] is None
        assert parse_details(payload) == NavChangeDetails(added=["a"], removed=["b"])

    def test_camel_case_keys(self) -> None:
        payload = DetectedChange(
            change_type=ChangeType.TEXT_CHANGE,
            page_url=URL,
            page_type="homepage",
            summary="s",
            details=TextChangeDetails(before_length=3, after_length=4),
        ).details_payload()
        assert payload["beforeLength"] == 3
        assert payload["afterLength"] == 4


class TestPmSignals:
    def test_headline_change_on_homepage_only(self) -> None:
        before = PmSignalSnapshot(page_type="homepage", html="", primary_headline="Build faster")
        after = PmSignalSnapshot(page_type="homepage", html="", primary_headline="Ship securely")

        diffs = detect_pm_signal_changes(before, after)

        assert [diff.change_type for diff in diffs] == [PmSignalChangeType.HOMEPAGE_HEADLINE_CHANGE]
        assert diffs[0].before_value == "Build faster"
        assert diffs[0].confidence == "High"

    def test_missing_headline_is_not_a_change(self) -> None:
        before = PmSignalSnapshot(page_type="homepage", html="", primary_headline=None)
        after = PmSignalSnapshot(page_type="homepage", html="", primary_headline="New")
        assert detect_pm_signal_changes(before, after) == []

    def test_nav_compared_as_normalized_sets(self) -> None:
        before = PmSignalSnapshot(page_type="pricing", html="", nav_items=["Pricing", "About"])
        same = PmSignalSnapshot(page_type="pricing", html="", nav_items=["about ", "PRICING"])
        changed = PmSignalSnapshot(page_type="pricing", html="", nav_items=["Pricing", "Partners"])

        assert detect_pm_signal_changes(before, same) == []
        diffs = detect_pm_signal_changes(before, changed)
        assert diffs[0].change_type == PmSignalChangeType.NAV_ITEMS_CHANGE
        assert diffs[0].after_value == ["partners", "pricing"]

    def test_cta_change(self) -> None:
        before = PmSignalSnapshot(page_type="pricing", html="", primary_cta_text="Start free")
        after = PmSignalSnapshot(page_type="pricing", html="", primary_cta_text="Talk to sales")
        assert detect_pm_signal_changes(before, after)[0].change_type == PmSignalChangeType.CTA_TEXT_CHANGE

    def test_pricing_structure_change(self) -> None:
        before = PmSignalSnapshot(page_type="pricing", html=_page("<h2>Starter plan</h2><p>$10</p>"))
        after = PmSignalSnapshot(page_type="pricing", html=_page("<h2>Starter plan</h2><p>$12</p>"))

        diffs = detect_pm_signal_changes(before, after)

        assert [diff.change_type for diff in diffs] == [PmSignalChangeType.PRICING_STRUCTURE_CHANGE]
        assert diffs[0].after_value == ["starter plan", "$12"]

    @pytest.mark.parametrize("page_type", [PageType.PRODUCT_OR_SERVICES, PageType.SERVICES])
    def test_product_section_change(self, page_type: str) -> None:
        before = PmSignalSnapshot(page_type=page_type, html=_page("<main><h2>Cloud services</h2></main>"))
        after = PmSignalSnapshot(
            page_type=page_type,
            html=_page("<main><h2>Cloud services</h2><h2>AI platform</h2></main>"),
        )

        diffs = detect_pm_signal_changes(before, after)

        assert diffs[0].change_type == PmSignalChangeType.PRODUCT_SERVICE_SECTION_CHANGE
        assert diffs[0].confidence == "Medium"
        assert diffs[0].after_value == ["ai platform", "cloud services"]

    def test_case_study_additions(self) -> None:
        before = PmSignalSnapshot(page_type="case_studies_or_customers", html=_page("<p>Our work</p>"))
        after = PmSignalSnapshot(
            page_type="case_studies_or_customers",
            html=_page("<p>Our work. Read the case study. Trusted by Globex. Globex logo</p><footer>client</footer>"),
        )

        diffs = detect_pm_signal_changes(before, after)

        assert diffs[0].change_type == PmSignalChangeType.CASE_STUDY_OR_CUSTOMER_LOGO_ADDED
        assert diffs[0].after_value == ["case study", "trusted by", "logo"]


class TestInsights:
    def test_one_change_insight_per_type(self) -> None:
        competitor_id = uuid.uuid4()
        before = PmSignalSnapshot(
            page_type="homepage", html="", primary_headline="A", primary_cta_text="X", nav_items=["a"]
        )
        after = PmSignalSnapshot(
            page_type="homepage", html="", primary_headline="B", primary_cta_text="Y", nav_items=["b"]
        )
        diffs = detect_pm_signal_changes(before, after)

        rows = generate_change_insights(
            competitor_id=competitor_id,
            page_type="homepage",
            diffs=diffs,
            related_change_ids=["c1"],
        )
        by_type = {row.insight_type: row for row in rows}

        assert set(by_type) == {
            InsightType.STRATEGIC_PRIORITY,
            InsightType.MESSAGING_SHIFT,
            InsightType.CONVERSION_STRATEGY,
        }
        assert by_type[InsightType.MESSAGING_SHIFT].insight_text == "Competitor updated core positioning or messaging."
        assert by_type[InsightType.CONVERSION_STRATEGY].related_change_ids == ["c1"]

    def test_observation_text_fallback(self) -> None:
        assert observation_text("pricing") == "Pricing page detected and tracked."
        assert observation_text("unknown") == "Page is actively monitored; no changes detected."

    @pytest.mark.parametrize(
        "primary, secondary, motion",
        [
            ("Contact sales", "Start free", "a hybrid"),
            ("Book demo", None, "a sales-led"),
            ("Sign up", None, "a self-serve"),
            ("Learn more", "Talk to sales", "a sales-led"),
            ("Learn more", None, None),
        ],
    )
    def test_gtm_motion(self, primary: str, secondary: str | None, motion: str | None) -> None:
        assert gtm_motion(primary, secondary) == motion

    def test_pricing_narrative(self) -> None:
        assert pricing_narrative(stored_snapshot(page_type="pricing", h1_text="Enterprise plans")) == (
            "Enterprise positioning emphasized."
        )
        assert pricing_narrative(stored_snapshot(page_type="pricing", h1_text="Start your free trial")) == (
            "Growth-led pricing motion signaled via free or trial language."
        )
        assert pricing_narrative(stored_snapshot(page_type="pricing")) is None

    def test_latest_by_page_type_keeps_first(self) -> None:
        newest = stored_snapshot(page_type="homepage", version=2)
        older = stored_snapshot(page_type="homepage", version=1)
        assert latest_by_page_type([newest, older])["homepage"] is newest

    def test_webpage_signal_insights(self) -> None:
        competitor_id = uuid.uuid4()
        snapshots = [
            stored_snapshot(
                page_type="homepage",
                h1_text="Secure compliance for every team",
                primary_cta_text="Request demo",
            ),
            stored_snapshot(page_type="product_or_services", h2_headings=["Integrations", "API connectors"]),
        ]

        rows = build_webpage_signal_insights(competitor_id=competitor_id, snapshots=snapshots)
        texts = [row.insight_text for row in rows]

        assert texts == [
            "Homepage messaging emphasizes security.",
            "Primary CTA suggests a sales-led go-to-market strategy.",
            "Product capabilities emphasize integrations.",
        ]


class TestEndToEnd:
    def test_primary_cta_rewrite(self) -> None:
        before = _page('<main><h1>Acme</h1><a href="/signup">Sign Up</a></main>')
        after = _page('<main><h1>Acme</h1><a href="/signup">Start Free Trial</a></main>')

        changes = detect_changes(before_html=before, after_html=after, page_url=URL, page_type="homepage")
        cta = [change for change in changes if change.change_type == ChangeType.CTA_TEXT_CHANGE]

        assert len(cta) == 1
        assert cta[0].category == ChangeCategory.POSITIONING_MESSAGING
        assert assess_impact(cta[0]) == ImpactLevel.MODERATE

    def test_new_pricing_tier(self) -> None:
        before_html = _page("<main><h2>Starter plan</h2><p>$19/month</p></main>")
        after_html = _page("<main><h2>Starter plan</h2><p>$19/month</p><h2>$49/month Pro</h2></main>")

        diffs = detect_pm_signal_changes(
            PmSignalSnapshot(page_type="pricing", html=before_html),
            PmSignalSnapshot(page_type="pricing", html=after_html),
        )
        changes = detect_changes(before_html=before_html, after_html=after_html, page_url=URL, page_type="pricing")
        added = [change for change in changes if change.change_type == ChangeType.ELEMENT_ADDED]

        assert [(diff.change_type, diff.confidence) for diff in diffs] == [
            (PmSignalChangeType.PRICING_STRUCTURE_CHANGE, "High")
        ]
        assert len(added) == 1
        assert added[0].category == ChangeCategory.PRICING_OFFERS
