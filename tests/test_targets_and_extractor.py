"""
tests/test_targets_and_extractor.py

Pytest tests for crawl target selection, the page-type taxonomy and
structured content extraction. Pure functions over literal HTML.

Coverage
--------
- URL normalisation and origin handling
- Candidate link filtering (same origin, blocked schemes)
- One target per page type, priority order, page budget
- SEO content pages and mandatory paths fill remaining slots
- Page-type classification from URL, nav text and content
- Extracted headings, CTAs, navigation, SEO record
- Service keyword profile and pricing signals
- Screenshot path format
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from seo.keywords import is_seo_content_path
from app.scraping.extractor import (
    build_screenshot_path,
    compute_html_hash,
    extract_page,
    extract_pricing_signals,
    normalize_signal_text,
)
from app.scraping.targets import (
    CandidateLink,
    classify_seo_content_path,
    extract_candidate_links,
    mandatory_targets,
    normalize_url,
    origin_url,
    pick_target_urls,
)
from app.scraping.taxonomy import (
    PageType,
    mandatory_paths_for_host,
    page_type_from_content,
    page_type_from_nav,
    page_type_from_url,
    should_ignore,
)
from tests.conftest import BASE_URL, HOMEPAGE_HTML, PRICING_HTML, SERVICES_HTML


class TestUrls:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("acme.test", "https://acme.test/"),
            ("  http://acme.test/pricing#plans ", "http://acme.test/pricing"),
            ("https://acme.test/a?b=1", "https://acme.test/a?b=1"),
        ],
    )
    def test_normalize_url(self, raw: str, expected: str) -> None:
        assert normalize_url(raw) == expected

    def test_normalize_rejects_missing_host(self) -> None:
        with pytest.raises(ValueError):
            normalize_url("https://")

    def test_origin(self) -> None:
        assert origin_url("https://acme.test/pricing?x=1") == "https://acme.test"


class TestTaxonomy:
    @pytest.mark.parametrize(
        "url, page_type",
        [
            ("https://acme.test", PageType.HOMEPAGE),
            ("https://acme.test/pricing", PageType.PRICING),
            ("https://acme.test/services/cloud", PageType.SERVICES),
            ("https://acme.test/platform", PageType.PRODUCT_OR_SERVICES),
            ("https://acme.test/industries/retail", PageType.USE_CASES_OR_INDUSTRIES),
            ("https://acme.test/customers", PageType.CASE_STUDIES_OR_CUSTOMERS),
            ("https://acme.test/contact", PageType.CTA_ELEMENTS),
            ("https://acme.test/team", None),
        ],
    )
    def test_page_type_from_url(self, url: str, page_type: str | None) -> None:
        assert page_type_from_url(url) == page_type

    def test_nav_text_fallback(self) -> None:
        assert page_type_from_nav("https://acme.test/x", "Success stories") == PageType.CASE_STUDIES_OR_CUSTOMERS
        assert page_type_from_nav("https://acme.test/x", "") is None

    def test_content_fallback_is_homepage(self) -> None:
        assert page_type_from_content("<p>hello</p>", "https://acme.test/x") == PageType.HOMEPAGE

    def test_ignore_rules(self) -> None:
        assert should_ignore("https://acme.test/careers")
        assert should_ignore("https://acme.test/x", "Privacy Policy")
        assert not should_ignore("https://acme.test/pricing", "Pricing")

    def test_mandatory_paths(self) -> None:
        assert mandatory_paths_for_host("acme.test")[0] == "/pricing"
        crunchbase = mandatory_paths_for_host("www.crunchbase.com")
        assert crunchbase[0] == "/buy/select-product"
        assert len(crunchbase) == len(set(crunchbase))


class TestTargetSelection:
    def test_candidate_links_are_same_origin(self) -> None:
        html = """
        <a href="/pricing">Pricing</a>
        <a href="https://other.test/x">Other</a>
        <a href="mailto:a@b.c">Mail</a>
        <a href="tel:123">Call</a>
        <a href="javascript:void(0)">JS</a>
        """
        links = extract_candidate_links(html, BASE_URL)
        assert [link.href for link in links] == [f"{BASE_URL}/pricing"]

    def test_one_target_per_type_in_priority_order(self) -> None:
        links = [
            CandidateLink(href=f"{BASE_URL}/case-studies", text="Case studies"),
            CandidateLink(href=f"{BASE_URL}/pricing", text="Pricing"),
            CandidateLink(href=f"{BASE_URL}/plans", text="Plans"),
            CandidateLink(href=f"{BASE_URL}/careers", text="Careers"),
        ]
        targets = pick_target_urls(BASE_URL, links, max_pages=3, max_seo_pages=0)

        assert [(t.url, t.page_type) for t in targets] == [
            (BASE_URL, PageType.HOMEPAGE),
            (f"{BASE_URL}/pricing", PageType.PRICING),
            (f"{BASE_URL}/case-studies", PageType.CASE_STUDIES_OR_CUSTOMERS),
        ]

    def test_seo_content_and_mandatory_paths_fill_budget(self) -> None:
        links = [
            CandidateLink(href=f"{BASE_URL}/resources/guide-one", text="Guide"),
            CandidateLink(href=f"{BASE_URL}/resources/guide-two", text="Guide 2"),
        ]
        targets = pick_target_urls(BASE_URL, links, max_pages=5, max_seo_pages=3)
        urls = [target.url for target in targets]

        assert len(targets) == 5
        assert f"{BASE_URL}/resources/guide-two" in urls
        assert f"{BASE_URL}/pricing" in urls

    def test_seo_content_classification(self) -> None:
        assert classify_seo_content_path("https://a.test/case-study/x") == PageType.CASE_STUDIES_OR_CUSTOMERS
        assert classify_seo_content_path("https://a.test/blog/x") == PageType.USE_CASES_OR_INDUSTRIES
        assert classify_seo_content_path("https://a.test/about") is None

    @pytest.mark.parametrize(
        "url",
        ["https://a.test/case-study/x", "https://a.test/case-studies/x", "https://a.test/blog/x"],
    )
    def test_selected_content_pages_produce_seo_rows(self, url: str) -> None:
        assert classify_seo_content_path(url) is not None
        assert is_seo_content_path(url)

    def test_mandatory_targets_are_unique(self) -> None:
        urls = [url for url, _ in mandatory_targets(BASE_URL)]
        assert len(urls) == len(set(urls))
        assert f"{BASE_URL}/pricing" in urls


class TestExtractor:
    def test_homepage_signals(self) -> None:
        page = extract_page(HOMEPAGE_HTML, url=BASE_URL, title="Acme", page_type=PageType.HOMEPAGE)

        assert page.headline == "Automate every workflow"
        assert page.h2_headings == ["Collaboration for teams"]
        assert page.nav_labels == ["Pricing", "Services", "Case Studies"]
        assert page.primary_cta is not None and page.primary_cta.text == "Get started"
        assert page.secondary_cta is not None and page.secondary_cta.text == "Book demo"
        assert [link.href for link in page.footer_links] == []
        assert page.meta_description == "Acme builds workflow automation."
        assert page.structured_content["search_seo"]["h1"] == "Automate every workflow"
        assert page.service_snapshot is None
        assert page.pricing_signals is None

    def test_ctas_only_on_homepage(self) -> None:
        page = extract_page(HOMEPAGE_HTML, url=BASE_URL, title=None, page_type=PageType.PRICING)
        assert page.top_ctas == []

    def test_services_keyword_profile(self) -> None:
        page = extract_page(SERVICES_HTML, url=f"{BASE_URL}/services", title=None, page_type=PageType.SERVICES)
        snapshot = page.service_snapshot

        assert snapshot is not None
        assert snapshot["strategic_keywords_count"] >= 2
        assert snapshot["execution_keywords_count"] >= 2
        assert snapshot["industries"] == ["healthcare", "finance"]
        assert snapshot["section_count"] == 3
        assert page.structured_content["section_count"] == 3

    def test_pricing_signals(self) -> None:
        signals = extract_pricing_signals(PRICING_HTML)
        assert signals["prices"] == ["$29"]
        assert "enterprise plan" in signals["plans"]
        assert "starter plan" in signals["plans"]

    def test_html_hash_ignores_whitespace_between_tags(self) -> None:
        assert compute_html_hash("<p>a</p>   <p>b</p>") == compute_html_hash("<p>a</p><p>b</p>")

    def test_normalize_signal_text(self) -> None:
        assert normalize_signal_text("  Start   FREE trial! ") == "start free trial"

    def test_screenshot_path(self) -> None:
        path = build_screenshot_path(
            competitor_id="c1",
            crawl_job_id="j1",
            page_type="pricing",
            page_url="https://acme.test/pricing",
            captured_at=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )
        assert path.startswith("competitors/c1/crawl_jobs/j1/2026-01-02T03-04-05+00-00-pricing-")
        assert path.endswith(".png")
        assert "=" not in path
