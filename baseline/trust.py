"""
baseline/trust.py

Trust indicators from the homepage and the case-studies page.
"""

from __future__ import annotations

import re

from baseline.types import TrustIndicators, TrustProfile
from intelligence.types import EvidenceItem, SnapshotSignal

RULE_ID = "BP-TRUST-001"

CERTIFICATION_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("ISO 27k", re.compile(r"iso\s*27\d{2}", re.IGNORECASE)),
    ("SOC 2", re.compile(r"soc\s*2", re.IGNORECASE)),
    ("HIPAA", re.compile(r"hipaa", re.IGNORECASE)),
    ("GDPR", re.compile(r"gdpr", re.IGNORECASE)),
)
CASE_STUDY_PATTERN = re.compile(r"case stud(y|ies)|customer story|success story", re.IGNORECASE)
LOGO_GRID_PATTERN = re.compile(r"trusted by|customers include", re.IGNORECASE)
QUOTE_PATTERN = re.compile(r"“[^”]+”|\"[^\"]+\"")


def _page_text(page: SnapshotSignal | None) -> str:
    if page is None:
        return ""
    parts = [page.h1_text or "", *page.h2_headings, *page.list_items]
    return " ".join(part for part in parts if part)


def detect_certifications(text: str) -> list[str]:
    return [name for name, pattern in CERTIFICATION_PATTERNS if pattern.search(text)]


def extract_trust_profile(
    *,
    homepage: SnapshotSignal | None,
    case_studies_page: SnapshotSignal | None,
) -> TrustProfile:
    evidence: list[EvidenceItem] = []
    homepage_text = _page_text(homepage)
    cases_text = _page_text(case_studies_page)

    case_studies_present = (
        case_studies_page is not None
        or CASE_STUDY_PATTERN.search(homepage_text) is not None
        or CASE_STUDY_PATTERN.search(cases_text) is not None
    )
    if case_studies_present:
        source = "case_studies" if case_studies_page is not None else "homepage"
        evidence.append(EvidenceItem(source, "case_studies_present", True))

    certifications: list[str] = []
    for name in [*detect_certifications(homepage_text), *detect_certifications(cases_text)]:
        if name not in certifications:
            certifications.append(name)
    if certifications:
        evidence.append(EvidenceItem("snapshot", "certifications", certifications))

    logo_grid = LOGO_GRID_PATTERN.search(homepage_text) is not None or LOGO_GRID_PATTERN.search(cases_text) is not None
    if logo_grid:
        evidence.append(EvidenceItem("homepage", "logo_grid_detected", True))

    quotes = QUOTE_PATTERN.findall(homepage_text)
    if quotes:
        evidence.append(EvidenceItem("homepage", "testimonial_snippets", quotes[:5]))

    return TrustProfile(
        trust_indicators=TrustIndicators(
            case_studies_present=case_studies_present,
            certifications_detected=certifications,
            logo_grid_detected=logo_grid,
            testimonial_count=len(quotes),
        ),
        rule_id=RULE_ID,
        evidence=evidence,
    )
