"""
baseline/about.py

Company summary assembled from the about page (when one was crawled) and
the homepage hero, plus the facts that can be pulled out of it.
"""

from __future__ import annotations

import re

from baseline.text import collapse, contains_word
from baseline.types import AboutSnapshot
from intelligence.types import EvidenceItem, SnapshotSignal

RULE_ID = "BP-ABOUT-001"

REGION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "North America": ("north america", "united states", "usa", "canada"),
    "Europe": ("europe", "uk", "united kingdom", "germany", "france", "eu"),
    "APAC": ("asia pacific", "apac", "singapore", "australia", "india"),
}

SIZE_SIGNALS = ("global", "enterprise", "startup", "scale-up", "mid-market", "small team")
MISSION_KEYWORDS = ("mission", "vision", "purpose")

_FOUNDING_YEAR = re.compile(r"\b(18[5-9]\d|19\d{2}|20[0-2]\d)\b")


def extract_founding_year(text: str) -> int | None:
    match = _FOUNDING_YEAR.search(text)
    return int(match.group(0)) if match else None


def detect_regions(text: str) -> list[str]:
    # Whole-word match so "eu" does not fire inside "neutral".
    return [
        region
        for region, keywords in REGION_KEYWORDS.items()
        if any(contains_word(text, keyword) for keyword in keywords)
    ]


def detect_mission_keywords(text: str) -> list[str]:
    lowered = text.lower()
    return [keyword for keyword in MISSION_KEYWORDS if keyword in lowered]


def detect_company_size_signals(text: str) -> list[str]:
    lowered = text.lower()
    return [signal for signal in SIZE_SIGNALS if signal in lowered]


def extract_about_snapshot(*, homepage: SnapshotSignal | None, about_page: SnapshotSignal | None) -> AboutSnapshot:
    evidence: list[EvidenceItem] = []

    homepage_parts: list[str] = []
    if homepage is not None and homepage.h1_text:
        homepage_parts.append(homepage.h1_text)
        evidence.append(EvidenceItem("homepage", "h1_text", homepage.h1_text))
    if homepage is not None and homepage.h2_headings:
        homepage_parts.append(" ".join(homepage.h2_headings))
        evidence.append(EvidenceItem("homepage", "h2_headings", homepage.h2_headings[:5]))

    about_parts: list[str] = []
    if about_page is not None:
        if about_page.h1_text:
            about_parts.append(about_page.h1_text)
            evidence.append(EvidenceItem("about", "h1_text", about_page.h1_text))
        if about_page.h2_headings:
            about_parts.append(" ".join(about_page.h2_headings))
            evidence.append(EvidenceItem("about", "h2_headings", about_page.h2_headings[:5]))
        if about_page.list_items:
            about_parts.append(" ".join(about_page.list_items))
            evidence.append(EvidenceItem("about", "list_items", about_page.list_items[:5]))

    summary = collapse(" ".join([*about_parts, *homepage_parts])) or None
    if summary is None:
        return AboutSnapshot(
            company_summary_raw=None,
            founding_year=None,
            detected_regions=[],
            mission_keywords=[],
            company_size_signals=[],
            rule_id=RULE_ID,
            evidence=evidence,
        )

    founding_year = extract_founding_year(summary)
    if founding_year is not None:
        source = "about" if about_page is not None else "homepage"
        evidence.append(EvidenceItem(source, "founding_year", founding_year))

    return AboutSnapshot(
        company_summary_raw=summary,
        founding_year=founding_year,
        detected_regions=detect_regions(summary),
        mission_keywords=detect_mission_keywords(summary),
        company_size_signals=detect_company_size_signals(summary),
        rule_id=RULE_ID,
        evidence=evidence,
    )
