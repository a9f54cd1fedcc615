"""
baseline/industry.py

Keyword scoring across five industry vocabularies. Confidence depends on
the margin between the top two scores.
"""

from __future__ import annotations

from baseline.text import combine, count_keywords
from baseline.types import AboutSnapshot, IndustryProfile
from intelligence.types import ConfidenceLevel, EvidenceItem, SnapshotSignal

RULE_ID = "BP-IND-001"
HIGH_CONFIDENCE_MARGIN = 2

# (label, keywords); order breaks ties.
INDUSTRY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Fintech", ("banking", "payments", "fintech", "financial services")),
    ("Healthcare", ("hospital", "healthcare", "clinical")),
    ("SaaS", ("platform", "cloud", "software", "saas")),
    ("Consulting", ("advisory", "consulting", "transformation")),
    ("E-commerce", ("retail", "marketplace", "online store", "ecommerce")),
)


def _text_sources(
    about: AboutSnapshot,
    homepage: SnapshotSignal | None,
    services: SnapshotSignal | None,
) -> tuple[list[str], list[EvidenceItem]]:
    parts: list[str] = []
    evidence: list[EvidenceItem] = []

    def add(source: str, key: str, text: str | None, shown: object = None) -> None:
        if not text:
            return
        parts.append(text)
        evidence.append(EvidenceItem(source, key, shown if shown is not None else text))

    add("about", "company_summary_raw", about.company_summary_raw)
    if homepage is not None:
        add("homepage", "h1_text", homepage.h1_text)
        add("homepage", "title", homepage.title)
        add("homepage", "h2_headings", " ".join(homepage.h2_headings), homepage.h2_headings[:5])
    if services is not None:
        add("services", "h2_headings", " ".join(services.h2_headings), services.h2_headings[:5])
        add("services", "h3_headings", " ".join(services.h3_headings), services.h3_headings[:5])
        add("services", "title", services.title)
    return parts, evidence


def classify_industry(
    *,
    about: AboutSnapshot,
    homepage: SnapshotSignal | None,
    services: SnapshotSignal | None,
) -> IndustryProfile:
    parts, evidence = _text_sources(about, homepage, services)
    combined = combine(parts)

    scores = [(label, count_keywords(combined, keywords)) for label, keywords in INDUSTRY_KEYWORDS]
    scores.sort(key=lambda item: item[1], reverse=True)

    top_label, top_score = scores[0]
    second_score = scores[1][1]

    primary = top_label if top_score > 0 else None
    secondary = [label for label, score in scores[1:] if score > 0]

    if top_score == 0:
        confidence = ConfidenceLevel.LOW
    elif top_score >= second_score + HIGH_CONFIDENCE_MARGIN:
        confidence = ConfidenceLevel.HIGH
    else:
        confidence = ConfidenceLevel.MEDIUM

    evidence.append(
        EvidenceItem("snapshot", "industry_scores", [{"industry": label, "score": score} for label, score in scores])
    )
    return IndustryProfile(
        primary_industry=primary,
        secondary_industries=secondary,
        industry_confidence=confidence,
        rule_id=RULE_ID,
        evidence=evidence,
    )
