"""
baseline/value_prop.py

Picks the value-proposition theme with the highest keyword score. Ties
keep the earlier theme.
"""

from __future__ import annotations

from baseline.text import combine, count_keywords
from baseline.types import AboutSnapshot, ValuePropProfile, ValuePropType
from intelligence.types import EvidenceItem, SnapshotSignal

RULE_ID = "BP-VP-001"

# (type, keywords, narrative label)
VALUE_PROP_THEMES: tuple[tuple[str, tuple[str, ...], str], ...] = (
    (
        ValuePropType.OUTCOME_DRIVEN,
        ("outcomes", "business impact", "results", "measurable", "value"),
        "Outcome-driven transformation narrative",
    ),
    (
        ValuePropType.EFFICIENCY,
        ("productivity", "efficiency", "faster", "streamline", "optimize"),
        "Efficiency and productivity improvement narrative",
    ),
    (
        ValuePropType.RISK_COMPLIANCE,
        ("compliance", "risk", "security", "governance"),
        "Risk and compliance-focused narrative",
    ),
    (
        ValuePropType.INNOVATION,
        ("innovation", "innovate", "next generation", "reinvent"),
        "Innovation and future-oriented narrative",
    ),
    (
        ValuePropType.COST_OPTIMIZATION,
        ("lower costs", "cost savings", "save costs", "total cost of ownership"),
        "Cost optimization narrative",
    ),
)


def parse_value_prop(*, about: AboutSnapshot, homepage: SnapshotSignal | None) -> ValuePropProfile:
    evidence: list[EvidenceItem] = []
    parts: list[str] = []

    if homepage is not None and homepage.h1_text:
        parts.append(homepage.h1_text)
        evidence.append(EvidenceItem("homepage", "h1_text", homepage.h1_text))
    if homepage is not None and homepage.h2_headings:
        parts.append(" ".join(homepage.h2_headings))
        evidence.append(EvidenceItem("homepage", "h2_headings", homepage.h2_headings[:5]))
    if about.company_summary_raw:
        parts.append(about.company_summary_raw)
        evidence.append(EvidenceItem("about", "company_summary_raw", about.company_summary_raw))

    combined = combine(parts)
    scores = [(theme, count_keywords(combined, keywords), label) for theme, keywords, label in VALUE_PROP_THEMES]

    best_type, best_score, best_label = ValuePropType.UNKNOWN, 0, None
    for theme, score, label in scores:
        if score > best_score:
            best_type, best_score, best_label = theme, score, label

    evidence.append(
        EvidenceItem("snapshot", "value_prop_scores", [{"id": theme, "score": score} for theme, score, _ in scores])
    )
    return ValuePropProfile(
        value_prop_type=best_type,
        dominant_narrative=best_label,
        rule_id=RULE_ID,
        evidence=evidence,
    )
