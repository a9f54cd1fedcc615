"""
baseline/segment.py

Enterprise / mid-market / SMB detection. Each phrase adds one point to
its segment; a tie between non-zero segments reads as "mixed".
"""

from __future__ import annotations

import re

from baseline.text import combine
from baseline.types import AboutSnapshot, TargetSegment, TargetSegmentProfile
from intelligence.types import EvidenceItem, SnapshotSignal

RULE_ID = "BP-SEG-001"

SEGMENT_PHRASES: tuple[tuple[str, re.Pattern[str], str], ...] = (
    (TargetSegment.ENTERPRISE, re.compile(r"\benterprise\b"), "enterprise"),
    (TargetSegment.MID_MARKET, re.compile(r"\bmid-?market\b"), "mid-market"),
    (TargetSegment.MID_MARKET, re.compile(r"\bmid sized\b"), "mid sized"),
    (TargetSegment.SMB, re.compile(r"\bsmb\b"), "SMB"),
    (TargetSegment.SMB, re.compile(r"\bsmall business\b"), "small business"),
    (TargetSegment.SMB, re.compile(r"\bstartups?\b"), "startup"),
)


def detect_target_segment(
    *,
    about: AboutSnapshot,
    homepage: SnapshotSignal | None,
    services: SnapshotSignal | None,
) -> TargetSegmentProfile:
    evidence: list[EvidenceItem] = []
    parts: list[str] = []

    if about.company_summary_raw:
        parts.append(about.company_summary_raw)
        evidence.append(EvidenceItem("about", "company_summary_raw", about.company_summary_raw))
    if homepage is not None and homepage.h1_text:
        parts.append(homepage.h1_text)
        evidence.append(EvidenceItem("homepage", "h1_text", homepage.h1_text))
    if services is not None and services.h2_headings:
        parts.append(" ".join(services.h2_headings))
        evidence.append(EvidenceItem("services", "h2_headings", services.h2_headings[:5]))

    combined = combine(parts)
    scores = {TargetSegment.ENTERPRISE: 0, TargetSegment.MID_MARKET: 0, TargetSegment.SMB: 0}
    for segment, pattern, phrase in SEGMENT_PHRASES:
        if pattern.search(combined):
            scores[segment] += 1
            evidence.append(EvidenceItem("about", f"segment_{segment}", phrase))

    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    top_segment, top_score = ranked[0]
    second_score = ranked[1][1]

    if top_score == 0:
        target = TargetSegment.UNKNOWN
    elif top_score == second_score:
        target = TargetSegment.MIXED
    else:
        target = top_segment

    evidence.append(EvidenceItem("snapshot", "segment_scores", dict(scores)))
    return TargetSegmentProfile(target_segment=target, rule_id=RULE_ID, evidence=evidence)
