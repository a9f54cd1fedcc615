"""
intelligence/narrative.py

Turns ranked items into sentences. Each sentence comes from a small fixed
template pool; the pick is a hash of competitor id and item id, so the
same ranking always reads the same way.
"""

from __future__ import annotations

from intelligence.selection import stable_index
from intelligence.types import (
    Narrative,
    NarrativeLine,
    RankedItem,
    Ranking,
    ScoreDimension,
    Trait,
)

DIMENSION_LABELS: dict[str, str] = {
    ScoreDimension.POSITIONING: "Positioning",
    ScoreDimension.OPERATIONAL_DEPTH: "Operational depth",
    ScoreDimension.MONETIZATION_CLARITY: "Monetization clarity",
    ScoreDimension.MARKET_FOCUS: "Market focus",
    ScoreDimension.CREDIBILITY_PROOF: "Credibility proof",
    ScoreDimension.EXECUTION_VELOCITY: "Execution velocity",
}

STRENGTH_TEMPLATES: dict[str, tuple[str, ...]] = {
    ScoreDimension.POSITIONING: (
        "Positioning appears coherent across public surfaces, supported by consistent messaging cues.",
        "Public-facing positioning reads as intentional and cohesive, reducing ambiguity for buyers.",
    ),
    ScoreDimension.OPERATIONAL_DEPTH: (
        "Service structure suggests meaningful operational depth and delivery surface area.",
        "Offering breadth indicates a mature delivery footprint rather than a narrow point solution.",
    ),
    ScoreDimension.MONETIZATION_CLARITY: (
        "Monetization signals are legible, making packaging and conversion intent easy to infer.",
        "Pricing/CTA signals present a clear conversion path and packaging posture.",
    ),
    ScoreDimension.MARKET_FOCUS: (
        "Market focus signals indicate a defined segment orientation rather than broad generalism.",
        "Segment cues suggest the competitor knows where it wins and is reinforcing that framing.",
    ),
    ScoreDimension.CREDIBILITY_PROOF: (
        "Credibility surfaces suggest proof-building is part of their go-to-market narrative.",
        "Customer proof is present, strengthening trust signals for enterprise buyers.",
    ),
    ScoreDimension.EXECUTION_VELOCITY: (
        "Change cadence suggests active execution on public-facing strategy surfaces.",
        "Recent activity indicates ongoing iteration rather than a static posture.",
    ),
}

RISK_TEMPLATES: dict[str, tuple[str, ...]] = {
    ScoreDimension.POSITIONING: (
        "Positioning signals are thin or inconsistent, making intent harder to interpret reliably.",
        "Messaging cues do not strongly differentiate the offer, increasing ambiguity.",
    ),
    ScoreDimension.OPERATIONAL_DEPTH: (
        "Service structure does not yet indicate broad depth; capability surface may be narrower.",
        "Delivery footprint appears limited or under-articulated in current service pages.",
    ),
    ScoreDimension.MONETIZATION_CLARITY: (
        "Monetization posture is not strongly signaled; packaging intent may be opaque to buyers.",
        "Pricing and conversion cues are weak, which can slow qualification or reduce urgency.",
    ),
    ScoreDimension.MARKET_FOCUS: (
        "Vertical focus is not clearly articulated, suggesting broader or less targeted framing.",
        "Segment emphasis appears diffuse, which can dilute relevance in high-intent markets.",
    ),
    ScoreDimension.CREDIBILITY_PROOF: (
        "Proof surfaces are limited; credibility relies more on claims than demonstrated outcomes.",
        "Customer evidence is not strongly present, which can weaken trust for higher-stakes deals.",
    ),
    ScoreDimension.EXECUTION_VELOCITY: (
        "Low visible change cadence suggests slower iteration on public strategy surfaces.",
        "Limited surface movement suggests stability, but reduces observable experimentation signals.",
    ),
}

IMBALANCE_TEMPLATES: dict[str, tuple[str, ...]] = {
    "imbalance_broad_no_focus": (
        "Broad service surface without clear vertical emphasis can read as generalist positioning.",
        "Breadth is evident, but segment clarity is limited; this can dilute buyer relevance.",
    ),
    "imbalance_monetization_no_proof": (
        "Packaging signals are clear, but proof surfaces are weaker; this can increase buyer skepticism.",
        "Monetization intent is legible, yet credibility cues lag, potentially slowing enterprise conversion.",
    ),
}

IMBALANCE_FALLBACK = "An imbalance pattern was detected based on the current strategic signal mix."
BOT_MITIGATION_NOTE = (
    "Some high-impact pages appear protected by bot mitigation; "
    "interpretation is constrained to partial signals."
)


def dimension_label(dimension: str | None) -> str:
    if dimension is None:
        return "Unknown"
    return DIMENSION_LABELS.get(dimension, dimension)


def _ranked_line(competitor_id: str, item: RankedItem, kind: str) -> NarrativeLine:
    dimension = item.dimension or ScoreDimension.POSITIONING
    if kind == "strength":
        pool = STRENGTH_TEMPLATES[dimension]
        prefix, rule_id = "NC-STR", "NC-STR-001"
    else:
        pool = RISK_TEMPLATES[dimension]
        prefix, rule_id = "NC-RISK", "NC-RISK-001"
    idx = stable_index(f"{competitor_id}:{item.id}", len(pool))
    return NarrativeLine(
        id=f"{kind}_{dimension}",
        kind=kind,
        text=pool[idx],
        template_id=f"{prefix}-{dimension}-{idx}",
        rule_id=rule_id,
        evidence=list(item.evidence),
    )


def _imbalance_line(competitor_id: str, item: RankedItem) -> NarrativeLine:
    pool = IMBALANCE_TEMPLATES.get(item.id, (IMBALANCE_FALLBACK,))
    idx = stable_index(f"{competitor_id}:{item.id}", len(pool))
    return NarrativeLine(
        id=item.id,
        kind="implication",
        text=pool[idx],
        template_id=f"NC-IMB-{item.id}-{idx}",
        rule_id=item.rule_id,
        evidence=list(item.evidence),
    )


def compose_narrative(*, competitor_id: str, traits: dict[str, Trait], ranking: Ranking) -> Narrative:
    strengths = [_ranked_line(competitor_id, item, "strength") for item in ranking.strengths]
    risks = [_ranked_line(competitor_id, item, "risk") for item in ranking.risks]

    implications: list[NarrativeLine] = []
    if ranking.strengths:
        top = ranking.strengths[0]
        implications.append(
            NarrativeLine(
                id="implication_primary_strength",
                kind="implication",
                text=f"Primary strength signal concentrates in {dimension_label(top.dimension)}.",
                template_id="NC-IMP-001",
                rule_id="NC-IMP-001",
                evidence=list(top.evidence),
            )
        )
    if ranking.risks:
        bottom = ranking.risks[0]
        implications.append(
            NarrativeLine(
                id="implication_primary_risk",
                kind="implication",
                text=f"Primary risk signal concentrates in {dimension_label(bottom.dimension)}.",
                template_id="NC-IMP-002",
                rule_id="NC-IMP-002",
                evidence=list(bottom.evidence),
            )
        )
    implications.extend(_imbalance_line(competitor_id, item) for item in ranking.imbalances)

    blocked = traits.get("bot_mitigation_block")
    if blocked is not None and blocked.value == "blocked":
        implications.append(
            NarrativeLine(
                id="implication_bot_mitigation",
                kind="implication",
                text=BOT_MITIGATION_NOTE,
                template_id="NC-QUAL-001",
                rule_id="NC-QUAL-001",
                evidence=[],
            )
        )

    return Narrative(strengths=strengths, risks=risks, implications=implications)
