"""
intelligence/scoring.py

Six dimension scores, each a fixed-weight average of trait points.
Weights and point tables are constants, not learned values.
"""

from __future__ import annotations

from intelligence.rounding import clamp_score
from intelligence.types import UNKNOWN, Contribution, DimensionScore, ScoreDimension, Trait

# trait value -> points; anything not listed scores the fallback.
TRAIT_POINTS: dict[str, dict[str, int]] = {
    "service_breadth": {"broad": 85, "focused": 55},
    "service_focus": {"Strategic": 80, "Balanced": 65, "Execution": 55},
    "vertical_focus": {"clear": 80, "diffuse": 55},
    "monetization_signal": {"enterprise": 75, "sales-led": 65, "growth-led": 60},
    "gtm_motion": {"hybrid": 75, "sales-led": 65, "self-serve": 60},
    "credibility_surface": {"present": 75, "absent": 45},
    "execution_velocity": {"active": 80, "selective": 60},
}
FALLBACK_POINTS: dict[str, int] = {"execution_velocity": 45}
DEFAULT_POINTS = 40

# (dimension, rule id, [(trait id, weight, rationale)])
DIMENSION_RULES: tuple[tuple[str, str, tuple[tuple[str, float, str], ...]], ...] = (
    (
        ScoreDimension.POSITIONING,
        "SM-POS-001",
        (
            ("messaging_emphasis", 0.45, "Homepage messaging theme availability and clarity."),
            ("service_focus", 0.35, "Service framing (Strategic/Balanced/Execution) influences positioning depth."),
            ("service_breadth", 0.2, "Breadth can reinforce perceived capability scope."),
        ),
    ),
    (
        ScoreDimension.OPERATIONAL_DEPTH,
        "SM-OPS-001",
        (
            ("service_breadth", 0.65, "More structured sections typically indicate broader operational surface area."),
            (
                "service_focus",
                0.35,
                "Execution-heavy focus can imply delivery depth; strategic can imply advisory depth.",
            ),
        ),
    ),
    (
        ScoreDimension.MONETIZATION_CLARITY,
        "SM-MON-001",
        (
            ("monetization_signal", 0.7, "Pricing narrative signals are strong indicators of packaging intent."),
            ("gtm_motion", 0.3, "CTA-driven GTM motion clarifies conversion strategy."),
        ),
    ),
    (
        ScoreDimension.MARKET_FOCUS,
        "SM-MKT-001",
        (
            ("vertical_focus", 0.7, "Explicit industries indicate sharper market segmentation."),
            ("service_breadth", 0.3, "Breadth without vertical clarity may imply generalist positioning."),
        ),
    ),
    (
        ScoreDimension.CREDIBILITY_PROOF,
        "SM-CRED-001",
        (("credibility_surface", 1.0, "Presence of case studies/customers page implies proof surface."),),
    ),
    (
        ScoreDimension.EXECUTION_VELOCITY,
        "SM-VEL-001",
        (("execution_velocity", 1.0, "Recent change cadence indicates execution velocity on public surfaces."),),
    ),
)


def score_trait(trait_id: str, value: str) -> int:
    if trait_id == "bot_mitigation_block":
        # Quality signal only.
        return 0
    if trait_id == "messaging_emphasis":
        return 70 if value and value != UNKNOWN else 45
    table = TRAIT_POINTS.get(trait_id)
    if table is None:
        return 0
    return table.get(value, FALLBACK_POINTS.get(trait_id, DEFAULT_POINTS))


def weighted_average(parts: list[Contribution]) -> float:
    total_weight = sum(part.weight for part in parts)
    if total_weight <= 0:
        return 0.0
    return sum(part.weight * part.points for part in parts) / total_weight


def compute_scores(traits: dict[str, Trait]) -> dict[str, DimensionScore]:
    """Score every dimension; missing traits score as unknown."""
    scores: dict[str, DimensionScore] = {}
    for dimension, rule_id, rules in DIMENSION_RULES:
        contributions = [
            Contribution(
                trait_id=trait_id,
                weight=weight,
                points=score_trait(trait_id, traits[trait_id].value if trait_id in traits else UNKNOWN),
                rationale=rationale,
            )
            for trait_id, weight, rationale in rules
        ]
        scores[dimension] = DimensionScore(
            dimension=dimension,
            score=clamp_score(weighted_average(contributions)),
            rule_id=rule_id,
            contributions=contributions,
        )
    return scores
