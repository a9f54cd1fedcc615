"""
intelligence/confidence.py

Confidence reflects how many independent signals were available and how
far apart the dimension scores landed.
"""

from __future__ import annotations

from intelligence.types import UNKNOWN, ConfidenceLevel, ConfidenceResult, DimensionScore, Trait

RULE_ID = "CM-001"

SIGNAL_TRAITS = (
    "messaging_emphasis",
    "gtm_motion",
    "monetization_signal",
    "service_breadth",
    "vertical_focus",
    "credibility_surface",
)


def count_signals_used(traits: dict[str, Trait]) -> int:
    return sum(1 for trait_id in SIGNAL_TRAITS if trait_id in traits and traits[trait_id].value != UNKNOWN)


def score_spread(scores: dict[str, DimensionScore]) -> int:
    values = [score.score for score in scores.values()]
    if not values:
        return 0
    return max(values) - min(values)


def compute_confidence(*, traits: dict[str, Trait], scores: dict[str, DimensionScore]) -> ConfidenceResult:
    """Derive the confidence level for one report.

    Args:
        traits: Trait map from `derive_competitive_traits`.
        scores: Dimension scores from `compute_scores`.

    Returns:
        ConfidenceResult with level, reasons, signal count and spread.
    """
    signals_used = count_signals_used(traits)
    spread = score_spread(scores)
    blocked_trait = traits.get("bot_mitigation_block")
    blocked = blocked_trait is not None and blocked_trait.value == "blocked"

    reasons: list[str] = []
    if blocked:
        reasons.append("Bot mitigation appears to block some high-impact pages.")
    if signals_used >= 5:
        reasons.append("Multiple independent signals are available.")
    if signals_used <= 2:
        reasons.append("Signal coverage is thin; interpretation is constrained.")
    if spread >= 25:
        reasons.append("Score margins are meaningful across dimensions.")
    if spread < 15:
        reasons.append("Score margins are tight; differentiation is limited.")

    if blocked:
        level = ConfidenceLevel.MEDIUM if signals_used >= 4 else ConfidenceLevel.LOW
    elif signals_used >= 5 and spread >= 20:
        level = ConfidenceLevel.HIGH
    elif signals_used <= 2:
        level = ConfidenceLevel.LOW
    else:
        level = ConfidenceLevel.MEDIUM

    return ConfidenceResult(
        level=level,
        rule_id=RULE_ID,
        reasons=reasons,
        signals_used_count=signals_used,
        score_spread=spread,
    )
