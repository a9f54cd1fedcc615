"""
intelligence/ranking.py

Top three dimensions become strengths, bottom three become risks, and two
fixed cross-dimension rules flag imbalances.
"""

from __future__ import annotations

from intelligence.types import DimensionScore, RankedEvidence, RankedItem, Ranking, ScoreDimension, Trait

RANK_SIZE = 3
MARKET_FOCUS_WEAK = 55
MONETIZATION_STRONG = 70
CREDIBILITY_WEAK = 50


def rank_strengths_and_risks(*, traits: dict[str, Trait], scores: dict[str, DimensionScore]) -> Ranking:
    dims = list(scores.values())
    # sorted() is stable, so ties keep dimension order.
    top = sorted(dims, key=lambda d: d.score, reverse=True)[:RANK_SIZE]
    bottom = sorted(dims, key=lambda d: d.score)[:RANK_SIZE]

    strengths = [
        RankedItem(
            id=f"strength_{d.dimension}",
            kind="strength",
            dimension=d.dimension,
            severity=d.score,
            rule_id="RE-RANK-STR-001",
            evidence=[RankedEvidence(value=d.score, dimension=d.dimension)],
        )
        for d in top
    ]
    risks = [
        RankedItem(
            id=f"risk_{d.dimension}",
            kind="risk",
            dimension=d.dimension,
            severity=100 - d.score,
            rule_id="RE-RANK-RISK-001",
            evidence=[RankedEvidence(value=d.score, dimension=d.dimension)],
        )
        for d in bottom
    ]

    imbalances: list[RankedItem] = []
    breadth = traits["service_breadth"].value if "service_breadth" in traits else None
    market_focus = scores.get(ScoreDimension.MARKET_FOCUS)
    if breadth == "broad" and market_focus is not None and market_focus.score <= MARKET_FOCUS_WEAK:
        imbalances.append(
            RankedItem(
                id="imbalance_broad_no_focus",
                kind="imbalance",
                severity=70,
                rule_id="RE-IMB-001",
                evidence=[
                    RankedEvidence(value=breadth, trait_id="service_breadth"),
                    RankedEvidence(value=market_focus.score, dimension=ScoreDimension.MARKET_FOCUS),
                ],
            )
        )

    monetization = scores.get(ScoreDimension.MONETIZATION_CLARITY)
    credibility = scores.get(ScoreDimension.CREDIBILITY_PROOF)
    if (
        monetization is not None
        and credibility is not None
        and monetization.score >= MONETIZATION_STRONG
        and credibility.score <= CREDIBILITY_WEAK
    ):
        imbalances.append(
            RankedItem(
                id="imbalance_monetization_no_proof",
                kind="imbalance",
                severity=65,
                rule_id="RE-IMB-002",
                evidence=[
                    RankedEvidence(value=monetization.score, dimension=ScoreDimension.MONETIZATION_CLARITY),
                    RankedEvidence(value=credibility.score, dimension=ScoreDimension.CREDIBILITY_PROOF),
                ],
            )
        )

    return Ranking(strengths=strengths, risks=risks, imbalances=imbalances)
