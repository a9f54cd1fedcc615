"""
intelligence/orchestrator.py

Runs signals -> traits -> scores -> ranking -> narrative -> confidence and
records one trace event per stage.
"""

from __future__ import annotations

import logging

from app.scraping.logging_utils import log_event
from intelligence.confidence import compute_confidence
from intelligence.narrative import compose_narrative
from intelligence.ranking import rank_strengths_and_risks
from intelligence.scoring import compute_scores
from intelligence.traits import derive_competitive_traits
from intelligence.types import IntelligenceReport, RawSignals, TraceEvent

logger = logging.getLogger(__name__)


def run_intelligence_engine(signals: RawSignals) -> IntelligenceReport:
    trace: list[TraceEvent] = [
        TraceEvent(
            step="signals",
            rule_id="ORCH-001",
            message="Starting deterministic intelligence pipeline.",
            data={
                "tracked_page_types": list(signals.tracked_page_types),
                "changes_last_30d_count": signals.changes_last_30d_count,
            },
        )
    ]

    traits = derive_competitive_traits(signals)
    trace.append(
        TraceEvent(
            step="traits",
            rule_id="ORCH-TRAITS-001",
            message="Derived competitive traits from raw signals.",
            data={trait_id: trait.value for trait_id, trait in traits.items()},
        )
    )

    scores = compute_scores(traits)
    trace.append(
        TraceEvent(
            step="scores",
            rule_id="ORCH-SCORES-001",
            message="Computed weighted dimension scores.",
            data={dimension: score.score for dimension, score in scores.items()},
        )
    )

    ranking = rank_strengths_and_risks(traits=traits, scores=scores)
    trace.append(
        TraceEvent(
            step="ranking",
            rule_id="ORCH-RANK-001",
            message="Ranked strengths, risks, and imbalance patterns.",
            data={
                "strengths": [item.id for item in ranking.strengths],
                "risks": [item.id for item in ranking.risks],
                "imbalances": [item.id for item in ranking.imbalances],
            },
        )
    )

    narrative = compose_narrative(competitor_id=signals.competitor_id, traits=traits, ranking=ranking)
    trace.append(
        TraceEvent(
            step="narrative",
            rule_id="ORCH-NARR-001",
            message="Composed deterministic narrative from ranking outputs.",
            data={
                "template_ids": [
                    line.template_id
                    for line in (*narrative.strengths, *narrative.risks, *narrative.implications)
                ]
            },
        )
    )

    confidence = compute_confidence(traits=traits, scores=scores)
    trace.append(
        TraceEvent(
            step="confidence",
            rule_id=confidence.rule_id,
            message=f"Computed confidence: {confidence.level}.",
            data={
                "signals_used_count": confidence.signals_used_count,
                "score_spread": confidence.score_spread,
            },
        )
    )

    log_event(
        logger,
        logging.INFO,
        "intelligence_report_built",
        competitor_id=signals.competitor_id,
        confidence=confidence.level,
        imbalances=len(ranking.imbalances),
    )

    return IntelligenceReport(
        competitor_id=signals.competitor_id,
        raw=signals,
        traits=traits,
        scores=scores,
        ranking=ranking,
        narrative=narrative,
        confidence=confidence,
        trace=trace,
    )
