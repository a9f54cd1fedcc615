"""
tests/test_intelligence_engine.py

Pytest tests for the deterministic intelligence pipeline.

Coverage
--------
- Raw signal assembly: services snapshot, bot challenge, insight parsing
- Trait thresholds (velocity, breadth, vertical focus, monetization, GTM)
- Dimension scoring with fixed weights and half-up rounding
- Broader services never lower operational depth, for every service focus
- Ranking: top/bottom three and both imbalance rules
- Narrative: stable template selection, implications, bot note
- Confidence: zero signals, rich signals, blocked services page
- Orchestrator trace covers every stage
"""

from __future__ import annotations

from typing import Any

import pytest

from intelligence.confidence import compute_confidence, count_signals_used
from intelligence.narrative import BOT_MITIGATION_NOTE, compose_narrative
from intelligence.orchestrator import run_intelligence_engine
from intelligence.ranking import rank_strengths_and_risks
from intelligence.rounding import clamp_score, round_half_up
from intelligence.scoring import compute_scores, score_trait
from intelligence.selection import select, stable_index
from intelligence.signals import build_raw_signals, extract_webpage_signals
from intelligence.traits import (
    derive_competitive_traits,
    derive_execution_velocity,
    derive_service_breadth,
    derive_vertical_focus,
)
from intelligence.types import (
    UNKNOWN,
    ConfidenceLevel,
    Narrative,
    RawSignals,
    ScoreDimension,
    ServiceSnapshotSignal,
    SnapshotSignal,
    Trait,
)

RICH_INSIGHTS = [
    "Homepage messaging emphasizes security.",
    "Primary CTA suggests a hybrid go-to-market strategy.",
    "Pricing narrative: Enterprise positioning emphasized.",
    "Product capabilities emphasize analytics.",
]


def _services(**structured: Any) -> SnapshotSignal:
    content = {"section_count": 8, "industries": ["healthcare", "finance"], "primary_focus": "Strategic"}
    content.update(structured)
    return SnapshotSignal(
        url="https://acme.test/services",
        http_status=200,
        title="Services",
        h2_headings=["Strategy", "", "Delivery"],
        structured_content=content,
    )


def _signals(
    *,
    services: SnapshotSignal | None = None,
    insights: list[str] | None = None,
    tracked: list[str] | None = None,
    changes: int = 0,
) -> RawSignals:
    latest = {"services": services} if services is not None else {}
    return build_raw_signals(
        competitor_id="competitor-1",
        tracked_page_types=tracked or [],
        changes_last_30d_count=changes,
        latest_by_page_type=latest,
        webpage_signal_insights=insights,
    )


def _rich(changes: int = 6) -> RawSignals:
    return _signals(
        services=_services(),
        insights=RICH_INSIGHTS,
        tracked=["homepage", "services", "case_studies_or_customers"],
        changes=changes,
    )


class TestRawSignals:
    def test_services_snapshot_is_parsed(self) -> None:
        signals = _rich()

        assert signals.services.snapshot is not None
        assert signals.services.snapshot.section_count == 8
        assert signals.services.snapshot.primary_focus == "Strategic"
        assert signals.services.evidence_headings == ["Strategy", "Delivery"]
        assert signals.services.blocked_by_bot_mitigation is False

    def test_negative_change_count_is_clamped(self) -> None:
        assert _signals(changes=-4).changes_last_30d_count == 0

    def test_structured_content_without_section_count(self) -> None:
        assert ServiceSnapshotSignal.from_structured({"industries": ["retail"]}) is None
        assert ServiceSnapshotSignal.from_structured(None) is None

    def test_unknown_focus_falls_back_to_balanced(self) -> None:
        signal = ServiceSnapshotSignal.from_structured({"section_count": 2, "primary_focus": "Other"})
        assert signal is not None
        assert signal.primary_focus == "Balanced"

    def test_bot_challenge(self) -> None:
        blocked = SnapshotSignal(http_status=403, title="Just a moment...")
        assert _signals(services=blocked).services.blocked_by_bot_mitigation is True
        forbidden = SnapshotSignal(http_status=403, title="Forbidden")
        assert _signals(services=forbidden).services.blocked_by_bot_mitigation is False

    def test_insight_texts_are_parsed(self) -> None:
        web = extract_webpage_signals(RICH_INSIGHTS)

        assert web.messaging_theme == "security"
        assert web.gtm_motion == "a hybrid"
        assert web.pricing_narrative == "Enterprise positioning emphasized."
        assert web.capability_theme == "analytics"

    def test_no_insights(self) -> None:
        web = extract_webpage_signals([])
        assert web.messaging_theme is None
        assert web.pricing_narrative is None


class TestTraits:
    @pytest.mark.parametrize("count, expected", [(0, "stable"), (1, "stable"), (2, "selective"), (5, "active")])
    def test_execution_velocity(self, count: int, expected: str) -> None:
        assert derive_execution_velocity(count) == expected

    @pytest.mark.parametrize("count, expected", [(None, UNKNOWN), (0, UNKNOWN), (6, "focused"), (7, "broad")])
    def test_service_breadth(self, count: int | None, expected: str) -> None:
        assert derive_service_breadth(count) == expected

    def test_vertical_focus(self) -> None:
        assert derive_vertical_focus(["a", "b"]) == "clear"
        assert derive_vertical_focus(["a"]) == "diffuse"
        assert derive_vertical_focus([]) == UNKNOWN

    def test_rich_traits(self) -> None:
        traits = derive_competitive_traits(_rich())
        values = {trait_id: trait.value for trait_id, trait in traits.items()}

        assert values == {
            "service_breadth": "broad",
            "service_focus": "Strategic",
            "vertical_focus": "clear",
            "monetization_signal": "enterprise",
            "gtm_motion": "hybrid",
            "messaging_emphasis": "security",
            "credibility_surface": "present",
            "execution_velocity": "active",
            "bot_mitigation_block": "not_blocked",
        }

    def test_traits_carry_evidence(self) -> None:
        traits = derive_competitive_traits(_rich())
        evidence = traits["execution_velocity"].evidence[0]
        assert evidence.key == "changes_last_30d_count"
        assert evidence.value == 6


class TestScoring:
    def test_point_tables(self) -> None:
        assert score_trait("messaging_emphasis", "security") == 70
        assert score_trait("messaging_emphasis", UNKNOWN) == 45
        assert score_trait("execution_velocity", "stable") == 45
        assert score_trait("vertical_focus", UNKNOWN) == 40
        assert score_trait("bot_mitigation_block", "blocked") == 0

    def test_rich_scores(self) -> None:
        scores = compute_scores(derive_competitive_traits(_rich()))

        assert list(scores) == list(ScoreDimension.ALL)
        assert scores[ScoreDimension.OPERATIONAL_DEPTH].score == 83
        assert scores[ScoreDimension.MONETIZATION_CLARITY].score == 75
        assert scores[ScoreDimension.CREDIBILITY_PROOF].score == 75
        assert scores[ScoreDimension.EXECUTION_VELOCITY].score == 80

    def test_zero_signal_scores(self) -> None:
        scores = compute_scores(derive_competitive_traits(_signals()))
        values = {dimension: score.score for dimension, score in scores.items()}

        assert values == {
            ScoreDimension.POSITIONING: 42,
            ScoreDimension.OPERATIONAL_DEPTH: 40,
            ScoreDimension.MONETIZATION_CLARITY: 40,
            ScoreDimension.MARKET_FOCUS: 40,
            ScoreDimension.CREDIBILITY_PROOF: 45,
            ScoreDimension.EXECUTION_VELOCITY: 45,
        }

    def test_missing_traits_score_as_unknown(self) -> None:
        scores = compute_scores({})
        assert scores[ScoreDimension.CREDIBILITY_PROOF].score == 40

    def test_contributions_are_recorded(self) -> None:
        score = compute_scores(derive_competitive_traits(_rich()))[ScoreDimension.MARKET_FOCUS]
        assert [part.trait_id for part in score.contributions] == ["vertical_focus", "service_breadth"]
        assert [part.points for part in score.contributions] == [80, 85]

    @pytest.mark.parametrize("service_focus", ["Strategic", "Balanced", "Execution", UNKNOWN])
    def test_broader_services_never_lower_operational_depth(self, service_focus: str) -> None:
        def depth(breadth: str) -> int:
            traits = {
                "service_breadth": Trait("service_breadth", "Service breadth", breadth, "TE-SVC-001", []),
                "service_focus": Trait("service_focus", "Service focus", service_focus, "TE-SVC-002", []),
            }
            return compute_scores(traits)[ScoreDimension.OPERATIONAL_DEPTH].score

        assert depth("broad") >= depth("focused")
        assert depth("focused") >= depth(UNKNOWN)


class TestRounding:
    def test_half_up(self) -> None:
        assert round_half_up(2.5) == 3.0
        assert round_half_up(3.5) == 4.0
        assert round_half_up(1.25, 1) == 1.3

    def test_non_finite(self) -> None:
        assert round_half_up(float("nan")) == 0.0

    def test_clamp_score(self) -> None:
        assert clamp_score(101.2) == 100
        assert clamp_score(-3) == 0
        assert clamp_score(54.5) == 55


class TestRanking:
    def test_zero_signals(self) -> None:
        traits = derive_competitive_traits(_signals())
        ranking = rank_strengths_and_risks(traits=traits, scores=compute_scores(traits))

        assert [item.dimension for item in ranking.strengths] == [
            ScoreDimension.CREDIBILITY_PROOF,
            ScoreDimension.EXECUTION_VELOCITY,
            ScoreDimension.POSITIONING,
        ]
        assert [item.dimension for item in ranking.risks] == [
            ScoreDimension.OPERATIONAL_DEPTH,
            ScoreDimension.MONETIZATION_CLARITY,
            ScoreDimension.MARKET_FOCUS,
        ]
        assert ranking.risks[0].severity == 60
        assert ranking.imbalances == []

    def test_broad_without_focus(self) -> None:
        signals = _signals(services=_services(industries=[]), changes=0)
        traits = derive_competitive_traits(signals)
        ranking = rank_strengths_and_risks(traits=traits, scores=compute_scores(traits))

        assert [item.id for item in ranking.imbalances] == ["imbalance_broad_no_focus"]

    def test_monetization_without_proof(self) -> None:
        signals = _signals(insights=RICH_INSIGHTS)
        traits = derive_competitive_traits(signals)
        ranking = rank_strengths_and_risks(traits=traits, scores=compute_scores(traits))

        assert [item.id for item in ranking.imbalances] == ["imbalance_monetization_no_proof"]
        assert ranking.imbalances[0].severity == 65


class TestNarrative:
    def _compose(self, signals: RawSignals) -> Narrative:
        traits = derive_competitive_traits(signals)
        ranking = rank_strengths_and_risks(traits=traits, scores=compute_scores(traits))
        return compose_narrative(competitor_id=signals.competitor_id, traits=traits, ranking=ranking)

    def test_deterministic(self) -> None:
        assert self._compose(_rich()) == self._compose(_rich())

    def test_lines_and_implications(self) -> None:
        narrative = self._compose(_signals())

        assert len(narrative.strengths) == 3
        assert len(narrative.risks) == 3
        assert narrative.implications[0].text == "Primary strength signal concentrates in Credibility proof."
        assert narrative.implications[1].text == "Primary risk signal concentrates in Operational depth."
        assert narrative.strengths[0].template_id.startswith("NC-STR-CredibilityProof-")

    def test_bot_mitigation_note(self) -> None:
        blocked = SnapshotSignal(http_status=403, title="Just a moment...")
        narrative = self._compose(_signals(services=blocked))
        assert narrative.implications[-1].text == BOT_MITIGATION_NOTE

    def test_stable_index(self) -> None:
        assert stable_index("competitor-1:strength_Positioning", 2) == stable_index(
            "competitor-1:strength_Positioning", 2
        )
        assert stable_index("anything", 0) == 0
        with pytest.raises(ValueError):
            select("seed", [])


class TestConfidence:
    def test_zero_signals_is_low(self) -> None:
        traits = derive_competitive_traits(_signals())
        confidence = compute_confidence(traits=traits, scores=compute_scores(traits))

        assert confidence.level == ConfidenceLevel.LOW
        assert confidence.signals_used_count == 1
        assert confidence.score_spread == 5
        assert "Signal coverage is thin; interpretation is constrained." in confidence.reasons

    def test_rich_signals_with_wide_spread_is_high(self) -> None:
        traits = derive_competitive_traits(_rich(changes=0))
        confidence = compute_confidence(traits=traits, scores=compute_scores(traits))

        assert count_signals_used(traits) == 6
        assert confidence.score_spread >= 20
        assert confidence.level == ConfidenceLevel.HIGH

    def test_rich_signals_with_tight_spread_is_medium(self) -> None:
        traits = derive_competitive_traits(_rich(changes=6))
        confidence = compute_confidence(traits=traits, scores=compute_scores(traits))

        assert confidence.level == ConfidenceLevel.MEDIUM
        assert "Score margins are tight; differentiation is limited." in confidence.reasons

    def test_blocked_services_page(self) -> None:
        blocked = SnapshotSignal(http_status=403, title="Just a moment...")
        traits = derive_competitive_traits(_signals(services=blocked, insights=RICH_INSIGHTS))
        confidence = compute_confidence(traits=traits, scores=compute_scores(traits))

        assert confidence.level == ConfidenceLevel.MEDIUM
        assert confidence.reasons[0] == "Bot mitigation appears to block some high-impact pages."


class TestOrchestrator:
    def test_trace_covers_each_stage(self) -> None:
        report = run_intelligence_engine(_rich())

        assert [event.step for event in report.trace] == [
            "signals",
            "traits",
            "scores",
            "ranking",
            "narrative",
            "confidence",
        ]
        assert report.trace[-1].message == f"Computed confidence: {report.confidence.level}."

    def test_report_serializes(self) -> None:
        payload = run_intelligence_engine(_signals()).to_dict()

        assert payload["competitor_id"] == "competitor-1"
        assert payload["confidence"]["level"] == ConfidenceLevel.LOW
        assert set(payload["scores"]) == set(ScoreDimension.ALL)

    def test_same_input_same_report(self) -> None:
        assert run_intelligence_engine(_rich()) == run_intelligence_engine(_rich())
