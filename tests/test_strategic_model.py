"""
tests/test_strategic_model.py

Pytest tests for the six-dimension strategic model.

Coverage
--------
- Raw signal aggregation, including pricing flags
- Dimension formulas, clamping and the breadth-without-focus flag
- Competitive pressure against the peer average; overlapping high scores
- Enterprise positioning saturation
- Trajectory: empty, single snapshot, absolute deltas, ordering
- Executive brief archetypes and section lines
- Competitive snapshot identity, strengths, vulnerabilities, risk level
- Orchestrator end to end
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from baseline.trust import extract_trust_profile
from intelligence.types import ServiceSnapshotSignal, SnapshotSignal
from strategic.brief import archetype_for, evolution_line, generate_executive_brief, pressure_line
from strategic.dimensions import BREADTH_WITHOUT_FOCUS, compute_strategic_dimensions
from strategic.orchestrator import run_strategic_model
from strategic.pressure import compute_competitive_pressure, detect_positioning_saturation
from strategic.signals import build_strategic_signals, pricing_flags
from strategic.snapshot import build_competitive_snapshot, identity_for
from strategic.trajectory import analyze_trajectory
from strategic.types import (
    DIMENSION_KEYS,
    AccelerationLevel,
    PressureLevel,
    StrategicDimensions,
    StrategicRawSignals,
    TrajectoryAnalysis,
    TrajectorySnapshot,
)

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _raw(**fields) -> StrategicRawSignals:
    return StrategicRawSignals(competitor_id="competitor-1", **fields)


def _dims(raw: StrategicRawSignals) -> StrategicDimensions:
    return compute_strategic_dimensions(raw).dimensions


class TestStrategicSignals:
    def test_pricing_flags(self) -> None:
        pricing = SnapshotSignal(
            structured_content={"pricing_signals": {"prices": ["$29"], "plans": ["Starter plan", "Enterprise plan"]}}
        )
        assert pricing_flags(pricing) == (True, True, True)
        assert pricing_flags(SnapshotSignal(structured_content={"pricing_signals": {"plans": ["pro"]}})) == (
            False,
            False,
            False,
        )
        assert pricing_flags(None) == (False, False, False)

    def test_build_from_services_and_trust(self) -> None:
        services = ServiceSnapshotSignal(
            strategic_keywords_count=4,
            execution_keywords_count=3,
            lifecycle_keywords_count=1,
            enterprise_keywords_count=2,
            industries=["healthcare"],
            section_count=5,
        )
        trust = extract_trust_profile(
            homepage=SnapshotSignal(h1_text="SOC 2 and GDPR ready"),
            case_studies_page=SnapshotSignal(h1_text="Customers"),
        )

        raw = build_strategic_signals(
            competitor_id="competitor-1",
            services=services,
            pricing_page=None,
            trust=trust,
            recent_change_count_30d=3,
            structural_shift_detected=True,
        )

        assert raw.strategic_terms == 4
        assert raw.service_count == 5
        assert raw.industries_detected == ["healthcare"]
        assert raw.case_studies_present is True
        assert raw.certifications_count == 2
        assert raw.pricing_transparent is False
        assert raw.structural_trait_shifts_detected is True

    def test_missing_inputs_are_zero(self) -> None:
        raw = build_strategic_signals(
            competitor_id="competitor-1",
            services=None,
            pricing_page=None,
            trust=None,
            recent_change_count_30d=0,
            structural_shift_detected=False,
        )
        assert raw == _raw()


class TestDimensions:
    def test_strategic_elevation(self) -> None:
        assert _dims(_raw(strategic_terms=10, lifecycle_terms=4, execution_terms=4)).strategic_elevation == 60
        assert _dims(_raw(execution_terms=10)).strategic_elevation == 0
        assert _dims(_raw(strategic_terms=30)).strategic_elevation == 100

    @pytest.mark.parametrize("industries, expected", [(0, 10), (3, 60), (6, 100)])
    def test_vertical_depth(self, industries: int, expected: int) -> None:
        raw = _raw(industries_detected=[f"industry-{i}" for i in range(industries)])
        assert _dims(raw).vertical_depth == expected

    @pytest.mark.parametrize("count, expected", [(0, 0), (5, 50), (10, 100), (12, 84)])
    def test_service_breadth(self, count: int, expected: int) -> None:
        assert _dims(_raw(service_count=count)).service_breadth == expected

    def test_breadth_without_focus_flag(self) -> None:
        flagged = compute_strategic_dimensions(_raw(service_count=9, industries_detected=["retail"]))
        focused = compute_strategic_dimensions(_raw(service_count=9, industries_detected=["a", "b"]))

        assert flagged.flags == [BREADTH_WITHOUT_FOCUS]
        assert focused.flags == []

    def test_enterprise_orientation(self) -> None:
        raw = _raw(enterprise_keywords=5, case_studies_present=True, certifications_count=2)
        assert _dims(raw).enterprise_orientation == 55

    def test_monetization_maturity(self) -> None:
        full = _raw(pricing_transparent=True, multiple_tiers_detected=True, enterprise_tier_detected=True)
        assert _dims(full).monetization_maturity == 90
        assert _dims(_raw()).monetization_maturity == 30

    def test_market_momentum(self) -> None:
        assert _dims(_raw(recent_change_count_30d=3, structural_trait_shifts_detected=True)).market_momentum == 65
        assert _dims(_raw(recent_change_count_30d=10)).market_momentum == 100

    def test_details_follow_dimension_order(self) -> None:
        result = compute_strategic_dimensions(_raw())
        assert [detail.dimension for detail in result.details] == list(DIMENSION_KEYS)
        assert list(result.dimensions.to_dict()) == list(DIMENSION_KEYS)

    def test_from_dict_defaults(self) -> None:
        dims = StrategicDimensions.from_dict({"service_breadth": 40.0, "vertical_depth": "x"})
        assert dims.service_breadth == 40
        assert dims.vertical_depth == 0


class TestPressure:
    def test_highest_positive_pressure(self) -> None:
        own = StrategicDimensions(
            strategic_elevation=40,
            service_breadth=80,
            vertical_depth=50,
            enterprise_orientation=76,
            monetization_maturity=60,
            market_momentum=10,
        )
        peer = StrategicDimensions(
            strategic_elevation=80,
            service_breadth=60,
            vertical_depth=50,
            enterprise_orientation=80,
            monetization_maturity=60,
            market_momentum=20,
        )

        result = compute_competitive_pressure(own, [peer])

        assert result.highest_pressure_dimension == "strategic_elevation"
        assert result.overall_pressure_level == PressureLevel.HIGH
        assert {area.dimension: area.pressure for area in result.areas}["service_breadth"] == -20
        assert result.overlapping_high_dimensions == ["enterprise_orientation"]

    def test_peer_average_rounds_half_up(self) -> None:
        peers = [StrategicDimensions(market_momentum=45), StrategicDimensions(market_momentum=50)]
        result = compute_competitive_pressure(StrategicDimensions(), peers)

        assert result.highest_pressure_dimension == "market_momentum"
        assert result.areas[-1].pressure == 48

    def test_moderate_level(self) -> None:
        result = compute_competitive_pressure(StrategicDimensions(), [StrategicDimensions(vertical_depth=12)])
        assert result.overall_pressure_level == PressureLevel.MODERATE

    def test_no_peers(self) -> None:
        result = compute_competitive_pressure(StrategicDimensions(), [])
        assert result.overall_pressure_level == PressureLevel.LOW
        assert result.areas == []

    def test_ahead_of_every_peer(self) -> None:
        own = StrategicDimensions(**{key: 90 for key in DIMENSION_KEYS})
        result = compute_competitive_pressure(own, [StrategicDimensions()])

        assert result.highest_pressure_dimension is None
        assert result.overall_pressure_level == PressureLevel.LOW
        assert len(result.areas) == 6

    def test_saturation(self) -> None:
        saturated = StrategicDimensions(strategic_elevation=80, enterprise_orientation=75)
        result = detect_positioning_saturation([saturated, saturated, StrategicDimensions()])

        assert result is not None
        assert result.saturated_competitor_count == 2
        assert detect_positioning_saturation([saturated]) is None
        assert detect_positioning_saturation([]) is None


class TestTrajectory:
    def test_empty(self) -> None:
        result = analyze_trajectory([])
        assert result.dominant_trend_dimension is None
        assert result.acceleration_level == AccelerationLevel.STABLE

    def test_single_snapshot_reports_strongest(self) -> None:
        result = analyze_trajectory([TrajectorySnapshot(T0, StrategicDimensions(vertical_depth=70))])
        assert result.dominant_trend_dimension == "vertical_depth"
        assert result.acceleration_level == AccelerationLevel.STABLE

    def test_rapid_movement(self) -> None:
        snapshots = [
            TrajectorySnapshot(T0 + timedelta(days=30), StrategicDimensions(market_momentum=40, service_breadth=12)),
            TrajectorySnapshot(T0, StrategicDimensions(market_momentum=10, service_breadth=10)),
        ]
        result = analyze_trajectory(snapshots)

        assert result.dominant_trend_dimension == "market_momentum"
        assert result.acceleration_level == AccelerationLevel.RAPID

    def test_decline_counts_as_movement(self) -> None:
        snapshots = [
            TrajectorySnapshot(T0, StrategicDimensions(monetization_maturity=50)),
            TrajectorySnapshot(T0 + timedelta(days=1), StrategicDimensions(monetization_maturity=42)),
        ]
        result = analyze_trajectory(snapshots)

        assert result.dominant_trend_dimension == "monetization_maturity"
        assert result.acceleration_level == AccelerationLevel.INCREASING

    def test_no_movement(self) -> None:
        dims = StrategicDimensions(service_breadth=30)
        result = analyze_trajectory([TrajectorySnapshot(T0, dims), TrajectorySnapshot(T0 + timedelta(days=1), dims)])
        assert result.dominant_trend_dimension is None
        assert result.acceleration_level == AccelerationLevel.STABLE


class TestExecutiveBrief:
    @pytest.mark.parametrize(
        "dims, archetype",
        [
            (
                StrategicDimensions(strategic_elevation=80, enterprise_orientation=70),
                "Enterprise strategic transformer",
            ),
            (StrategicDimensions(service_breadth=70, vertical_depth=30), "Broad portfolio generalist"),
            (StrategicDimensions(vertical_depth=60), "Segment-focused specialist"),
            (StrategicDimensions(), "Balanced operator"),
        ],
    )
    def test_archetypes(self, dims: StrategicDimensions, archetype: str) -> None:
        assert archetype_for(dims) == archetype

    def test_sections(self) -> None:
        dims = StrategicDimensions(service_breadth=90, vertical_depth=10)
        pressure = compute_competitive_pressure(dims, [StrategicDimensions(strategic_elevation=40)])
        trajectory = TrajectoryAnalysis("market_momentum", AccelerationLevel.RAPID)

        brief = generate_executive_brief(
            competitor_id="competitor-1",
            dimensions=dims,
            pressure=pressure,
            trajectory=trajectory,
            saturation=None,
            flags=[BREADTH_WITHOUT_FOCUS],
        )
        sections = {section.title: section.lines for section in brief.sections}

        assert list(sections) == [
            "Strategic Identity",
            "Market Position",
            "Competitive Pressure",
            "Evolution Signal",
            "Structural Risks",
        ]
        assert sections["Competitive Pressure"] == [
            "Competitive pressure is strongest in strategic elevation, at a high level."
        ]
        assert sections["Evolution Signal"] == ["Recent momentum indicates rapid movement in market momentum."]
        assert sections["Structural Risks"] == ["Breadth without clear vertical focus may diffuse positioning."]
        assert sections["Strategic Identity"][0] in (
            "Competitor demonstrates low strategic elevation with low vertical depth.",
            "Strategic posture skews toward low elevation and high service breadth.",
        )

    def test_quiet_lines(self) -> None:
        pressure = compute_competitive_pressure(StrategicDimensions(), [])
        assert pressure_line(pressure) == "Competitive pressure from tracked peers currently appears limited."
        assert evolution_line(TrajectoryAnalysis(None, AccelerationLevel.STABLE)) == (
            "Recent momentum suggests a stable strategic posture over the latest period."
        )


class TestCompetitiveSnapshot:
    @pytest.mark.parametrize(
        "dims, identity",
        [
            (StrategicDimensions(monetization_maturity=80, strategic_elevation=30), "Pricing-Structured Operator"),
            (
                StrategicDimensions(strategic_elevation=80, enterprise_orientation=80),
                "Enterprise Transformation Leader",
            ),
            (StrategicDimensions(strategic_elevation=50, vertical_depth=80, service_breadth=40), "Vertical Specialist"),
            (
                StrategicDimensions(strategic_elevation=50, service_breadth=80, vertical_depth=20),
                "Broad Capability Operator",
            ),
            (StrategicDimensions(strategic_elevation=50), "Balanced Operator"),
        ],
    )
    def test_identity(self, dims: StrategicDimensions, identity: str) -> None:
        assert identity_for(dims) == identity

    def test_snapshot(self) -> None:
        dims = StrategicDimensions(
            strategic_elevation=90,
            service_breadth=10,
            vertical_depth=20,
            enterprise_orientation=80,
            monetization_maturity=50,
            market_momentum=0,
        )

        snapshot = build_competitive_snapshot(
            competitor_id="competitor-1",
            dimensions=dims,
            overlapping_high_dimensions=["strategic_elevation", "enterprise_orientation"],
            trajectory=TrajectoryAnalysis("market_momentum", AccelerationLevel.RAPID),
        )

        assert snapshot.identity_label == "Enterprise Transformation Leader"
        assert snapshot.strengths == ["Strong strategic positioning narrative", "Enterprise-oriented messaging"]
        assert snapshot.vulnerabilities == ["Limited repositioning signals", "Broad service coverage"]
        assert snapshot.competitive_risk_level == PressureLevel.HIGH
        assert snapshot.trajectory_signal == "Rapid Repositioning"

    def test_low_risk_without_overlap(self) -> None:
        snapshot = build_competitive_snapshot(
            competitor_id="competitor-1",
            dimensions=StrategicDimensions(),
            overlapping_high_dimensions=[],
            trajectory=TrajectoryAnalysis(None, AccelerationLevel.STABLE),
        )
        assert snapshot.competitive_risk_level == PressureLevel.LOW
        assert snapshot.trajectory_signal == "Stable"


class TestStrategicOrchestrator:
    def test_without_peers_or_history(self) -> None:
        result = run_strategic_model(_raw(service_count=4), now=T0)

        assert result.pressure.overall_pressure_level == PressureLevel.LOW
        assert result.saturation is None
        assert result.trajectory.acceleration_level == AccelerationLevel.STABLE
        assert result.trajectory.dominant_trend_dimension == "service_breadth"
        assert len(result.brief.sections) == 5

    def test_with_peers_and_history(self) -> None:
        raw = _raw(strategic_terms=20, enterprise_keywords=30, recent_change_count_30d=2)
        dims = _dims(raw)
        peer = StrategicDimensions(strategic_elevation=90, enterprise_orientation=90, market_momentum=60)
        history = [
            TrajectorySnapshot(
                T0,
                StrategicDimensions(strategic_elevation=100, enterprise_orientation=90, monetization_maturity=30),
            ),
            TrajectorySnapshot(T0 + timedelta(days=30), dims),
        ]

        result = run_strategic_model(raw, peer_dimensions=[peer], trajectory_snapshots=history)

        assert result.saturation is not None
        assert result.saturation.saturated_competitor_count == 2
        assert result.pressure.highest_pressure_dimension == "market_momentum"
        assert result.trajectory.dominant_trend_dimension == "market_momentum"
        assert result.to_dict()["brief"]["archetype"] == "Enterprise strategic transformer"
