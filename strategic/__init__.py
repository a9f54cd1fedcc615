"""
Six-dimension strategic model with peer pressure, trajectory and an
executive brief.
"""

from strategic.dimensions import compute_strategic_dimensions
from strategic.orchestrator import run_strategic_model
from strategic.signals import build_strategic_signals
from strategic.snapshot import CompetitiveSnapshot, build_competitive_snapshot
from strategic.trajectory import analyze_trajectory
from strategic.types import (
    StrategicDimensions,
    StrategicModelResult,
    StrategicRawSignals,
    TrajectorySnapshot,
)

__all__ = [
    "CompetitiveSnapshot",
    "StrategicDimensions",
    "StrategicModelResult",
    "StrategicRawSignals",
    "TrajectorySnapshot",
    "analyze_trajectory",
    "build_competitive_snapshot",
    "build_strategic_signals",
    "compute_strategic_dimensions",
    "run_strategic_model",
]
