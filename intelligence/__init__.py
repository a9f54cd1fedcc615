"""
Deterministic competitor intelligence:
raw signals -> traits -> scores -> ranking -> narrative -> confidence.
"""

from intelligence.orchestrator import run_intelligence_engine
from intelligence.signals import build_raw_signals, snapshot_signal
from intelligence.types import IntelligenceReport, RawSignals, ScoreDimension

__all__ = [
    "IntelligenceReport",
    "RawSignals",
    "ScoreDimension",
    "build_raw_signals",
    "run_intelligence_engine",
    "snapshot_signal",
]
