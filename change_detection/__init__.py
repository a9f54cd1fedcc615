"""
Snapshot diffing, change classification and change-derived insights.
"""

from change_detection.classifier import classify_change
from change_detection.compare import ComparisonOutcome, compare_snapshots
from change_detection.detector import detect_changes
from change_detection.impact import assess_impact, interpret_change
from change_detection.pm_signals import PmSignalDiff, PmSignalSnapshot, detect_pm_signal_changes
from change_detection.types import ChangeCategory, DetectedChange, ImpactLevel

__all__ = [
    "ChangeCategory",
    "ComparisonOutcome",
    "DetectedChange",
    "ImpactLevel",
    "PmSignalDiff",
    "PmSignalSnapshot",
    "assess_impact",
    "classify_change",
    "compare_snapshots",
    "detect_changes",
    "detect_pm_signal_changes",
    "interpret_change",
]
