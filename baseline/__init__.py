"""
Company baseline profile: industry, segment, offerings, value proposition
and trust indicators derived from stored page snapshots.
"""

from baseline.orchestrator import run_baseline_profile
from baseline.types import BaselineInput, BaselineResult, CompanyBaselineProfile

__all__ = [
    "BaselineInput",
    "BaselineResult",
    "CompanyBaselineProfile",
    "run_baseline_profile",
]
