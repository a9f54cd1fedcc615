"""
change_detection/types.py

Shared change-detection records and label constants.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from change_detection.details import ChangeReference, dump_details


class ChangeCategory:
    POSITIONING_MESSAGING = "Positioning & Messaging"
    PRICING_OFFERS = "Pricing & Offers"
    PRODUCT_SERVICES = "Product / Services"
    TRUST_CREDIBILITY = "Trust & Credibility"
    NAVIGATION_STRUCTURE = "Navigation / Structure"

    ALL = (
        POSITIONING_MESSAGING,
        PRICING_OFFERS,
        PRODUCT_SERVICES,
        TRUST_CREDIBILITY,
        NAVIGATION_STRUCTURE,
    )


class ImpactLevel:
    STRATEGIC = "Strategic"
    MODERATE = "Moderate"
    MINOR = "Minor"

    ALL = (STRATEGIC, MODERATE, MINOR)


@dataclass(frozen=True)
class DetectedChange:
    change_type: str
    page_url: str
    page_type: str
    summary: str
    details: Any
    category: str = ChangeCategory.NAVIGATION_STRUCTURE
    before: ChangeReference | None = None
    after: ChangeReference | None = None

    @property
    def element_key(self) -> str:
        return str(getattr(self.details, "element_key", "") or "")

    def details_payload(self) -> dict[str, Any]:
        """
        JSON stored on the change row: both references plus the typed details.
        """

        return {
            "before": self.before.to_payload() if self.before is not None else None,
            "after": self.after.to_payload() if self.after is not None else None,
            **dump_details(self.details),
        }
