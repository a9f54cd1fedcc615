"""
db/models/insight.py

Short, templated competitive-intelligence statements about a competitor.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class InsightType:
    OBSERVATIONAL = "observational"
    WEBPAGE_SIGNAL = "webpage_signal"
    MESSAGING_SHIFT = "messaging_shift"
    CONVERSION_STRATEGY = "conversion_strategy"
    PRICING_STRATEGY = "pricing_strategy"
    PRODUCT_FOCUS = "product_focus"
    CREDIBILITY_PROOF = "credibility_proof"
    STRATEGIC_PRIORITY = "strategic_priority"


class Insight(Base, TimestampMixin):
    __tablename__ = "insights"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    competitor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("competitors.id", ondelete="CASCADE"),
        nullable=False,
    )
    page_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    insight_type: Mapped[str] = mapped_column(String(64), nullable=False)
    insight_text: Mapped[str] = mapped_column(Text, nullable=False)
    confidence: Mapped[str] = mapped_column(String(16), nullable=False)
    related_change_ids: Mapped[list[Any] | None] = mapped_column(JSONB, nullable=True)

    __table_args__ = (
        Index("ix_insights_competitor_created_at", "competitor_id", "created_at"),
        Index("ix_insights_competitor_type", "competitor_id", "insight_type"),
    )
