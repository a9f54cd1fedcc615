"""
seo/content_depth.py

Content investment metrics: volume, depth, cadence and long-form share of
blog-like pages, folded into a 0-100 investment score.
"""

from __future__ import annotations

import re
from typing import Iterable

from intelligence.rounding import clamp_score, round_half_up, round_int
from seo.types import ContentDepthMetrics, SeoPage

BLOG_PATH_PATTERN = re.compile(r"/(blog|resources|insights|knowledge|guides)(/|$)", re.IGNORECASE)
CASE_STUDY_PATH_PATTERN = re.compile(r"/(case-stud(y|ies)|customers?)(/|$)", re.IGNORECASE)

LONG_FORM_WORDS = 1500

# Component caps; the weighted sum tops out below 100 by construction.
VOLUME_CAP = 60
DEPTH_CAP = 30
CADENCE_CAP = 30
LONG_FORM_POINTS = 20


def is_blog_like(url: str) -> bool:
    return bool(BLOG_PATH_PATTERN.search(url))


def is_case_study(url: str) -> bool:
    return bool(CASE_STUDY_PATH_PATTERN.search(url))


def publishing_frequency(pages: list[SeoPage]) -> float:
    """Posts per month across dated pages; needs at least two dates."""
    dates = sorted(page.published_at for page in pages if page.published_at is not None)
    if len(dates) < 2:
        return 0.0
    days = max(1.0, (dates[-1] - dates[0]).total_seconds() / 86_400)
    months = max(1.0, days / 30)
    return round_half_up(len(dates) / months, 1)


def compute_content_depth_metrics(pages: Iterable[SeoPage]) -> ContentDepthMetrics:
    pages = list(pages)
    blog_pages = [page for page in pages if is_blog_like(page.url)]
    case_studies = [page for page in pages if is_case_study(page.url)]

    total_blog_pages = len(blog_pages)
    avg_word_count = round_int(sum(p.word_count for p in blog_pages) / total_blog_pages) if blog_pages else 0
    long_form_ratio = (
        sum(1 for p in blog_pages if p.word_count >= LONG_FORM_WORDS) / total_blog_pages if blog_pages else 0.0
    )
    frequency = publishing_frequency(blog_pages)

    volume = min(total_blog_pages, VOLUME_CAP)
    depth = min(avg_word_count / 30, DEPTH_CAP)
    cadence = min(frequency * 5, CADENCE_CAP)
    long_form = long_form_ratio * LONG_FORM_POINTS
    score = volume * 0.3 + depth * 0.25 + cadence * 0.25 + long_form * 0.2

    return ContentDepthMetrics(
        total_blog_pages=total_blog_pages,
        avg_word_count=avg_word_count,
        total_case_studies=len(case_studies),
        publishing_frequency_per_month=frequency,
        long_form_ratio=long_form_ratio,
        content_investment_score=clamp_score(score),
    )
