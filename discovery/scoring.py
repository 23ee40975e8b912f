"""Deterministic engagement scoring and ranking for video candidates."""

from __future__ import annotations

from datetime import datetime, timezone
import math
from typing import List, Optional, Sequence

from models import VideoCandidate


# Policy constants; changing any of them changes every ranking.
VIEW_VELOCITY_WEIGHT = 0.5
LIKE_WEIGHT = 10
POPULARITY_BONUS = 50
POPULARITY_THRESHOLD = 100_000
NORMALIZATION_DIVISOR = 1000
MIN_SCORE = 1
MAX_SCORE = 100
SECONDS_PER_DAY = 86_400.0


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_since_publish(published_at: datetime, now: datetime) -> float:
    """Fractional age in days, floored at 1 so same-day and future uploads stay finite."""
    elapsed = (_as_utc(now) - _as_utc(published_at)).total_seconds() / SECONDS_PER_DAY
    return max(1.0, elapsed)


def raw_engagement(view_count: int, like_count: int, published_at: datetime, now: datetime) -> float:
    days = days_since_publish(published_at, now)
    bonus = POPULARITY_BONUS if view_count > POPULARITY_THRESHOLD else 0
    return (view_count / days) * VIEW_VELOCITY_WEIGHT + like_count * LIKE_WEIGHT + bonus


def engagement_score(view_count: int, like_count: int, published_at: datetime, now: datetime) -> int:
    """Map raw metadata to an integer score in [1, 100]."""
    raw = raw_engagement(max(0, view_count), max(0, like_count), published_at, now)
    return _clamp(_round_half_up(raw / NORMALIZATION_DIVISOR), MIN_SCORE, MAX_SCORE)


def score_candidate(candidate: VideoCandidate, now: datetime) -> VideoCandidate:
    if candidate.is_scored:
        return candidate
    score = engagement_score(candidate.view_count, candidate.like_count, candidate.published_at, now)
    return candidate.with_score(score)


def score_candidates(
    candidates: Sequence[VideoCandidate],
    now: Optional[datetime] = None,
) -> List[VideoCandidate]:
    """Score every candidate against one instant and sort by score, highest first.

    Ties keep the incoming (provider) order.
    """
    now = now or datetime.now(timezone.utc)
    scored = [score_candidate(candidate, now) for candidate in candidates]
    return sorted(scored, key=lambda item: item.engagement_score, reverse=True)


def select_primary(candidates: Sequence[VideoCandidate]) -> Optional[VideoCandidate]:
    """Highest-scoring candidate, first one on ties; None when there are no candidates."""
    best: Optional[VideoCandidate] = None
    for candidate in candidates:
        if not candidate.is_scored:
            raise ValueError(f"video {candidate.video_id} has not been scored")
        if best is None or candidate.engagement_score > best.engagement_score:
            best = candidate
    return best
