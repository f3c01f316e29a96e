"""Listen Again ranking.

Scores previously played tracks by how likely the user is to want them
again right now:

    SCORE = 0.35*Recency + 0.25*Frequency + 0.15*Completion
            + 0.10*Context - 0.10*Skip + 0.05*Temporal

Every factor is normalized to [0, 1] and the composite is floored at 0.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Mapping

from homefeed.core.diversity import limit_per_key
from homefeed.core.score_math import decay, log_compress, weighted_sum
from homefeed.core.text import normalize_key
from homefeed.models import HistoryEntry, PlaybackStat, Song, to_utc

logger = logging.getLogger("homefeed.engines.listen_again")

WEIGHTS = {
    "recency": 0.35,
    "frequency": 0.25,
    "completion": 0.15,
    "context": 0.10,
    "skip": 0.10,
    "temporal": 0.05,
}

HALF_LIFE_HOURS = 7 * 24.0
FREQUENCY_CAP = 50
MAX_DAYS_SINCE_PLAY = 90

# Burnout: heavy play the week before, nothing this week
BURNOUT_PRIOR_WEEK_PLAYS = 15
BURNOUT_SUPPRESS_DAYS = 14

MAX_PER_ARTIST = 2

DAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def time_of_day_bucket(hour: int) -> str:
    if hour < 6:
        return "night"
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def day_of_week_key(weekday: int) -> str:
    """Three-letter key for a ``datetime.weekday()`` value (Monday is 0)."""
    return DAY_KEYS[weekday % 7]


@dataclass(frozen=True)
class ScoringContext:
    """Point in time the score is computed for."""

    time_of_day: str
    day_of_week: str
    now: datetime

    @classmethod
    def from_datetime(cls, now: datetime) -> "ScoringContext":
        """Buckets use the wall-clock fields of now, so pass it in the listener's zone."""
        return cls(
            time_of_day=time_of_day_bucket(now.hour),
            day_of_week=day_of_week_key(now.weekday()),
            now=now,
        )


def hours_since(last_played_at: datetime, now: datetime) -> float:
    return (to_utc(now) - to_utc(last_played_at)).total_seconds() / 3600.0


def days_since(last_played_at: datetime, now: datetime) -> int:
    return int((to_utc(now) - to_utc(last_played_at)).total_seconds() // 86400)


def recency_score(last_played_at: datetime, now: datetime) -> float:
    return decay(hours_since(last_played_at, now), HALF_LIFE_HOURS)


def frequency_score(play_count_90d: int) -> float:
    return log_compress(play_count_90d, FREQUENCY_CAP)


def completion_score(completed_count: int, total_plays: int) -> float:
    if total_plays <= 0:
        return 0.0
    return completed_count / total_plays


def _share(distribution: Mapping[str, int], key: str) -> float:
    total = sum(distribution.values())
    if total <= 0:
        return 0.0
    return distribution.get(key, 0) / total


def context_boost(time_distribution: Mapping[str, int], time_of_day: str) -> float:
    return _share(time_distribution, time_of_day)


def skip_penalty(skip_count_30d: int, play_count_30d: int) -> float:
    if play_count_30d <= 0:
        return 0.0
    return min(1.0, skip_count_30d / play_count_30d)


def temporal_affinity(day_distribution: Mapping[str, int], day_of_week: str) -> float:
    return _share(day_distribution, day_of_week)


def factor_breakdown(stats: PlaybackStat, context: ScoringContext) -> Dict[str, float]:
    return {
        "recency": recency_score(stats.last_played_at, context.now),
        "frequency": frequency_score(stats.play_count_90d),
        "completion": completion_score(stats.completed_count, stats.total_plays),
        "context": context_boost(stats.time_of_day_distribution, context.time_of_day),
        "skip": skip_penalty(stats.skip_count_30d, stats.play_count_30d),
        "temporal": temporal_affinity(stats.day_of_week_distribution, context.day_of_week),
    }


def compute_score(stats: PlaybackStat, context: ScoringContext) -> float:
    factors = factor_breakdown(stats, context)
    score = weighted_sum(
        (-WEIGHTS[name] if name == "skip" else WEIGHTS[name], value)
        for name, value in factors.items()
    )
    return max(0.0, score)


score_listen_again = compute_score


def is_eligible(stats: PlaybackStat, now: datetime) -> bool:
    """Whether a track may appear in Listen Again at all."""
    if stats.qualified_listen_count < 1:
        return False

    days = days_since(stats.last_played_at, now)
    if days > MAX_DAYS_SINCE_PLAY:
        return False

    if (
        stats.play_count_7d_prior > BURNOUT_PRIOR_WEEK_PLAYS
        and stats.play_count_7d == 0
        and days < BURNOUT_SUPPRESS_DAYS
    ):
        return False

    return True


def rank_listen_again(
    entries: Iterable[HistoryEntry],
    context: ScoringContext,
    limit: int,
    max_per_artist: int = MAX_PER_ARTIST,
) -> List[Song]:
    """Filter, score and order played songs for the Listen Again shelf."""
    entries = list(entries)
    eligible = [entry for entry in entries if is_eligible(entry.stats, context.now)]
    scored = sorted(
        ((compute_score(entry.stats, context), entry) for entry in eligible),
        key=lambda pair: pair[0],
        reverse=True,
    )
    ordered = [entry.song for _, entry in scored]
    result = limit_per_key(ordered, lambda song: normalize_key(song.artist), max_per_artist)[:limit]
    logger.debug(f"Listen again: {len(entries)} played, {len(eligible)} eligible, {len(result)} kept")
    return result
