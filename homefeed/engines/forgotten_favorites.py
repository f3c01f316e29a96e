"""Forgotten favorites: songs played often in the past but not lately."""

from datetime import datetime, timedelta
from typing import Iterable, List

from homefeed.models import HistoryEntry, Song, to_utc

MIN_PLAYS = 5
DORMANT_DAYS = 30


def rank_forgotten_favorites(
    entries: Iterable[HistoryEntry],
    now: datetime,
    limit: int,
    recent_song_ids: Iterable[str] = (),
    min_plays: int = MIN_PLAYS,
    dormant_days: int = DORMANT_DAYS,
) -> List[Song]:
    """Most-played songs whose last play is older than ``dormant_days``."""
    cutoff = to_utc(now) - timedelta(days=dormant_days)
    recent = set(recent_song_ids)
    dormant = [
        entry for entry in entries
        if entry.stats.total_plays >= min_plays
        and to_utc(entry.stats.last_played_at) < cutoff
        and entry.song.id not in recent
    ]
    dormant.sort(key=lambda entry: entry.stats.total_plays, reverse=True)
    return [entry.song for entry in dormant[:limit]]
