"""Personalized re-ranking of an externally ranked trending list.

Multipliers on top of the positional base score:
  - genre affinity   1.3x
  - language match   1.2x
  - top artist       1.4x
  - already played   0.7x
followed by a max-3-per-artist diversity cap.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from homefeed.core.diversity import MAX_SONGS_PER_ARTIST, artist_key, limit_per_key
from homefeed.core.text import (
    DEFAULT_ARTIST_GENRE_MAP,
    index_ignore_case,
    infer_genres,
    is_likely_matching_language,
)
from homefeed.models import Song, TasteSignals

logger = logging.getLogger("homefeed.engines.trending")

GENRE_BOOST = 1.3
LANGUAGE_BOOST = 1.2
ARTIST_BOOST = 1.4
PLAYED_PENALTY = 0.7


@dataclass(frozen=True)
class RankedTrendingItem:
    song: Song
    personalized_score: float
    original_rank: int


def personalize_score(song: Song, original_rank: int, total_count: int, signals: TasteSignals) -> float:
    """Positional base score scaled by independent personalization multipliers."""
    base = 1.0 - original_rank / total_count if total_count > 0 else 0.5

    genre_map = signals.artist_genre_map or DEFAULT_ARTIST_GENRE_MAP
    song_genres = infer_genres(song.artist, genre_map, default=["Pop"])
    genre_boost = GENRE_BOOST if any(
        index_ignore_case(signals.top_genres, genre) >= 0 for genre in song_genres
    ) else 1.0

    language_boost = LANGUAGE_BOOST if is_likely_matching_language(song, signals.preferred_languages) else 1.0
    artist_boost = ARTIST_BOOST if index_ignore_case(signals.top_artists, song.artist) >= 0 else 1.0
    novelty = PLAYED_PENALTY if song.id in signals.played_song_ids else 1.0

    return base * genre_boost * language_boost * artist_boost * novelty


def personalize(trending: Sequence[Song], signals: TasteSignals) -> List[RankedTrendingItem]:
    """Score and sort without the diversity cap."""
    total = len(trending)
    items = [
        RankedTrendingItem(song, personalize_score(song, rank, total, signals), rank)
        for rank, song in enumerate(trending)
    ]
    return sorted(items, key=lambda item: item.personalized_score, reverse=True)


def rank_trending(
    trending: Sequence[Song],
    signals: TasteSignals,
    max_per_artist: int = MAX_SONGS_PER_ARTIST,
) -> List[Song]:
    if not trending:
        return []
    ranked = limit_per_key(personalize(trending, signals), lambda item: artist_key(item.song), max_per_artist)
    logger.debug(f"Trending: {len(trending)} in, {len(ranked)} after diversity")
    return [item.song for item in ranked]
