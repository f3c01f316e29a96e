"""Personalized ordering of new releases.

The catalog already restricts candidates to recent content, so this only
reorders them by relevance to the user. Scores are intentionally not
normalized to 1.0; only the relative order matters downstream.
"""

import logging
from typing import List, Sequence

from homefeed.core.diversity import MAX_SONGS_PER_ARTIST, limit_songs_per_artist
from homefeed.core.score_math import clamp, popularity, weighted_sum
from homefeed.core.text import (
    DEFAULT_ARTIST_GENRE_MAP,
    index_ignore_case,
    infer_genres,
    is_likely_matching_language,
)
from homefeed.models import Song, TasteSignals

logger = logging.getLogger("homefeed.engines.new_releases")

WEIGHTS = {
    "artist": 0.30,
    "genre": 0.15,
    "popularity": 0.15,
    "language": 0.10,
    "novelty": 0.10,
}

SCORE_CEILING = 1.5


def _is_followed(song: Song, followed_artist_ids) -> bool:
    artist_id = (song.artist_id or "").lower()
    artist = song.artist.lower()
    for followed in followed_artist_ids:
        followed = followed.lower()
        if (artist_id and followed == artist_id) or followed == artist:
            return True
    return False


def artist_relevance(song: Song, signals: TasteSignals, song_genres: Sequence[str]) -> float:
    """Followed > top listened > genre-similar > unknown."""
    if _is_followed(song, signals.followed_artist_ids):
        return 1.0
    idx = index_ignore_case(signals.top_artists, song.artist)
    if idx >= 0:
        return 0.5 + 0.5 * (1.0 - idx / max(len(signals.top_artists), 1))
    if any(index_ignore_case(signals.top_genres, genre) >= 0 for genre in song_genres):
        return 0.4
    return 0.1


def genre_match(song_genres: Sequence[str], top_genres: Sequence[str]) -> float:
    if not song_genres:
        return 0.3
    ranks = [i for i in (index_ignore_case(top_genres, g) for g in song_genres) if i >= 0]
    if not ranks:
        return 0.2
    return 1.0 - min(ranks) / max(len(top_genres), 1)


def score_release(song: Song, signals: TasteSignals) -> float:
    genre_map = signals.artist_genre_map or DEFAULT_ARTIST_GENRE_MAP
    song_genres = infer_genres(song.artist, genre_map)

    if is_likely_matching_language(song, signals.preferred_languages):
        language_match = 1.0
    else:
        language_match = 0.5

    score = weighted_sum([
        (WEIGHTS["artist"], artist_relevance(song, signals, song_genres)),
        (WEIGHTS["genre"], genre_match(song_genres, signals.top_genres)),
        (WEIGHTS["popularity"], popularity(song.view_count, default=0.3)),
        (WEIGHTS["language"], language_match),
        (WEIGHTS["novelty"], 0.5 if song.id in signals.played_song_ids else 1.0),
    ])
    return clamp(score, 0.0, SCORE_CEILING)


def rank_new_releases(
    releases: Sequence[Song],
    signals: TasteSignals,
    max_per_artist: int = MAX_SONGS_PER_ARTIST,
) -> List[Song]:
    if not releases:
        return []
    scored = sorted(
        ((score_release(song, signals), song) for song in releases),
        key=lambda pair: pair[0],
        reverse=True,
    )
    ranked = limit_songs_per_artist((song for _, song in scored), max_per_artist)
    logger.debug(f"New releases: {len(releases)} in, {len(ranked)} ranked")
    return ranked
