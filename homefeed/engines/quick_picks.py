"""Quick Picks scoring and mixing.

Quick Picks blends 60% familiar tracks with 40% discovery tracks,
interleaved in a familiar-familiar-discovery pattern, with per-artist and
per-genre caps and a seeded shuffle inside fixed-size windows.
"""

import logging
import random
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Sequence, TypeVar

from homefeed.core.diversity import limit_per_key
from homefeed.core.score_math import clamp, popularity, rank_decay, weighted_sum
from homefeed.core.text import (
    DEFAULT_ARTIST_GENRE_MAP,
    index_ignore_case,
    infer_genres,
    is_likely_matching_language,
    normalize_key,
)
from homefeed.models import Song, TasteSignals

logger = logging.getLogger("homefeed.engines.quick_picks")

# Weights sum to 1.0
WEIGHTS = {
    "base": 0.30,
    "genre": 0.20,
    "artist": 0.15,
    "popularity": 0.10,
    "language": 0.10,
    "freshness": 0.10,
    "duration": 0.05,
}

MAX_SONGS_PER_ARTIST = 3
MAX_SONGS_PER_GENRE = 8
FAMILIAR_RATIO = 0.60
WINDOW_SIZE = 5
DEFAULT_TARGET = 25

T = TypeVar("T")


class CandidateSource(str, Enum):
    """Where a Quick Picks candidate came from."""

    FAMILIAR = "familiar"
    SAME_ARTIST_UNPLAYED = "same_artist_unplayed"
    SIMILAR_ARTIST = "similar_artist"
    GENRE_POPULAR = "genre_popular"
    TRENDING_GENRE = "trending_genre"


@dataclass
class ScoredCandidate:
    """Candidate wrapper used during the scoring pipeline."""

    song: Song
    source: CandidateSource
    source_score: float
    is_familiar: bool
    final_score: float = 0.0
    inferred_genre: str = ""
    inferred_artist_rank: int = 2 ** 31 - 1


def _duration_match(duration: int) -> float:
    if 120 <= duration <= 360:
        return 1.0
    if 60 <= duration <= 600:
        return 0.7
    return 0.4


def score_candidate(
    candidate: ScoredCandidate,
    top_genres: Sequence[str],
    top_artists: Sequence[str],
    languages: Sequence[str],
) -> float:
    """Score a single candidate against the user's taste signals, in [0, 1]."""
    song = candidate.song

    genre_match = 0.0
    if candidate.inferred_genre.strip():
        genre_match = rank_decay(index_ignore_case(top_genres, candidate.inferred_genre), len(top_genres))

    artist_match = rank_decay(index_ignore_case(top_artists, song.artist), len(top_artists))

    if not languages:
        language_match = 1.0
    elif is_likely_matching_language(song, languages):
        language_match = 1.0
    else:
        language_match = 0.3

    return clamp(weighted_sum([
        (WEIGHTS["base"], clamp(candidate.source_score)),
        (WEIGHTS["genre"], genre_match),
        (WEIGHTS["artist"], artist_match),
        (WEIGHTS["popularity"], popularity(song.view_count, default=0.5)),
        (WEIGHTS["language"], language_match),
        (WEIGHTS["freshness"], 0.5 if candidate.is_familiar else 1.0),
        (WEIGHTS["duration"], _duration_match(song.duration)),
    ]))


def apply_diversity(
    candidates: Iterable[ScoredCandidate],
    max_per_artist: int = MAX_SONGS_PER_ARTIST,
    max_per_genre: int = MAX_SONGS_PER_GENRE,
) -> List[ScoredCandidate]:
    """Cap candidates per artist and per (non-blank) genre, in the given order."""
    artist_counts = {}
    genre_counts = {}
    kept = []
    for candidate in candidates:
        artist = normalize_key(candidate.song.artist)
        genre = normalize_key(candidate.inferred_genre)
        if artist_counts.get(artist, 0) >= max_per_artist:
            continue
        if genre and genre_counts.get(genre, 0) >= max_per_genre:
            continue
        artist_counts[artist] = artist_counts.get(artist, 0) + 1
        if genre:
            genre_counts[genre] = genre_counts.get(genre, 0) + 1
        kept.append(candidate)
    return kept


def interleave_by_type(familiar: Sequence[T], discovery: Sequence[T]) -> List[T]:
    """Interleave in an F, F, D pattern, falling back to whichever pool has items left."""
    pattern = (True, True, False)
    result: List[T] = []
    f_idx = d_idx = step = 0
    while f_idx < len(familiar) or d_idx < len(discovery):
        want_familiar = pattern[step % len(pattern)]
        if want_familiar and f_idx < len(familiar):
            result.append(familiar[f_idx])
            f_idx += 1
        elif d_idx < len(discovery):
            result.append(discovery[d_idx])
            d_idx += 1
        else:
            result.append(familiar[f_idx])
            f_idx += 1
        step += 1
    return result


def window_shuffle(items: Sequence[T], window_size: int = WINDOW_SIZE, seed: int = 0) -> List[T]:
    """Fisher-Yates shuffle each consecutive window independently from one seeded generator."""
    result = list(items)
    rng = random.Random(seed)
    for start in range(0, len(result), window_size):
        end = min(start + window_size, len(result))
        for j in range(end - start - 1, -1, -1):
            k = rng.randrange(j + 1)
            result[start + j], result[start + k] = result[start + k], result[start + j]
    return result


def assemble(
    candidates: Iterable[ScoredCandidate],
    target_count: int = DEFAULT_TARGET,
    session_seed: int = 0,
    familiar_ratio: float = FAMILIAR_RATIO,
    window_size: int = WINDOW_SIZE,
    max_per_artist: int = MAX_SONGS_PER_ARTIST,
    max_per_genre: int = MAX_SONGS_PER_GENRE,
) -> List[Song]:
    """Split into pools, cap for diversity, interleave and window-shuffle."""
    candidates = list(candidates)
    familiar = sorted((c for c in candidates if c.is_familiar), key=lambda c: c.final_score, reverse=True)
    discovery = sorted((c for c in candidates if not c.is_familiar), key=lambda c: c.final_score, reverse=True)

    familiar_count = int(target_count * familiar_ratio)
    discovery_count = target_count - familiar_count

    familiar = apply_diversity(familiar, max_per_artist, max_per_genre)[:familiar_count]
    discovery = apply_diversity(discovery, max_per_artist, max_per_genre)[:discovery_count]

    interleaved = interleave_by_type([c.song for c in familiar], [c.song for c in discovery])
    return window_shuffle(interleaved, window_size=window_size, seed=session_seed)


def rank_quick_picks(
    candidates: Iterable[ScoredCandidate],
    signals: TasteSignals,
    target: int = DEFAULT_TARGET,
    session_seed: int = 0,
    **assemble_kwargs,
) -> List[Song]:
    """Drop anti-preferred artists, score every candidate and assemble the mix."""
    skipped = {normalize_key(a) for a in signals.skipped_artists}
    scored = [
        replace(
            c,
            final_score=score_candidate(
                c, signals.top_genres, signals.top_artists, signals.preferred_languages
            ),
        )
        for c in candidates
        if normalize_key(c.song.artist) not in skipped
    ]
    picks = assemble(scored, target_count=target, session_seed=session_seed, **assemble_kwargs)
    logger.debug(f"Quick picks: {len(scored)} scored candidates -> {len(picks)} picks")
    return picks


# Candidate generation


def infer_genre(artist: str, signals: TasteSignals) -> str:
    """First genre for the artist, else the user's top genre, else Pop."""
    genre_map = signals.artist_genre_map or DEFAULT_ARTIST_GENRE_MAP
    genres = infer_genres(artist, genre_map)
    if genres:
        return genres[0]
    return signals.top_genres[0] if signals.top_genres else "Pop"


def familiar_candidates(songs: Sequence[Song], signals: TasteSignals) -> List[ScoredCandidate]:
    """Familiar candidates from the Listen Again ranking; source score decays with rank."""
    total = max(len(songs), 1)
    return [
        ScoredCandidate(
            song=song,
            source=CandidateSource.FAMILIAR,
            source_score=clamp(1.0 - index / total, 0.2, 1.0),
            is_familiar=True,
            inferred_genre=infer_genre(song.artist, signals),
        )
        for index, song in enumerate(songs)
    ]


def deep_cut_candidates(
    songs: Sequence[Song],
    artist_rank: int,
    signals: TasteSignals,
) -> List[ScoredCandidate]:
    """Unplayed songs by one of the user's top artists."""
    result = []
    for song in songs:
        views = song.view_count if song.view_count is not None else 50000
        source_score = (1.0 - artist_rank / 5.0) * min(views / 100000.0, 1.0)
        result.append(ScoredCandidate(
            song=song,
            source=CandidateSource.SAME_ARTIST_UNPLAYED,
            source_score=clamp(source_score),
            is_familiar=False,
            inferred_genre=infer_genre(song.artist, signals),
            inferred_artist_rank=artist_rank,
        ))
    return result


def seed_candidates(songs: Sequence[Song], signals: TasteSignals) -> List[ScoredCandidate]:
    """Recommendations seeded from recently played songs."""
    result = []
    for song in songs:
        views = song.view_count if song.view_count is not None else 30000
        result.append(ScoredCandidate(
            song=song,
            source=CandidateSource.SIMILAR_ARTIST,
            source_score=clamp(views / 100000.0, 0.2, 0.9),
            is_familiar=False,
            inferred_genre=infer_genre(song.artist, signals),
        ))
    return result


def trending_genre_candidates(songs: Sequence[Song], signals: TasteSignals) -> List[ScoredCandidate]:
    return [
        ScoredCandidate(
            song=song,
            source=CandidateSource.TRENDING_GENRE,
            source_score=0.6,
            is_familiar=False,
            inferred_genre=infer_genre(song.artist, signals),
        )
        for song in songs
    ]


def dedupe_discovery(
    candidates: Iterable[ScoredCandidate],
    played_song_ids: Iterable[str],
) -> List[ScoredCandidate]:
    """Dedupe discovery candidates by song id and drop anything already played."""
    played = set(played_song_ids)
    seen = set()
    result = []
    for candidate in candidates:
        song_id = candidate.song.id
        if song_id in seen or song_id in played:
            continue
        seen.add(song_id)
        result.append(candidate)
    return result


def session_seed_for(now: datetime, ttl_hours: float = 6.0) -> int:
    """Seed that stays constant for one session window of ``ttl_hours``."""
    ttl_ms = int(ttl_hours * 3600 * 1000)
    return int(now.timestamp() * 1000) // ttl_ms
