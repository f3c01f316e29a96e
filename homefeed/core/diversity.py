"""Order-preserving per-key caps used by every ranked list."""

from typing import Callable, Dict, Iterable, List, TypeVar

from homefeed.core.text import normalize_key
from homefeed.models import Song

T = TypeVar("T")

MAX_SONGS_PER_ARTIST = 3


def limit_per_key(items: Iterable[T], key: Callable[[T], str], cap: int) -> List[T]:
    """Keep items in order, dropping any whose key was already admitted ``cap`` times."""
    counts: Dict[str, int] = {}
    kept: List[T] = []
    for item in items:
        k = key(item)
        seen = counts.get(k, 0)
        if seen >= cap:
            continue
        counts[k] = seen + 1
        kept.append(item)
    return kept


def artist_key(song: Song) -> str:
    return normalize_key(song.artist)


def limit_songs_per_artist(songs: Iterable[Song], cap: int = MAX_SONGS_PER_ARTIST) -> List[Song]:
    return limit_per_key(songs, artist_key, cap)
