"""Post-processing helpers applied to section results before assembly."""

from typing import Iterable, List, Set

from homefeed.core.text import is_likely_english
from homefeed.models import ArtistSection, Song


def distinct_songs(songs: Iterable[Song], limit: int) -> List[Song]:
    """Drop blank entries, dedupe by id (first occurrence wins) and cap."""
    seen: Set[str] = set()
    result: List[Song] = []
    for song in songs:
        if len(result) >= limit:
            break
        if not song.is_admissible() or song.id in seen:
            continue
        seen.add(song.id)
        result.append(song)
    return result


def exclude_ids(songs: Iterable[Song], excluded: Iterable[str]) -> List[Song]:
    excluded_ids = set(excluded)
    return [song for song in songs if song.id not in excluded_ids]


def filter_likely_english(songs: Iterable[Song]) -> List[Song]:
    return [song for song in songs if is_likely_english(song)]


def normalize_artist_sections(
    sections: Iterable[ArtistSection],
    song_limit: int,
    section_limit: int,
) -> List[ArtistSection]:
    """Dedupe songs inside each section, drop empty ones, dedupe by artist and cap."""
    seen: Set[str] = set()
    result: List[ArtistSection] = []
    for section in sections:
        if len(result) >= section_limit:
            break
        songs = distinct_songs(section.songs, song_limit)
        if not songs:
            continue
        key = section.identity_key()
        if key in seen:
            continue
        seen.add(key)
        result.append(section.model_copy(update={"songs": songs}))
    return result
