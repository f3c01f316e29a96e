"""Text heuristics: script detection, artist keys and genre inference."""

import unicodedata
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from homefeed.models import ContentType, Song

LATIN_MATCH_THRESHOLD = 0.8
ENGLISH_LATIN_THRESHOLD = 0.85

NON_ENGLISH_LANGUAGE_MARKERS = frozenset({
    "hindi",
    "punjabi",
    "tamil",
    "telugu",
    "malayalam",
    "kannada",
    "marathi",
    "bhojpuri",
    "gujarati",
    "bangla",
    "bengali",
})

# Lightweight artist -> genre table used when no taste-inference map is supplied
DEFAULT_ARTIST_GENRE_MAP: Dict[str, List[str]] = {
    "Arijit Singh": ["Bollywood", "Romantic"],
    "Shreya Ghoshal": ["Bollywood", "Classical"],
    "Atif Aslam": ["Bollywood", "Pop"],
    "Pritam": ["Bollywood", "Film"],
    "A.R. Rahman": ["Bollywood", "Classical", "World"],
    "Neha Kakkar": ["Bollywood", "Pop"],
    "Badshah": ["Hip-Hop", "Bollywood"],
    "Honey Singh": ["Hip-Hop", "Bollywood"],
    "Jubin Nautiyal": ["Bollywood", "Pop"],
    "B Praak": ["Bollywood", "Punjabi"],
    "Vishal Mishra": ["Bollywood", "Romantic"],
    "Diljit Dosanjh": ["Punjabi", "Pop"],
    "AP Dhillon": ["Punjabi", "Hip-Hop"],
    "Drake": ["Hip-Hop", "R&B"],
    "Taylor Swift": ["Pop", "Country"],
    "The Weeknd": ["R&B", "Pop"],
    "Ed Sheeran": ["Pop", "Acoustic"],
    "BTS": ["K-Pop", "Pop"],
    "Eminem": ["Hip-Hop", "Rap"],
    "Billie Eilish": ["Pop", "Alternative"],
    "Post Malone": ["Hip-Hop", "Pop"],
    "Dua Lipa": ["Pop", "Dance"],
    "Travis Scott": ["Hip-Hop", "Trap"],
    "Lana Del Rey": ["Indie", "Pop"],
    "Coldplay": ["Rock", "Pop"],
    "Imagine Dragons": ["Rock", "Pop"],
    "Ariana Grande": ["Pop", "R&B"],
    "Justin Bieber": ["Pop", "R&B"],
    "Maroon 5": ["Pop", "Rock"],
    "Sunidhi Chauhan": ["Bollywood", "Pop"],
    "Sonu Nigam": ["Bollywood", "Classical"],
}


def normalize_key(value: Optional[str]) -> str:
    """Lower-cased, trimmed key used for artist and genre comparisons."""
    if not value:
        return ""
    return value.lower().strip()


# Latin-script letters whose Unicode names do not mention LATIN
LATIN_ORDINALS = frozenset("\u00aa\u00ba")


def _is_latin(ch: str) -> bool:
    """Latin script letter, including fullwidth and super/subscript forms."""
    if ch in LATIN_ORDINALS:
        return True
    try:
        return "LATIN" in unicodedata.name(ch).split()
    except ValueError:
        return False


def latin_ratio(text: str) -> Optional[float]:
    """Share of letters in text that are Latin script, or None without letters."""
    letters = [ch for ch in text if ch.isalpha()]
    if not letters:
        return None
    return sum(1 for ch in letters if _is_latin(ch)) / len(letters)


def song_text(song: Song) -> str:
    return f"{song.title} {song.artist}"


def is_likely_matching_language(
    song: Song,
    preferred_languages: Sequence[str],
    threshold: float = LATIN_MATCH_THRESHOLD,
) -> bool:
    """Heuristic language match based on the Latin-script share of title and artist.

    This is an approximation of real language identification: a preference
    list is assumed to imply Latin script. No preference, or text without
    letters, always matches.
    """
    if not preferred_languages:
        return True
    ratio = latin_ratio(song_text(song))
    if ratio is None:
        return True
    return ratio >= threshold


def is_likely_english(song: Song) -> bool:
    """Whether a song plausibly belongs on an English-hits shelf."""
    text = song_text(song).strip()
    if not text:
        return False
    if song.content_type not in (ContentType.SONG, ContentType.UNKNOWN):
        return False

    lowered = text.lower()
    if any(marker in lowered for marker in NON_ENGLISH_LANGUAGE_MARKERS):
        return False

    ratio = latin_ratio(text)
    if ratio is None:
        return False
    return ratio >= ENGLISH_LATIN_THRESHOLD


def infer_genres(
    artist: str,
    artist_genre_map: Mapping[str, Iterable[str]],
    default: Optional[List[str]] = None,
) -> List[str]:
    """Infer genres for an artist by substring matching against the lookup table."""
    artist_lower = artist.lower()
    genres: List[str] = []
    if artist_lower:
        for key, values in artist_genre_map.items():
            key_lower = key.lower()
            if key_lower in artist_lower or artist_lower in key_lower:
                genres.extend(values)
    if not genres and default:
        return list(default)
    return genres


def index_ignore_case(values: Sequence[str], target: str) -> int:
    """Index of the first case-insensitive match of target in values, or -1."""
    if not target:
        return -1
    target_lower = target.lower()
    for i, value in enumerate(values):
        if value.lower() == target_lower:
            return i
    return -1
