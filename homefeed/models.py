"""Data models for the home feed."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    """Kind of catalog item a song entry represents."""

    SONG = "song"
    VIDEO = "video"
    PODCAST = "podcast"
    LIVE_STREAM = "live_stream"
    SHORT = "short"
    ALBUM = "album"
    PLAYLIST = "playlist"
    ARTIST = "artist"
    UNKNOWN = "unknown"


class Song(BaseModel):
    """Normalized catalog track."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    artist: str = ""
    artist_id: Optional[str] = None
    album: Optional[str] = None
    album_id: Optional[str] = None
    duration: int = Field(default=0, ge=0)  # seconds
    thumbnail_url: str = ""
    year: Optional[int] = None
    category: str = "Music"
    view_count: Optional[int] = Field(default=None, ge=0)
    is_liked: bool = False
    content_type: ContentType = ContentType.SONG

    def __str__(self) -> str:
        """String representation of song."""
        return f"{self.artist} - {self.title}"

    def formatted_duration(self) -> str:
        minutes, seconds = divmod(self.duration, 60)
        return f"{minutes}:{seconds:02d}"

    def is_music_song(self) -> bool:
        return self.content_type == ContentType.SONG

    def is_valid_music_content(self) -> bool:
        """Whether the item belongs in a music queue.

        Unknown content is accepted when its duration looks like a song
        (between 30 seconds and 15 minutes).
        """
        if self.content_type == ContentType.SONG:
            return True
        if self.content_type == ContentType.UNKNOWN:
            return 30 <= self.duration <= 900
        return False

    def is_strict_song(self) -> bool:
        """Stricter variant used when filtering remote candidates."""
        if self.content_type == ContentType.SONG:
            return True
        if self.content_type == ContentType.UNKNOWN:
            return self.duration == 0 or 60 <= self.duration <= 600
        return False

    def is_admissible(self) -> bool:
        """Songs need a non-blank id and title to appear in a ranked list."""
        return bool(self.id.strip()) and bool(self.title.strip())


class Artist(BaseModel):
    """Artist identity shown on an artist section."""

    id: str = ""
    name: str
    thumbnail_url: Optional[str] = None
    song_count: int = 0
    play_count: int = 0


class ArtistSection(BaseModel):
    """An artist plus a short list of their songs."""

    artist: Artist
    songs: List[Song] = Field(default_factory=list)

    def identity_key(self) -> str:
        return self.artist.id if self.artist.id.strip() else self.artist.name.lower()


def parse_distribution(raw: Union[str, Dict[str, int], None]) -> Dict[str, int]:
    """Turn a pipe-separated label list into a frequency map.

    ``"morning|morning|evening"`` becomes ``{"morning": 2, "evening": 1}``.
    Mappings are passed through with their counts coerced to int.
    """
    if not raw:
        return {}
    if isinstance(raw, dict):
        return {str(k): int(v) for k, v in raw.items()}

    freq: Dict[str, int] = {}
    for label in str(raw).split("|"):
        label = label.strip()
        if label:
            freq[label] = freq.get(label, 0) + 1
    return freq


def to_utc(value: datetime) -> datetime:
    """Timezone-aware UTC copy of value. Naive datetimes are taken as local time."""
    return value.astimezone(timezone.utc)


class PlaybackStat(BaseModel):
    """Per-song listening statistics derived from playback history."""

    song_id: str = ""
    last_played_at: datetime
    play_count_90d: int = 0
    completed_count: int = 0
    total_plays: int = 0
    skip_count_30d: int = 0
    play_count_30d: int = 0
    play_count_7d: int = 0
    play_count_7d_prior: int = 0
    qualified_listen_count: int = 0
    time_of_day_distribution: Dict[str, int] = Field(default_factory=dict)
    day_of_week_distribution: Dict[str, int] = Field(default_factory=dict)

    @field_validator("last_played_at")
    @classmethod
    def _last_played_utc(cls, value: datetime) -> datetime:
        return to_utc(value)

    @field_validator("time_of_day_distribution", "day_of_week_distribution", mode="before")
    @classmethod
    def _coerce_distribution(cls, value: Any) -> Dict[str, int]:
        return parse_distribution(value)


class HistoryEntry(BaseModel):
    """A previously played song together with its statistics."""

    song: Song
    stats: PlaybackStat


class TasteSignals(BaseModel):
    """User taste signals consumed by the scoring engines."""

    top_genres: List[str] = Field(default_factory=list)
    top_artists: List[str] = Field(default_factory=list)
    preferred_languages: List[str] = Field(default_factory=list)
    played_song_ids: Set[str] = Field(default_factory=set)
    followed_artist_ids: Set[str] = Field(default_factory=set)

    # Anti-preferences and seeds used by quick picks / personalized mix
    skipped_artists: Set[str] = Field(default_factory=set)
    most_played_song_ids: List[str] = Field(default_factory=list)

    # Artist name (or fragment) -> genres, matched by substring
    artist_genre_map: Dict[str, List[str]] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> "TasteSignals":
        return cls()


class HomeFeed(BaseModel):
    """Aggregated home feed returned to the presentation layer."""

    listen_again: List[Song] = Field(default_factory=list)
    quick_picks: List[Song] = Field(default_factory=list)
    forgotten_favorites: List[Song] = Field(default_factory=list)
    new_releases: List[Song] = Field(default_factory=list)
    trending: List[Song] = Field(default_factory=list)
    english_hits: List[Song] = Field(default_factory=list)
    personalized_for_you: List[Song] = Field(default_factory=list)
    artists: List[ArtistSection] = Field(default_factory=list)

    def section_sizes(self) -> Dict[str, int]:
        return {
            "listen_again": len(self.listen_again),
            "quick_picks": len(self.quick_picks),
            "forgotten_favorites": len(self.forgotten_favorites),
            "new_releases": len(self.new_releases),
            "trending": len(self.trending),
            "english_hits": len(self.english_hits),
            "personalized_for_you": len(self.personalized_for_you),
            "artists": len(self.artists),
        }

    def is_empty(self) -> bool:
        return not any(self.section_sizes().values())


@dataclass
class FeedResult:
    """Outcome of a home feed build: either a feed or the error that stopped it."""

    feed: Optional[HomeFeed] = None
    error: Optional[Exception] = None
    elapsed_ms: float = 0.0

    @classmethod
    def success(cls, feed: HomeFeed, elapsed_ms: float = 0.0) -> "FeedResult":
        return cls(feed=feed, elapsed_ms=elapsed_ms)

    @classmethod
    def failure(cls, error: Exception, elapsed_ms: float = 0.0) -> "FeedResult":
        return cls(error=error, elapsed_ms=elapsed_ms)

    @property
    def ok(self) -> bool:
        return self.error is None and self.feed is not None

    def get_or_raise(self) -> HomeFeed:
        if self.error is not None:
            raise self.error
        return self.feed
