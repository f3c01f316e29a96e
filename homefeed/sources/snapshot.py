"""Collaborators backed by a static snapshot document.

A snapshot is a JSON or YAML mapping with the following keys, all optional::

    history:          [{song: {...}, stats: {...}}, ...]
    taste:            {top_genres: [...], top_artists: [...], ...}
    recent_song_ids:  [...]
    catalog:          {trending: [...], new_releases: [...], english_hits: [...], quick_picks: [...]}
    search:           {"<query>": [...]}
    recommendations:  {"<seed id>": [...]}
    artist_sections:  [{artist: {...}, songs: [...]}, ...]

Timestamps may be ISO strings, any format dateutil understands, or epoch
milliseconds. They are normalized to UTC; values without an offset are
taken as local time.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dateutil import parser as date_parser

from homefeed.models import ArtistSection, HistoryEntry, PlaybackStat, Song, TasteSignals
from homefeed.sources.base import CatalogSource, HistorySource, SectionKind

logger = logging.getLogger("homefeed.sources.snapshot")


def parse_timestamp(value: Any) -> datetime:
    """Parse a snapshot timestamp into a timezone-aware UTC datetime.

    Values without an offset are taken as local time.
    """
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
    if not isinstance(value, datetime):
        value = date_parser.parse(str(value))
    return value.astimezone(timezone.utc)


def _songs(items: Optional[List[Dict[str, Any]]]) -> List[Song]:
    return [Song(**item) for item in items or []]


class SnapshotSource(HistorySource, CatalogSource):
    """History and catalog collaborator reading from an in-memory snapshot."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        data = data or {}
        self.history = [self._history_entry(item) for item in data.get("history", [])]
        self.taste = TasteSignals(**data.get("taste", {}))
        self.recent_song_ids: List[str] = list(data.get("recent_song_ids", []))
        self.catalog = {
            SectionKind(kind): _songs(items) for kind, items in (data.get("catalog") or {}).items()
        }
        self.search_results = {
            query.lower(): _songs(items) for query, items in (data.get("search") or {}).items()
        }
        self.recommendations = {
            seed: _songs(items) for seed, items in (data.get("recommendations") or {}).items()
        }
        self.artist_sections = [ArtistSection(**item) for item in data.get("artist_sections", [])]

    @classmethod
    def from_file(cls, path: str | Path) -> "SnapshotSource":
        """Load a snapshot from a .json, .yaml or .yml file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Snapshot file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        source = cls(data)
        logger.info(f"Loaded snapshot {path}: {len(source.history)} history entries")
        return source

    @staticmethod
    def _history_entry(item: Dict[str, Any]) -> HistoryEntry:
        song = Song(**item["song"])
        stats = dict(item.get("stats", {}))
        stats.setdefault("song_id", song.id)
        stats["last_played_at"] = parse_timestamp(stats["last_played_at"])
        return HistoryEntry(song=song, stats=PlaybackStat(**stats))

    # HistorySource

    async def fetch_history(self) -> List[HistoryEntry]:
        return list(self.history)

    async def fetch_playback_stats(self, song_id: str) -> Optional[PlaybackStat]:
        for entry in self.history:
            if entry.song.id == song_id:
                return entry.stats
        return None

    async def fetch_taste_signals(self) -> TasteSignals:
        if self.taste.played_song_ids or not self.history:
            return self.taste
        played = {entry.song.id for entry in self.history}
        return self.taste.model_copy(update={"played_song_ids": played})

    async def fetch_recent_song_ids(self, limit: int) -> List[str]:
        if self.recent_song_ids:
            return self.recent_song_ids[:limit]
        ordered = sorted(self.history, key=lambda e: e.stats.last_played_at, reverse=True)
        return [entry.song.id for entry in ordered[:limit]]

    # CatalogSource

    async def fetch_candidates(self, kind: SectionKind, limit: int) -> List[Song]:
        return self.catalog.get(kind, [])[:limit]

    async def search_songs(self, query: str, limit: int) -> List[Song]:
        query = query.lower()
        if query in self.search_results:
            return self.search_results[query][:limit]

        matches = []
        seen = set()
        for songs in self.catalog.values():
            for song in songs:
                if song.artist and song.artist.lower() in query and song.id not in seen:
                    seen.add(song.id)
                    matches.append(song)
        return matches[:limit]

    async def fetch_recommendations(self, seed_id: str, limit: int) -> List[Song]:
        return self.recommendations.get(seed_id, [])[:limit]

    async def fetch_artist_sections(self, count: int) -> List[ArtistSection]:
        return self.artist_sections[:count]
