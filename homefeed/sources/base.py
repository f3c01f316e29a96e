"""Abstract collaborators the home feed reads from."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

from homefeed.models import ArtistSection, HistoryEntry, PlaybackStat, Song, TasteSignals


class SectionKind(str, Enum):
    """Catalog shelves that can be fetched directly."""

    TRENDING = "trending"
    NEW_RELEASES = "new_releases"
    ENGLISH_HITS = "english_hits"
    QUICK_PICKS = "quick_picks"  # legacy, non-personalized quick picks


class HistorySource(ABC):
    """Play history and taste signals, recomputed fresh per request."""

    @abstractmethod
    async def fetch_history(self) -> List[HistoryEntry]:
        """Get every played song (last 90 days) with its statistics."""
        pass

    @abstractmethod
    async def fetch_playback_stats(self, song_id: str) -> Optional[PlaybackStat]:
        """Get statistics for one song, or None if it was never played."""
        pass

    @abstractmethod
    async def fetch_taste_signals(self) -> TasteSignals:
        """Get the user's top genres, artists, languages and played ids."""
        pass

    @abstractmethod
    async def fetch_recent_song_ids(self, limit: int) -> List[str]:
        """Get ids of the most recently played songs, newest first."""
        pass


class CatalogSource(ABC):
    """Remote catalog: browse shelves, search and recommendations."""

    @abstractmethod
    async def fetch_candidates(self, kind: SectionKind, limit: int) -> List[Song]:
        """Get up to ``limit`` songs for a catalog shelf, in catalog rank order."""
        pass

    @abstractmethod
    async def search_songs(self, query: str, limit: int) -> List[Song]:
        """Search the catalog.

        Args:
            query: Free-text query
            limit: Maximum number of results

        Returns:
            List of Song objects
        """
        pass

    @abstractmethod
    async def fetch_recommendations(self, seed_id: str, limit: int) -> List[Song]:
        """Get songs related to a seed song."""
        pass

    @abstractmethod
    async def fetch_artist_sections(self, count: int) -> List[ArtistSection]:
        """Get top songs for up to ``count`` artists."""
        pass
