"""Section fetchers: one coroutine per home feed shelf.

Each fetcher pulls raw candidates and taste signals from the collaborators
and hands them to the matching engine. Fetchers raise on collaborator
errors; isolation and timeouts are applied by the aggregator.
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Awaitable, List, Sequence

from homefeed.config import FeedConfig
from homefeed.engines.forgotten_favorites import rank_forgotten_favorites
from homefeed.engines.listen_again import ScoringContext, rank_listen_again
from homefeed.engines.new_releases import rank_new_releases
from homefeed.engines.quick_picks import (
    ScoredCandidate,
    deep_cut_candidates,
    dedupe_discovery,
    familiar_candidates,
    rank_quick_picks,
    seed_candidates,
    trending_genre_candidates,
)
from homefeed.engines.trending import rank_trending
from homefeed.models import ArtistSection, Song, TasteSignals
from homefeed.sources.base import CatalogSource, HistorySource, SectionKind

logger = logging.getLogger("homefeed.sections")

RECENT_WINDOW_SONGS = 30


async def _or_empty(label: str, awaitable: Awaitable[List]) -> List:
    """Await a candidate source, logging and returning [] if it fails."""
    try:
        return list(await awaitable or [])
    except Exception as e:
        logger.warning(f"Candidate source {label} failed: {e}")
        return []


def _strict_unplayed(songs: Sequence[Song], played: Sequence[str]) -> List[Song]:
    played_ids = set(played)
    return [song for song in songs if song.is_strict_song() and song.id not in played_ids]


def build_search_queries(signals: TasteSignals) -> List[str]:
    """Personalized catalog queries derived from top artists and genres."""
    queries = [f"{artist} best songs" for artist in signals.top_artists[:3]]
    queries.extend(f"{genre} hits" for genre in signals.top_genres[:2])
    return queries


class SectionFetcher:
    """Fetches and ranks individual home feed sections."""

    def __init__(
        self,
        history: HistorySource,
        catalog: CatalogSource,
        config: FeedConfig,
        now: datetime,
        session_seed: int,
    ):
        self.history = history
        self.catalog = catalog
        self.config = config
        self.now = now
        self.session_seed = session_seed

    # Listen Again / Forgotten favorites

    async def listen_again(self, limit: int) -> List[Song]:
        entries = await self.history.fetch_history()
        return rank_listen_again(
            entries,
            ScoringContext.from_datetime(self.now),
            limit,
            max_per_artist=self.config.listen_again.max_per_artist,
        )

    async def forgotten_favorites(self, limit: int) -> List[Song]:
        entries, recent_ids = await asyncio.gather(
            self.history.fetch_history(),
            self.history.fetch_recent_song_ids(RECENT_WINDOW_SONGS),
        )
        return rank_forgotten_favorites(
            entries,
            self.now,
            limit,
            recent_song_ids=recent_ids,
            min_plays=self.config.forgotten.min_plays,
            dormant_days=self.config.forgotten.dormant_days,
        )

    # Quick Picks

    async def quick_picks(self, limit: int) -> List[Song]:
        """Engine-built Quick Picks, falling back to the legacy catalog shelf."""
        try:
            picks = await self.engine_quick_picks(limit)
        except Exception as e:
            logger.warning(f"Quick picks pipeline failed, using legacy ranking: {e}")
            picks = []
        if picks:
            return picks
        return await self.legacy_quick_picks(limit)

    async def legacy_quick_picks(self, limit: int) -> List[Song]:
        return await self.catalog.fetch_candidates(SectionKind.QUICK_PICKS, limit)

    async def engine_quick_picks(self, limit: int) -> List[Song]:
        qp = self.config.quick_picks
        target = max(limit, qp.min_target)
        signals = await self.history.fetch_taste_signals()

        familiar, discovery = await asyncio.gather(
            self._familiar_candidates(signals),
            self._discovery_candidates(signals, target),
        )
        logger.debug(f"Quick picks candidates: {len(familiar)} familiar, {len(discovery)} discovery")

        return rank_quick_picks(
            familiar + discovery,
            signals,
            target=target,
            session_seed=self.session_seed,
            familiar_ratio=qp.familiar_ratio,
            window_size=qp.window_size,
            max_per_artist=qp.max_per_artist,
            max_per_genre=qp.max_per_genre,
        )

    async def _familiar_candidates(self, signals: TasteSignals) -> List[ScoredCandidate]:
        songs = await _or_empty("familiar", self.listen_again(self.config.listen_again.familiar_pool))
        return familiar_candidates(songs, signals)

    async def _discovery_candidates(self, signals: TasteSignals, target: int) -> List[ScoredCandidate]:
        deep_cuts, seeded, trending = await asyncio.gather(
            self._deep_cut_candidates(signals),
            self._seed_candidates(signals, target),
            self._trending_genre_candidates(signals),
        )
        return dedupe_discovery(deep_cuts + seeded + trending, signals.played_song_ids)

    async def _deep_cut_candidates(self, signals: TasteSignals) -> List[ScoredCandidate]:
        artists = signals.top_artists[: self.config.quick_picks.deep_cut_artists]
        results = await asyncio.gather(*(
            _or_empty(f"deep cuts for {artist}", self.catalog.search_songs(f"{artist} songs", 10))
            for artist in artists
        ))
        candidates = []
        for rank, songs in enumerate(results):
            songs = _strict_unplayed(songs, signals.played_song_ids)
            candidates.extend(deep_cut_candidates(songs, rank, signals))
        return candidates

    async def _seed_candidates(self, signals: TasteSignals, target: int) -> List[ScoredCandidate]:
        recent = await _or_empty("recent songs", self.history.fetch_recent_song_ids(8))
        seeds = recent[: self.config.quick_picks.seed_songs]
        if not seeds:
            return []
        per_seed = min(max(target // len(seeds), 6), 16)
        results = await asyncio.gather(*(
            _or_empty(f"recommendations for {seed}", self.catalog.fetch_recommendations(seed, per_seed))
            for seed in seeds
        ))
        songs = [song for batch in results for song in batch]
        return seed_candidates(_strict_unplayed(songs, signals.played_song_ids), signals)

    async def _trending_genre_candidates(self, signals: TasteSignals) -> List[ScoredCandidate]:
        songs = await _or_empty("trending", self.catalog.fetch_candidates(SectionKind.TRENDING, 20))
        return trending_genre_candidates(_strict_unplayed(songs, signals.played_song_ids), signals)

    # Catalog shelves

    async def new_releases(self, limit: int) -> List[Song]:
        releases, signals = await asyncio.gather(
            self.catalog.fetch_candidates(SectionKind.NEW_RELEASES, limit),
            self.history.fetch_taste_signals(),
        )
        return rank_new_releases(releases, signals)

    async def trending(self, limit: int) -> List[Song]:
        songs, signals = await asyncio.gather(
            self.catalog.fetch_candidates(SectionKind.TRENDING, limit),
            self.history.fetch_taste_signals(),
        )
        return rank_trending(songs, signals)

    async def english_hits(self, limit: int) -> List[Song]:
        return await self.catalog.fetch_candidates(SectionKind.ENGLISH_HITS, limit)

    async def artist_sections(self, count: int) -> List[ArtistSection]:
        return await self.catalog.fetch_artist_sections(count)

    # Personalized mix

    async def personalized_mix(self, limit: int) -> List[Song]:
        """Seed recommendations, topped up with personalized searches, then trending."""
        limit = max(limit, 1)
        signals = await self.history.fetch_taste_signals()
        recent = await self.history.fetch_recent_song_ids(max(limit * 2, 8))
        seeds = list(dict.fromkeys(list(signals.most_played_song_ids) + list(recent)))

        songs: List[Song] = []
        if seeds:
            seeds = seeds[:3]
            per_seed = max(limit // len(seeds), 5)
            batches = await asyncio.gather(*(
                _or_empty(f"mix seed {seed}", self.catalog.fetch_recommendations(seed, per_seed))
                for seed in seeds
            ))
            songs.extend(song for batch in batches for song in batch if song.is_strict_song())

        if len(songs) < limit:
            queries = build_search_queries(signals)[:4]
            if queries:
                per_query = max((limit - len(songs)) // len(queries), 5)
                batches = await asyncio.gather(*(
                    _or_empty(f"query {query!r}", self.catalog.search_songs(query, per_query))
                    for query in queries
                ))
                songs.extend(song for batch in batches for song in batch if song.is_strict_song())

        if not songs:
            trending = await self.catalog.fetch_candidates(SectionKind.TRENDING, limit)
            return [song for song in trending if song.is_strict_song()][:limit]

        seen = set()
        unique = []
        for song in songs:
            if song.id not in seen:
                seen.add(song.id)
                unique.append(song)
        random.Random(self.session_seed).shuffle(unique)
        return unique[:limit]
