"""Home feed aggregation.

Every section is fetched as an independent asyncio task with its own
timeout. A section that times out or raises contributes an empty list;
only a failure in the orchestration itself fails the whole build.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional

from homefeed.config import FeedConfig
from homefeed.core.cleanup import (
    distinct_songs,
    exclude_ids,
    filter_likely_english,
    normalize_artist_sections,
)
from homefeed.engines.quick_picks import session_seed_for
from homefeed.models import FeedResult, HomeFeed
from homefeed.sources.base import CatalogSource, HistorySource
from homefeed.workflows.sections import SectionFetcher

logger = logging.getLogger("homefeed.home_feed")


def local_now() -> datetime:
    """Current time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


class HomeFeedAggregator:
    """Builds a HomeFeed by fanning out to every section concurrently."""

    def __init__(
        self,
        history: HistorySource,
        catalog: CatalogSource,
        config: Optional[FeedConfig] = None,
        clock: Callable[[], datetime] = local_now,
        session_seed: Optional[int] = None,
    ):
        """Initialize the aggregator.

        Args:
            history: Play history and taste signal collaborator
            catalog: Remote catalog collaborator
            config: Feed configuration (defaults apply when omitted)
            clock: Returns the current time in the listener's zone. Time-of-day
                and weekday context is read from its wall-clock fields.
            session_seed: Seed for the Quick Picks shuffle. When omitted it is
                derived from the clock and the configured session TTL.
        """
        self.history = history
        self.catalog = catalog
        self.config = config or FeedConfig()
        self.clock = clock
        self.session_seed = session_seed

    async def build_home_feed(self) -> FeedResult:
        start = time.perf_counter()
        try:
            feed = await self._build()
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(f"Home feed failed in {elapsed_ms:.0f}ms: {e}", exc_info=True)
            return FeedResult.failure(e, elapsed_ms)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Home feed built in {elapsed_ms:.0f}ms")
        logger.debug(f"Section sizes: {feed.section_sizes()}")
        return FeedResult.success(feed, elapsed_ms)

    async def _guarded(self, name: str, awaitable: Awaitable[List]) -> List:
        """Run one section under the section timeout; failures become []."""
        timeout = self.config.timeouts.section_timeout_seconds
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(awaitable, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Section {name} timed out after {timeout}s")
            return []
        except Exception as e:
            logger.warning(f"Section {name} failed: {e}")
            return []
        logger.debug(f"Section {name} finished in {(time.perf_counter() - started) * 1000:.0f}ms")
        return list(result or [])

    async def _build(self) -> HomeFeed:
        now = self.clock()
        seed = self.session_seed
        if seed is None:
            seed = session_seed_for(now, self.config.quick_picks.session_ttl_hours)

        sections = self.config.sections
        limit = sections.limit
        english_limit = limit * sections.english_hits_oversample
        fetcher = SectionFetcher(self.history, self.catalog, self.config, now, seed)

        jobs = {
            "listen_again": fetcher.listen_again(limit),
            "quick_picks": fetcher.quick_picks(limit),
            "new_releases": fetcher.new_releases(limit),
            "trending": fetcher.trending(limit),
            "english_hits": fetcher.english_hits(english_limit),
            "artists": fetcher.artist_sections(sections.artist_section_count),
            "personalized": fetcher.personalized_mix(max(limit // 2, sections.personalized_min)),
            "forgotten": fetcher.forgotten_favorites(limit),
        }
        tasks: Dict[str, asyncio.Task] = {
            name: asyncio.create_task(self._guarded(name, job)) for name, job in jobs.items()
        }
        try:
            results = {name: await task for name, task in tasks.items()}
        finally:
            for task in tasks.values():
                if not task.done():
                    task.cancel()

        listen_again = distinct_songs(results["listen_again"], limit)
        quick_picks_raw = distinct_songs(results["quick_picks"], limit)
        new_releases = distinct_songs(results["new_releases"], limit)
        trending = distinct_songs(results["trending"], limit)
        english_raw = distinct_songs(results["english_hits"], english_limit)
        personalized_raw = distinct_songs(results["personalized"], limit)
        forgotten_raw = distinct_songs(results["forgotten"], limit)

        quick_picks = distinct_songs(
            quick_picks_raw or trending + new_releases + listen_again,
            limit,
        )
        personalized = distinct_songs(personalized_raw or quick_picks, limit)
        english_hits = distinct_songs(filter_likely_english(english_raw), limit)
        forgotten = distinct_songs(
            exclude_ids(forgotten_raw, (song.id for song in listen_again)),
            limit,
        )
        artists = normalize_artist_sections(
            results["artists"],
            song_limit=sections.artist_section_song_limit,
            section_limit=sections.artist_section_count,
        )

        return HomeFeed(
            listen_again=listen_again,
            quick_picks=quick_picks,
            forgotten_favorites=forgotten,
            new_releases=new_releases,
            trending=trending,
            english_hits=english_hits,
            personalized_for_you=personalized,
            artists=artists,
        )


def build_home_feed_sync(aggregator: HomeFeedAggregator) -> FeedResult:
    """Run ``build_home_feed`` to completion from synchronous code."""
    return asyncio.run(aggregator.build_home_feed())
