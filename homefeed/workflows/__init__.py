"""Section fetching and home feed aggregation."""

from homefeed.workflows.home_feed import HomeFeedAggregator, build_home_feed_sync
from homefeed.workflows.sections import SectionFetcher

__all__ = ["HomeFeedAggregator", "SectionFetcher", "build_home_feed_sync"]
