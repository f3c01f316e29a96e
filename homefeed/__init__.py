"""homefeed - Personalized home feed recommendations."""

__version__ = "0.1.0"

from homefeed.config import FeedConfig
from homefeed.models import FeedResult, HomeFeed, Song
from homefeed.workflows.home_feed import HomeFeedAggregator

__all__ = ["FeedConfig", "FeedResult", "HomeFeed", "HomeFeedAggregator", "Song"]
