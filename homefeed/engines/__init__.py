"""Scoring and ranking engines for the home feed."""

from homefeed.engines.listen_again import rank_listen_again, score_listen_again
from homefeed.engines.quick_picks import rank_quick_picks
from homefeed.engines.trending import rank_trending
from homefeed.engines.new_releases import rank_new_releases
from homefeed.engines.forgotten_favorites import rank_forgotten_favorites

__all__ = [
    "rank_listen_again",
    "score_listen_again",
    "rank_quick_picks",
    "rank_trending",
    "rank_new_releases",
    "rank_forgotten_favorites",
]
