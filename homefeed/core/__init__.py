"""Shared scoring primitives and list helpers."""

from homefeed.core.score_math import clamp, decay, log_compress, weighted_sum
from homefeed.core.diversity import limit_per_key, limit_songs_per_artist
from homefeed.core.cleanup import distinct_songs, normalize_artist_sections

__all__ = [
    "clamp",
    "decay",
    "log_compress",
    "weighted_sum",
    "limit_per_key",
    "limit_songs_per_artist",
    "distinct_songs",
    "normalize_artist_sections",
]
