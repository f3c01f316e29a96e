"""Tests for trending personalization."""

import unittest

from homefeed.engines.trending import personalize, personalize_score, rank_trending
from homefeed.models import TasteSignals
from tests.fakes import make_song


def chart(n=10):
    return [make_song(f"s{i}", f"Artist {i}") for i in range(n)]


class TestPersonalize(unittest.TestCase):
    """Score multipliers on top of chart position."""

    def test_no_signals_keeps_chart_order(self):
        items = personalize(chart(), TasteSignals.empty())
        self.assertEqual([item.original_rank for item in items], list(range(10)))
        scores = [item.personalized_score for item in items]
        for higher, lower in zip(scores, scores[1:]):
            self.assertGreater(higher, lower)

    def test_top_artist_boost_reorders(self):
        signals = TasteSignals(top_artists=["artist 1"])
        items = personalize(chart(), signals)
        self.assertEqual(items[0].song.id, "s1")

    def test_played_penalty(self):
        signals = TasteSignals(played_song_ids={"s0"})
        ids = [item.song.id for item in personalize(chart(), signals)]
        self.assertEqual(ids[:3], ["s1", "s2", "s0"])

    def test_genre_boost(self):
        song = make_song("x", "Coldplay")
        rock_fan = TasteSignals(top_genres=["Rock"])
        jazz_fan = TasteSignals(top_genres=["Jazz"])
        boosted = personalize_score(song, 0, 10, rock_fan)
        plain = personalize_score(song, 0, 10, jazz_fan)
        self.assertAlmostEqual(boosted / plain, 1.3)

    def test_unknown_artist_counts_as_pop(self):
        song = make_song("x", "Nobody Known")
        boosted = personalize_score(song, 0, 10, TasteSignals(top_genres=["pop"]))
        plain = personalize_score(song, 0, 10, TasteSignals())
        self.assertAlmostEqual(boosted / plain, 1.3)


class TestRankTrending(unittest.TestCase):
    """Diversity cap on the final list."""

    def test_same_artist_capped_in_order(self):
        songs = [make_song(f"s{i}", "One Artist") for i in range(5)]
        ranked = rank_trending(songs, TasteSignals.empty())
        self.assertEqual([s.id for s in ranked], ["s0", "s1", "s2"])

    def test_empty(self):
        self.assertEqual(rank_trending([], TasteSignals.empty()), [])
