"""Tests for the Listen Again engine."""

import unittest
from datetime import timedelta, timezone

from homefeed.engines.listen_again import (
    ScoringContext,
    completion_score,
    compute_score,
    day_of_week_key,
    days_since,
    factor_breakdown,
    hours_since,
    is_eligible,
    rank_listen_again,
    skip_penalty,
    time_of_day_bucket,
)
from homefeed.models import PlaybackStat
from tests.fakes import NOW, make_entry


def stats(days_ago=1, **kwargs):
    kwargs.setdefault("qualified_listen_count", 1)
    return PlaybackStat(last_played_at=NOW - timedelta(days=days_ago), **kwargs)


class TestContext(unittest.TestCase):
    """Time-of-day buckets and weekday keys."""

    def test_time_of_day_buckets(self):
        self.assertEqual(time_of_day_bucket(0), "night")
        self.assertEqual(time_of_day_bucket(5), "night")
        self.assertEqual(time_of_day_bucket(6), "morning")
        self.assertEqual(time_of_day_bucket(11), "morning")
        self.assertEqual(time_of_day_bucket(12), "afternoon")
        self.assertEqual(time_of_day_bucket(16), "afternoon")
        self.assertEqual(time_of_day_bucket(17), "evening")
        self.assertEqual(time_of_day_bucket(23), "evening")

    def test_day_keys(self):
        self.assertEqual(day_of_week_key(0), "mon")
        self.assertEqual(day_of_week_key(6), "sun")

    def test_context_from_datetime(self):
        context = ScoringContext.from_datetime(NOW)
        self.assertEqual(context.time_of_day, "morning")
        self.assertEqual(context.day_of_week, "wed")


class TestFactors(unittest.TestCase):
    """Individual score factors."""

    def test_completion_without_plays_is_zero(self):
        self.assertEqual(completion_score(0, 0), 0.0)
        self.assertEqual(completion_score(3, 4), 0.75)

    def test_skip_penalty_is_capped(self):
        self.assertEqual(skip_penalty(5, 0), 0.0)
        self.assertEqual(skip_penalty(30, 10), 1.0)

    def test_full_breakdown(self):
        context = ScoringContext.from_datetime(NOW)
        factors = factor_breakdown(
            stats(
                days_ago=0,
                play_count_90d=50,
                completed_count=10,
                total_plays=10,
                time_of_day_distribution={"morning": 4},
                day_of_week_distribution="wed|wed|sun|sun",
            ),
            context,
        )
        self.assertEqual(factors["recency"], 1.0)
        self.assertAlmostEqual(factors["frequency"], 1.0)
        self.assertEqual(factors["completion"], 1.0)
        self.assertEqual(factors["context"], 1.0)
        self.assertEqual(factors["skip"], 0.0)
        self.assertEqual(factors["temporal"], 0.5)

    def test_composite_score(self):
        context = ScoringContext.from_datetime(NOW)
        score = compute_score(
            stats(
                days_ago=0,
                play_count_90d=50,
                completed_count=10,
                total_plays=10,
                time_of_day_distribution={"morning": 4},
                day_of_week_distribution={"wed": 2, "sun": 2},
            ),
            context,
        )
        self.assertAlmostEqual(score, 0.875)

    def test_score_is_floored_at_zero(self):
        """Skip penalty dominating every other factor still gives 0, not a negative score."""
        context = ScoringContext.from_datetime(NOW)
        score = compute_score(stats(days_ago=80, skip_count_30d=30, play_count_30d=10), context)
        self.assertEqual(score, 0.0)


class TestEligibility(unittest.TestCase):
    """Qualification, age and burnout rules."""

    def test_requires_a_qualified_listen(self):
        self.assertFalse(is_eligible(stats(qualified_listen_count=0), NOW))
        self.assertTrue(is_eligible(stats(qualified_listen_count=1), NOW))

    def test_too_old(self):
        self.assertTrue(is_eligible(stats(days_ago=90), NOW))
        self.assertFalse(is_eligible(stats(days_ago=91), NOW))

    def test_burnout_suppresses_recent_binge(self):
        burned_out = stats(days_ago=5, play_count_7d_prior=20, play_count_7d=0)
        self.assertFalse(is_eligible(burned_out, NOW))

    def test_burnout_expires(self):
        rested = stats(days_ago=20, play_count_7d_prior=20, play_count_7d=0)
        self.assertTrue(is_eligible(rested, NOW))

    def test_still_playing_is_not_burnout(self):
        active = stats(days_ago=5, play_count_7d_prior=20, play_count_7d=2)
        self.assertTrue(is_eligible(active, NOW))


class TestRankListenAgain(unittest.TestCase):
    """Ranking, limits and per-artist caps."""

    def setUp(self):
        self.context = ScoringContext.from_datetime(NOW)

    def test_orders_by_score(self):
        entries = [
            make_entry("old", "A", days_ago=40),
            make_entry("fresh", "B", days_ago=0),
            make_entry("mid", "C", days_ago=10),
        ]
        ranked = rank_listen_again(entries, self.context, limit=10)
        self.assertEqual([s.id for s in ranked], ["fresh", "mid", "old"])

    def test_at_most_two_songs_per_artist(self):
        entries = [
            make_entry("a1", "Adele", days_ago=0),
            make_entry("a2", "adele ", days_ago=1),
            make_entry("a3", "ADELE", days_ago=2),
            make_entry("b1", "Bjork", days_ago=3),
        ]
        ranked = rank_listen_again(entries, self.context, limit=10)
        self.assertEqual([s.id for s in ranked], ["a1", "a2", "b1"])

    def test_ineligible_entries_dropped_and_limit_applied(self):
        entries = [make_entry(f"s{i}", f"Artist {i}", days_ago=i) for i in range(5)]
        entries.append(make_entry("never", "Z", qualified_listen_count=0))
        ranked = rank_listen_again(entries, self.context, limit=3)
        self.assertEqual([s.id for s in ranked], ["s0", "s1", "s2"])

    def test_empty_history(self):
        self.assertEqual(rank_listen_again([], self.context, limit=10), [])


def test_public_alias_matches_compute_score():
    from homefeed.engines import score_listen_again

    context = ScoringContext.from_datetime(NOW)
    sample = stats(days_ago=3, play_count_90d=7, completed_count=2, total_plays=4)
    assert score_listen_again(sample, context) == compute_score(sample, context)


def test_elapsed_time_across_zones():
    listener_now = NOW.astimezone(timezone(timedelta(hours=-7)))
    assert hours_since(NOW - timedelta(hours=5), listener_now) == 5.0
    assert days_since(NOW - timedelta(days=3), listener_now) == 3
    assert ScoringContext.from_datetime(listener_now).time_of_day == "night"
