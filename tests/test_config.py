"""Tests for configuration loading."""

import unittest

import pytest

from homefeed.config import FeedConfig, get_config_value


class TestFeedConfig(unittest.TestCase):
    """Defaults and serialization."""

    def test_defaults(self):
        config = FeedConfig()
        self.assertEqual(config.sections.limit, 20)
        self.assertEqual(config.timeouts.section_timeout_seconds, 8.0)
        self.assertEqual(config.quick_picks.familiar_ratio, 0.6)
        self.assertEqual(config.quick_picks.window_size, 5)
        self.assertEqual(config.listen_again.max_per_artist, 2)
        self.assertEqual(config.forgotten.dormant_days, 30)

    def test_to_dict_sections(self):
        data = FeedConfig().to_dict()
        self.assertEqual(
            set(data),
            {"sections", "timeouts", "listen_again", "quick_picks", "forgotten", "logging"},
        )

    def test_get_config_value(self):
        config = FeedConfig()
        self.assertEqual(get_config_value(config, "quick_picks.max_per_genre"), 8)
        self.assertEqual(get_config_value(config, "quick_picks.missing", "fallback"), "fallback")
        self.assertIsNone(get_config_value(config, "nope.nope"))


def test_from_file(tmp_path):
    path = tmp_path / "homefeed.yaml"
    path.write_text("sections:\n  limit: 10\ntimeouts:\n  section_timeout_seconds: 2.5\n")
    config = FeedConfig.from_file(path)
    assert config.sections.limit == 10
    assert config.timeouts.section_timeout_seconds == 2.5
    assert config.quick_picks.max_per_artist == 3


def test_from_empty_file(tmp_path):
    path = tmp_path / "homefeed.yaml"
    path.write_text("")
    assert FeedConfig.from_file(path).sections.limit == 20


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        FeedConfig.from_file(tmp_path / "missing.yaml")


def test_yaml_round_trip(tmp_path):
    config = FeedConfig()
    config.sections.limit = 12
    path = tmp_path / "homefeed.yaml"
    path.write_text(config.to_yaml())
    assert FeedConfig.from_file(path).sections.limit == 12


def test_environment_override(monkeypatch):
    monkeypatch.setenv("HOMEFEED_TIMEOUTS__SECTION_TIMEOUT_SECONDS", "1.5")
    assert FeedConfig().timeouts.section_timeout_seconds == 1.5


def test_invalid_ratio_rejected(tmp_path):
    path = tmp_path / "homefeed.yaml"
    path.write_text("quick_picks:\n  familiar_ratio: 1.5\n")
    with pytest.raises(ValueError):
        FeedConfig.from_file(path)
