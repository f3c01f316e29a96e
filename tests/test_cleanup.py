"""Tests for section post-processing and text heuristics."""

import unittest

from homefeed.core.cleanup import (
    distinct_songs,
    exclude_ids,
    filter_likely_english,
    normalize_artist_sections,
)
from homefeed.core.diversity import limit_songs_per_artist
from homefeed.core.text import (
    infer_genres,
    is_likely_english,
    is_likely_matching_language,
    latin_ratio,
)
from homefeed.models import Artist, ArtistSection, ContentType, Song
from tests.fakes import make_song


class TestDistinctSongs(unittest.TestCase):
    """Blank filtering, dedupe and cap."""

    def test_drops_blank_and_duplicate_entries(self):
        songs = [
            Song(id="", title="No id"),
            Song(id="x", title="  "),
            make_song("a"),
            make_song("a", title="Duplicate"),
            make_song("b"),
            make_song("c"),
        ]
        result = distinct_songs(songs, limit=2)
        self.assertEqual([s.id for s in result], ["a", "b"])
        self.assertEqual(result[0].title, "Song a")

    def test_exclude_ids(self):
        songs = [make_song("a"), make_song("b")]
        self.assertEqual([s.id for s in exclude_ids(songs, ["a"])], ["b"])


class TestArtistSections(unittest.TestCase):
    """Artist section normalization."""

    def section(self, artist_id, name, *song_ids):
        return ArtistSection(
            artist=Artist(id=artist_id, name=name),
            songs=[make_song(sid, name) for sid in song_ids],
        )

    def test_normalizes_sections(self):
        sections = [
            self.section("a1", "Coldplay", "c1", "c1", "c2"),
            self.section("a1", "Coldplay", "c3"),
            self.section("", "Drake"),
            self.section("", "Adele", "ad1"),
            self.section("", "adele", "ad2"),
        ]
        result = normalize_artist_sections(sections, song_limit=10, section_limit=4)
        self.assertEqual([s.artist.name for s in result], ["Coldplay", "Adele"])
        self.assertEqual([s.id for s in result[0].songs], ["c1", "c2"])

    def test_caps_songs_and_sections(self):
        sections = [self.section(f"a{i}", f"Artist {i}", *[f"s{i}{j}" for j in range(5)]) for i in range(6)]
        result = normalize_artist_sections(sections, song_limit=2, section_limit=4)
        self.assertEqual(len(result), 4)
        self.assertTrue(all(len(s.songs) == 2 for s in result))


class TestLanguageHeuristics(unittest.TestCase):
    """Latin-script share and English detection."""

    def test_latin_ratio(self):
        self.assertEqual(latin_ratio("Hello"), 1.0)
        self.assertEqual(latin_ratio("तुम ही हो"), 0.0)
        self.assertIsNone(latin_ratio("123 !!"))

    def test_latin_letters_with_unusual_names(self):
        self.assertEqual(latin_ratio("\uff28\uff45\uff4c\uff4c\uff4f"), 1.0)
        self.assertEqual(latin_ratio("1\u00aa 2\u00ba"), 1.0)
        self.assertEqual(latin_ratio("x\u2071"), 1.0)

    def test_matching_language(self):
        hindi = make_song("h", "अरिजीत सिंह", title="तुम ही हो")
        self.assertFalse(is_likely_matching_language(hindi, ["English"]))
        self.assertTrue(is_likely_matching_language(hindi, []))
        self.assertTrue(is_likely_matching_language(make_song("n", "", title="1999"), ["English"]))

    def test_english_hits_filter(self):
        songs = [
            make_song("e1", "The Weeknd", title="Blinding Lights"),
            make_song("e2", "Arijit Singh", title="Tum Hi Ho (Hindi)"),
            make_song("e3", "अरिजीत सिंह", title="तुम ही हो"),
            make_song("e4", "Harry Styles", title="As It Was", content_type=ContentType.VIDEO),
            make_song("e5", "", title="2024"),
        ]
        self.assertEqual([s.id for s in filter_likely_english(songs)], ["e1"])

    def test_unknown_content_is_allowed(self):
        song = make_song("u", "Someone", content_type=ContentType.UNKNOWN)
        self.assertTrue(is_likely_english(song))


def test_limit_songs_per_artist_ignores_case_and_whitespace():
    songs = [make_song(f"s{i}", name) for i, name in enumerate(["Adele", " adele ", "ADELE", "Adele", "Sia"])]
    assert [s.id for s in limit_songs_per_artist(songs)] == ["s0", "s1", "s2", "s4"]


def test_infer_genres_matches_substrings_both_ways():
    genre_map = {"Arijit Singh": ["Bollywood"], "Coldplay": ["Rock"]}
    assert infer_genres("Arijit Singh & Friends", genre_map) == ["Bollywood"]
    assert infer_genres("Coldplay", genre_map) == ["Rock"]
    assert infer_genres("Cold", genre_map) == ["Rock"]
    assert infer_genres("", genre_map) == []
    assert infer_genres("", genre_map, default=["Pop"]) == ["Pop"]
