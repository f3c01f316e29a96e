"""Collaborators supplying play history and catalog candidates."""

from homefeed.sources.base import CatalogSource, HistorySource, SectionKind
from homefeed.sources.snapshot import SnapshotSource

__all__ = ["CatalogSource", "HistorySource", "SectionKind", "SnapshotSource"]
