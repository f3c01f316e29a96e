"""Command-line interface for homefeed."""

import json
import logging
import sys
from typing import List, Optional

# Configure logging before importing homefeed modules - default to WARNING for normal runs
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("homefeed")

import typer
from rich.console import Console
from rich.table import Table

from homefeed import __version__
from homefeed.config import FeedConfig
from homefeed.models import Song
from homefeed.sources.snapshot import SnapshotSource
from homefeed.workflows.home_feed import HomeFeedAggregator, build_home_feed_sync

app = typer.Typer(help="homefeed - Personalized home feed recommendations")
console = Console()

SECTION_TITLES = [
    ("listen_again", "Listen Again"),
    ("quick_picks", "Quick Picks"),
    ("forgotten_favorites", "Forgotten Favorites"),
    ("new_releases", "New Releases"),
    ("trending", "Trending"),
    ("english_hits", "English Hits"),
    ("personalized_for_you", "For You"),
]


def debug_callback(value: bool):
    """Enable debug mode."""
    if value:
        logging.getLogger("homefeed").setLevel(logging.DEBUG)
        console.print("[dim]Debug mode enabled[/dim]")


def _load_config(config_path: Optional[str]) -> FeedConfig:
    if config_path:
        return FeedConfig.from_file(config_path)
    return FeedConfig()


def _song_table(title: str, songs: List[Song]) -> Table:
    table = Table(title=f"{title} ({len(songs)})", title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title")
    table.add_column("Artist", style="cyan")
    table.add_column("Length", justify="right")
    for i, song in enumerate(songs, start=1):
        table.add_row(str(i), song.title, song.artist, song.formatted_duration())
    return table


@app.callback()
def common_options(
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
        callback=debug_callback,
        is_eager=True,
    ),
):
    """homefeed - Personalized home feed recommendations."""
    pass


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]homefeed[/bold] v{__version__}")


@app.command()
def build(
    snapshot: str = typer.Argument(..., help="Snapshot file (JSON or YAML) with history and catalog"),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Session seed for the Quick Picks shuffle",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the feed as JSON",
    ),
) -> None:
    """Build the home feed from a snapshot and print every section."""
    try:
        config = _load_config(config_path)
        level = getattr(logging, config.logging.level.upper(), logging.WARNING)
        if logger.level == logging.NOTSET or level < logger.level:
            logger.setLevel(level)
        source = SnapshotSource.from_file(snapshot)
        aggregator = HomeFeedAggregator(source, source, config=config, session_seed=seed)
        feed = build_home_feed_sync(aggregator).get_or_raise()
    except Exception as e:
        console.print(f"[red]✗[/red] Build failed: {e}")
        sys.exit(1)

    if as_json:
        console.print_json(json.dumps(feed.model_dump(mode="json")))
        return

    for key, title in SECTION_TITLES:
        console.print(_song_table(title, getattr(feed, key)))
    for section in feed.artists:
        console.print(_song_table(f"Artist: {section.artist.name}", section.songs))


@app.command()
def show_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Print the effective configuration as YAML."""
    try:
        config = _load_config(config_path)
    except Exception as e:
        console.print(f"[red]✗[/red] Could not load config: {e}")
        sys.exit(1)
    console.print(config.to_yaml())


def main():
    app()


if __name__ == "__main__":
    main()
