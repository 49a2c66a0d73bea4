"""
cli.py — Command-line interface for yt-transcript-fetcher.

Provides the `yt-transcript` command group (registered as a console script
in pyproject.toml):

    get    Fetch a transcript and print it (or write it to a file).
    check  Report which caption languages a video offers, without
           downloading the transcript.

Usage examples:
    yt-transcript get "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    yt-transcript get dQw4w9WgXcQ --lang es --format json
    yt-transcript get dQw4w9WgXcQ --cache-dir ~/.cache/yt-transcripts
    yt-transcript check https://youtu.be/dQw4w9WgXcQ
"""

from __future__ import annotations

import json
import logging
import sys

import click

from yt_transcript_fetcher.cache import FsCache
from yt_transcript_fetcher.errors import TranscriptError
from yt_transcript_fetcher.extractor import check_transcript_availability, extract
from yt_transcript_fetcher.models import (
    DEFAULT_CACHE_TTL,
    DEFAULT_USER_AGENT,
    TranscriptConfig,
)


def _configure_logging(verbose: bool) -> None:
    """Send library log output to stderr; DEBUG with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# CLI group — the top-level `yt-transcript` command
# ---------------------------------------------------------------------------

@click.group()
def main() -> None:
    """
    YouTube Transcript Fetcher — fetch video transcripts and check caption languages.
    """


# ---------------------------------------------------------------------------
# Subcommand: get — fetch a transcript from YouTube
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
@click.option(
    "--format", "-f",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(["text", "json", "doc"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format: plain text, JSON with timestamps, or readable markdown document.",
)
@click.option(
    "--lang", "-l",
    default=None,
    envvar="YT_TRANSCRIPT_LANG",
    help="Exact caption language code (e.g. 'en', 'pt-BR'). Defaults to the video's default track.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write output to a file instead of stdout.",
)
@click.option(
    "--http",
    "disable_https",
    is_flag=True,
    default=False,
    help="Use plain HTTP for the watch page and transcript requests.",
)
@click.option(
    "--user-agent",
    default=DEFAULT_USER_AGENT,
    show_default=False,
    help="User-Agent header sent with every request.",
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False),
    default=None,
    envvar="YT_TRANSCRIPT_CACHE_DIR",
    help="Cache fetched transcripts as files in this directory.",
)
@click.option(
    "--cache-ttl",
    type=click.FloatRange(min=0),
    default=DEFAULT_CACHE_TTL,
    show_default=True,
    help="Seconds a cached transcript stays valid (only used with --cache-dir).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log each request to stderr.")
def get(
    video: str,
    fmt: str,
    lang: str | None,
    output: str | None,
    disable_https: bool,
    user_agent: str,
    cache_dir: str | None,
    cache_ttl: float,
    verbose: bool,
) -> None:
    """
    Fetch a YouTube video transcript.

    VIDEO can be a full YouTube URL or an 11-character video ID.
    """
    _configure_logging(verbose)

    cache = FsCache(cache_dir, default_ttl=cache_ttl) if cache_dir else None

    try:
        result = extract(
            video,
            lang=lang,
            fmt=fmt.lower(),
            cache=cache,
            disable_https=disable_https,
            user_agent=user_agent,
        )
    except TranscriptError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    if isinstance(result, dict):
        text = json.dumps(result, indent=2, ensure_ascii=False)
    else:
        text = result

    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.write("\n")
        click.echo(f"Transcript written to {output}", err=True)
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# Subcommand: check — list caption languages without downloading
# ---------------------------------------------------------------------------

@main.command()
@click.argument("video", metavar="URL_OR_ID")
@click.option(
    "--lang", "-l",
    default=None,
    envvar="YT_TRANSCRIPT_LANG",
    help="Check for this exact caption language code.",
)
@click.option(
    "--http",
    "disable_https",
    is_flag=True,
    default=False,
    help="Use plain HTTP for the watch page request.",
)
@click.option(
    "--user-agent",
    default=DEFAULT_USER_AGENT,
    show_default=False,
    help="User-Agent header sent with every request.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log each request to stderr.")
def check(
    video: str,
    lang: str | None,
    disable_https: bool,
    user_agent: str,
    as_json: bool,
    verbose: bool,
) -> None:
    """
    Check whether a transcript is available for a video.

    Prints the language that would be fetched and every language on offer.
    Exits with status 1 if no transcript is available.
    """
    _configure_logging(verbose)

    config = TranscriptConfig(lang=lang, user_agent=user_agent, disable_https=disable_https)
    try:
        availability = check_transcript_availability(video, config)
    except TranscriptError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(availability.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(f"Video ID: {availability.video_id}")
    click.echo(f"Selected language: {availability.selected_language}")
    click.echo(f"Available languages: {', '.join(availability.available_languages)}")
