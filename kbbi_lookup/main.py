"""
CLI entry point for kbbi-lookup.
"""

import click
import sys
from typing import Optional

from . import __version__
from .config import Settings
from .core import KBBIDictionary, KBBISession, AuthenticationError
from .models import SearchResult
from .output import (
    export_to_json,
    result_to_json,
    render_result,
    strip_examples,
    strip_related,
)
from .parsing import ParseError
from .search import SearchCache, PageFetcher, ConnectionCheckError
from .utils import configure_logging, EntryNotFoundError, KBBIError, FetchFailedError


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']), default=None)
@click.option('--log-file', type=click.Path(), help='Optional log file path')
@click.option('--json-logs', is_flag=True, help='Output logs as JSON')
@click.pass_context
def cli(ctx: click.Context, log_level: str, log_file: str, json_logs: bool):
    """
    Kamus Besar Bahasa Indonesia (KBBI Daring) from the command line.
    """
    config = Settings()

    configure_logging(
        log_level=log_level or config.log_level,
        log_file=log_file or config.log_file,
        json_logs=json_logs or config.json_logs
    )

    ctx.obj = {"config": config}


@cli.command()
@click.argument('term')
@click.option('--json', 'json_output', is_flag=True, help='Print the result as JSON')
@click.option('--indent', is_flag=True, help='Indent JSON output (with --json)')
@click.option('--no-examples', is_flag=True, help='Hide usage examples')
@click.option('--no-related', is_flag=True, help='Hide related words and cross-references')
@click.option('--guest', is_flag=True, help='Ignore the saved login; member-only fields are skipped')
@click.option('--no-cache', is_flag=True, help='Always fetch a fresh page')
@click.option('--output', 'output_path', type=click.Path(dir_okay=False), help='Also save the JSON result to this file')
@click.pass_context
def search(
    ctx: click.Context,
    term: str,
    json_output: bool,
    indent: bool,
    no_examples: bool,
    no_related: bool,
    guest: bool,
    no_cache: bool,
    output_path: Optional[str]
):
    """
    Look up TERM.

    \b
    Examples:
        kbbi search rumah
        kbbi search cinta --json --indent
        kbbi search "meja hijau" --no-examples
        kbbi search rumah --output rumah.json
    """
    config: Settings = ctx.obj["config"]

    session = None
    if not guest:
        session = KBBISession.from_saved_cookies(
            config.cookie_path,
            host=config.host,
            timeout=config.timeout_seconds
        )

    dictionary = KBBIDictionary(config=config, session=session, use_cache=not no_cache)

    try:
        try:
            result = dictionary.lookup(term)
        except EntryNotFoundError as e:
            result = e.result or SearchResult()
            if not json_output:
                click.echo(f"{term} tidak ditemukan dalam KBBI.")
            # Suggestions go to members, or to anyone asking for JSON
            if result.suggestions and (dictionary.authenticated or json_output):
                _show_result(result, json_output, indent, no_examples, no_related)
                _save_result(result, output_path)
            return

        _show_result(result, json_output, indent, no_examples, no_related)
        _save_result(result, output_path)

    except (KBBIError, FetchFailedError, ParseError, OSError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    finally:
        dictionary.close()


def _show_result(
    result: SearchResult,
    json_output: bool,
    indent: bool,
    no_examples: bool,
    no_related: bool
) -> None:
    """Print a result as JSON or filtered text."""
    if json_output:
        click.echo(result_to_json(result, indent=indent))
        return

    output = render_result(result)
    if no_examples:
        output = strip_examples(output)
    if no_related:
        output = strip_related(output)
    click.echo(output)


def _save_result(result: SearchResult, output_path: Optional[str]) -> None:
    """Write the unfiltered result as indented JSON when a path was given."""
    if not output_path:
        return
    path = export_to_json(result, output_path, indent=True)
    click.echo(f"💾 Disimpan ke {path}", err=True)


@cli.command()
@click.option('--email', prompt='Email', help='KBBI account email')
@click.option('--password', prompt='Password', hide_input=True, help='KBBI account password')
@click.pass_context
def login(ctx: click.Context, email: str, password: str):
    """Log in and save the session cookie for later searches."""
    config: Settings = ctx.obj["config"]

    with KBBISession(config.cookie_path, host=config.host, timeout=config.timeout_seconds) as session:
        try:
            session.login(email, password)
            path = session.save_cookies()
        except AuthenticationError as e:
            click.echo(f"❌ Login failed: {e}", err=True)
            sys.exit(1)

    click.echo("✅ Login successful")
    click.echo(f"   Cookie saved to: {path}")


@cli.command()
@click.pass_context
def logout(ctx: click.Context):
    """Delete the saved session cookie."""
    config: Settings = ctx.obj["config"]

    with KBBISession(config.cookie_path, host=config.host) as session:
        if session.clear_cookies():
            click.echo(f"Cookie deleted: {session.cookie_path}")
        else:
            click.echo(f"No cookie found at: {session.cookie_path}")


@cli.command()
@click.pass_context
def check(ctx: click.Context):
    """Check that KBBI Daring is reachable."""
    config: Settings = ctx.obj["config"]

    with PageFetcher(host=config.host, timeout=config.timeout_seconds) as fetcher:
        try:
            fetcher.check_connection()
        except ConnectionCheckError as e:
            click.echo(f"❌ {e}", err=True)
            sys.exit(1)

    click.echo(f"✅ {config.host} is reachable")


@cli.group()
def cache():
    """Manage the page cache."""
    pass


def _open_cache(ctx: click.Context) -> SearchCache:
    config: Settings = ctx.find_root().obj["config"]
    return SearchCache(
        cache_dir=config.resolved_cache_dir,
        ttl_days=config.cache_ttl_days
    )


@cache.command()
@click.pass_context
def stats(ctx: click.Context):
    """Show cache size."""
    page_cache = _open_cache(ctx)
    info = page_cache.get_stats()

    click.echo(f"Cache directory: {info['cache_dir']}")
    click.echo(f"Entries: {info['entries']}")
    click.echo(f"Size: {info['total_size_bytes'] / 1024:.1f} KB")


@cache.command()
@click.pass_context
def cleanup(ctx: click.Context):
    """Remove expired cache entries."""
    removed = _open_cache(ctx).cleanup_expired()
    click.echo(f"Removed {removed} expired entries")


@cache.command()
@click.confirmation_option(prompt='Delete every cached page?')
@click.pass_context
def clear(ctx: click.Context):
    """Remove every cache entry."""
    removed = _open_cache(ctx).clear()
    click.echo(f"Removed {removed} entries")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
