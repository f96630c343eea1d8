"""
Command-line interface for site-catalog.

Commands:
- capture: Capture a URL without storing it in the catalog
- add: Capture a URL and add it to the catalog
- list: Show catalog entries
- rescan: Capture an existing entry again
- tag: Replace the tags of an entry
- delete: Remove an entry
- serve: Run the HTTP API
"""

import asyncio
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .api import add_website, delete_website, rescan_website, update_tags, validate_url
from .capture.errors import (
    CaptureError,
    CaptureTimeoutError,
    InvalidURLError,
    SiteCatalogError,
)
from .capture.pipeline import capture_website
from .config import CaptureConfig
from .store import Website, WebsiteStore

console = Console()


def _palette_markup(palette: list[str]) -> str:
    if not palette:
        return "[dim](none)[/]"
    return " ".join(f"[on {color}]  [/] {color}" for color in palette)


def _print_website(website: Website) -> None:
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("ID", str(website.id))
    table.add_row("Title", website.title)
    table.add_row("URL", f"[cyan]{website.url}[/]")
    table.add_row("Category", website.category or "")
    table.add_row("Description", website.description or "[dim](none)[/]")
    table.add_row("Tags", ", ".join(website.tag_list) or "[dim](none)[/]")
    table.add_row("Colors", _palette_markup(website.color_palette))
    table.add_row("Screenshot", website.screenshot_path)
    table.add_row("Added", website.created_at)

    console.print(table)


def _fail(message: str) -> None:
    console.print(f"[red]✗ {message}[/]")
    raise click.Abort()


def _open_store(config: CaptureConfig) -> WebsiteStore:
    return WebsiteStore(config.database_path)


@click.group()
@click.option('--db', 'db_path', type=click.Path(path_type=Path),
              help='SQLite database path (default: data/websites.db)')
@click.option('--screenshots', 'screenshot_dir', type=click.Path(path_type=Path),
              help='Screenshot directory (default: public/screenshots)')
@click.pass_context
def main(ctx: click.Context, db_path: Path | None, screenshot_dir: Path | None):
    """Site Catalog - Capture and catalog websites."""
    config = CaptureConfig.from_env()
    if db_path is not None:
        config = replace(config, database_path=db_path)
    if screenshot_dir is not None:
        config = replace(config, screenshot_dir=screenshot_dir)
    ctx.obj = config


@main.command()
@click.argument('url')
@click.option('--timeout', type=float, default=None,
              help='Navigation timeout per attempt in seconds (default: 30)')
@click.pass_obj
def capture(config: CaptureConfig, url: str, timeout: float | None):
    """Capture URL and print its metadata without storing it."""
    if timeout is not None:
        config = replace(config, navigation_timeout=timeout)

    try:
        url = validate_url(url)
    except InvalidURLError as e:
        _fail(str(e))

    console.print(f"[bold]Capturing:[/] {url}")
    try:
        result = asyncio.run(capture_website(url, config))
    except CaptureTimeoutError as e:
        _fail(f"Timed out: {e}")
    except CaptureError as e:
        _fail(str(e))

    metadata = result.metadata
    table = Table(title="Capture Result")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Title", metadata.title)
    table.add_row("Description", metadata.description or "")
    table.add_row("Category", metadata.category or "")
    table.add_row("Colors", _palette_markup(metadata.color_palette))
    table.add_row("Screenshot", str(result.screenshot_path))

    console.print(table)


@main.command()
@click.argument('url')
@click.pass_obj
def add(config: CaptureConfig, url: str):
    """Capture URL and add it to the catalog."""
    store = _open_store(config)
    try:
        with console.status(f"Capturing {url}..."):
            website = asyncio.run(add_website(store, url, config))
    except SiteCatalogError as e:
        _fail(str(e))
    finally:
        store.close()

    console.print("[bold green]✓ Added to catalog[/]")
    _print_website(website)


@main.command('list')
@click.option('-c', '--category', help='Only show entries in this category')
@click.option('-t', '--tag', help='Only show entries with this tag')
@click.pass_obj
def list_websites(config: CaptureConfig, category: str | None, tag: str | None):
    """List catalog entries, newest first."""
    store = _open_store(config)
    try:
        websites = store.list_all()
    finally:
        store.close()

    if category:
        websites = [w for w in websites if (w.category or '').lower() == category.lower()]
    if tag:
        websites = [w for w in websites if tag.lower() in (t.lower() for t in w.tag_list)]

    if not websites:
        console.print("[dim]No websites in catalog[/]")
        return

    table = Table(title="Websites")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("URL", style="cyan")
    table.add_column("Category")
    table.add_column("Tags")

    for website in websites:
        table.add_row(
            str(website.id),
            website.title,
            website.url,
            website.category or "",
            ", ".join(website.tag_list),
        )

    console.print(table)


@main.command()
@click.argument('website_id', type=int)
@click.pass_obj
def rescan(config: CaptureConfig, website_id: int):
    """Capture an existing entry again."""
    store = _open_store(config)
    try:
        with console.status(f"Rescanning #{website_id}..."):
            website = asyncio.run(rescan_website(store, website_id, config))
    except SiteCatalogError as e:
        _fail(str(e))
    finally:
        store.close()

    console.print("[bold green]✓ Rescanned[/]")
    _print_website(website)


@main.command()
@click.argument('website_id', type=int)
@click.argument('tags')
@click.pass_obj
def tag(config: CaptureConfig, website_id: int, tags: str):
    """Replace the comma-separated TAGS of an entry."""
    store = _open_store(config)
    try:
        website = update_tags(store, website_id, tags)
    except SiteCatalogError as e:
        _fail(str(e))
    finally:
        store.close()

    console.print(f"  ✓ Tags: {', '.join(website.tag_list) or '(none)'}")


@main.command()
@click.argument('website_id', type=int)
@click.pass_obj
def delete(config: CaptureConfig, website_id: int):
    """Remove an entry and its screenshot."""
    store = _open_store(config)
    try:
        delete_website(store, website_id, config)
    except SiteCatalogError as e:
        _fail(str(e))
    finally:
        store.close()

    console.print(f"  ✓ Deleted #{website_id}")


@main.command()
@click.option('--host', default='127.0.0.1', help='Bind address')
@click.option('--port', type=int, default=8000, help='Port')
@click.pass_obj
def serve(config: CaptureConfig, host: str, port: int):
    """Run the HTTP API."""
    import uvicorn

    from .server import create_app

    console.print(f"[bold]Serving on[/] http://{host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == '__main__':
    main()
