"""Click CLI for spritecache — fetch, prefetch and manage cached images."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from spritecache.cache.manager import ImageCacheManager
from spritecache.config.hierarchy import load_config_hierarchy
from spritecache.config.schema import CacheSettings

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _settings(ctx: click.Context, **overrides: object) -> CacheSettings:
    config = load_config_hierarchy(cache_dir=ctx.obj.get("cache_dir"), **overrides)
    return CacheSettings.from_mapping(config)


def _manager(settings: CacheSettings) -> ImageCacheManager:
    """Coordinator for the maintenance commands; never sweeps on its own."""
    return ImageCacheManager(
        cache_dir=settings.cache_dir,
        max_memory_bytes=settings.max_memory_bytes,
        max_memory_count=settings.max_memory_count,
        max_disk_bytes=settings.max_disk_bytes,
        max_age_seconds=settings.max_age_seconds,
        sweep_on_start=False,
    )


def _format_bytes(n: int) -> str:
    if n < 1024:
        return f"{n} B"
    size = n / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


@click.group()
@click.version_option(package_name="spritecache")
@click.option(
    "--cache-dir", type=click.Path(file_okay=False, path_type=Path), help="Cache directory."
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
@click.pass_context
def cli(ctx: click.Context, cache_dir: Path | None, verbose: int) -> None:
    """spritecache — two-tier image cache for catalog sprites."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["cache_dir"] = cache_dir


@cli.command()
@click.argument("url")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write the image as PNG.")
@click.option("--no-cache", is_flag=True, default=False, help="Bypass the cache.")
@click.pass_context
def fetch(ctx: click.Context, url: str, output: str | None, no_cache: bool) -> None:
    """Load one image through the cache."""
    from spritecache.core import SpriteCache
    from spritecache.utils.image import encode_png

    sprites = SpriteCache(_settings(ctx, cache_disabled=no_cache or None), sweep_on_start=False)

    async def _run():
        try:
            return await sprites.get_image(url)
        finally:
            await sprites.close()

    image = asyncio.run(_run())
    if image is None:
        error_console.print(f"[red]Error:[/red] could not load {url}")
        sys.exit(1)

    console.print(f"[green]Loaded[/green] {url} ({image.width}x{image.height}, {image.mode})")
    if output:
        Path(output).write_bytes(encode_png(image))
        console.print(f"[green]Written to {output}[/green]")


@cli.command()
@click.option("--limit", type=int, default=None, help="Catalog page size.")
@click.option("--offset", type=int, default=0, show_default=True, help="Catalog page offset.")
@click.option("--workers", type=int, default=None, help="Concurrent downloads.")
@click.pass_context
def prefetch(ctx: click.Context, limit: int | None, offset: int, workers: int | None) -> None:
    """Warm the cache with the sprites of one catalog page."""
    from spritecache.catalog.client import CatalogClient
    from spritecache.core import SpriteCache
    from spritecache.errors.exceptions import CatalogError

    settings = _settings(ctx, max_workers=workers, page_limit=limit)
    sprites = SpriteCache(settings)
    catalog = CatalogClient(base_url=settings.catalog_base_url)

    async def _run():
        sprites.start_sweeper()
        try:
            page = await catalog.fetch_list(limit=settings.page_limit, offset=offset)
            urls = [
                u
                for u in (e.image_url(settings.sprite_url_template) for e in page.results)
                if u
            ]
            return await sprites.prefetch(urls)
        finally:
            await catalog.close()
            await sprites.close()

    try:
        result = asyncio.run(_run())
    except CatalogError as e:
        error_console.print(f"[red]Catalog error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Prefetched {len(result.loaded)}/{result.total} images[/green]")
    for key in result.failed:
        error_console.print(f"[yellow]Failed:[/yellow] {key}")


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("stats")
@click.pass_context
def cache_stats(ctx: click.Context) -> None:
    """Show cache statistics."""
    settings = _settings(ctx)
    mgr = _manager(settings)

    table = Table(title="Image Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    sizes = mgr.size_stats()
    stats = mgr.stats()
    table.add_row("Directory", str(mgr.directory))
    table.add_row("Memory limit", _format_bytes(sizes.memory_limit_bytes))
    table.add_row("Disk files", str(stats.disk_entries))
    table.add_row("Disk used", _format_bytes(sizes.disk_used_bytes))
    table.add_row("Disk limit", _format_bytes(settings.max_disk_bytes))

    console.print(table)
    mgr.close()


@cache.command("clear")
@click.option("--memory-only", is_flag=True, default=False, help="Only clear the memory tier.")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
@click.pass_context
def cache_clear(ctx: click.Context, memory_only: bool) -> None:
    """Clear cached images."""
    mgr = _manager(_settings(ctx))
    if memory_only:
        mgr.clear_memory()
    else:
        asyncio.run(mgr.clear_all())
    mgr.close()
    console.print("[green]Cache cleared.[/green]")


@cache.command("sweep")
@click.pass_context
def cache_sweep(ctx: click.Context) -> None:
    """Remove expired files and trim the disk tier to its size limit."""
    mgr = _manager(_settings(ctx))
    report = mgr.sweep_expired()
    mgr.close()
    console.print(
        f"[green]Removed {report.removed} files[/green] "
        f"({report.expired_removed} expired, {report.oversize_removed} over limit, "
        f"{_format_bytes(report.bytes_freed)} freed)"
    )


def main() -> None:
    """Entry point for the CLI."""
    cli()
