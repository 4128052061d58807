"""
Command-line interface for Philosophy Path.

Uses Typer to provide commands for a single traversal, a batch of random
traversals, the HTTP server and cache inspection. Supports loading .env
files for settings such as PORT.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console

from .batch import run_batch
from .config import AppConfig, cache_file_for, load_config
from .core.cache import PathCache
from .core.engine import PathEngine
from .core.errors import PathError
from .fetch.wikipedia import WikipediaSource
from .renderer import format_path, render_html, render_markdown, summary_lines
from .utils.logging import setup_logging

app = typer.Typer(add_completion=False, help="Follow first links on Wikipedia until Philosophy.")
console = Console()


def _load(
    config: Path | None,
    log_level: str | None,
    cache_dir: Path | None,
    no_cache: bool,
    max_hops: int | None,
    target: str | None,
) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    if cache_dir is not None:
        cfg.cache.dir = str(cache_dir)
    if no_cache:
        cfg.cache.enabled = False
    if max_hops is not None:
        cfg.engine.max_hops = max_hops
    if target:
        cfg.engine.target_url = target
    setup_logging(cfg.logging)
    return cfg


def _build_engine(cfg: AppConfig) -> PathEngine:
    cache_path = cache_file_for(cfg.cache, cfg.engine.target_url) if cfg.cache.enabled else None
    cache = PathCache.load(cache_path)
    return PathEngine(WikipediaSource(cfg.fetch), cache, max_hops=cfg.engine.max_hops)


_CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, help="YAML config file.")
_LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Logging level.")
_CACHE_DIR_OPTION = typer.Option(None, "--cache-dir", help="Directory for path cache files.")
_NO_CACHE_OPTION = typer.Option(False, "--no-cache", help="Keep discovered paths in memory only.")
_MAX_HOPS_OPTION = typer.Option(None, "--max-hops", help="Give up after this many links.")
_TARGET_OPTION = typer.Option(None, "--target", "-t", help="Target article URL.")


@app.command()
def find(
    start: str | None = typer.Argument(None, help="Starting article URL (default: a random article)."),
    target: str | None = _TARGET_OPTION,
    config: Path | None = _CONFIG_OPTION,
    log_level: str | None = _LOG_LEVEL_OPTION,
    cache_dir: Path | None = _CACHE_DIR_OPTION,
    no_cache: bool = _NO_CACHE_OPTION,
    max_hops: int | None = _MAX_HOPS_OPTION,
):
    """Find the first-link path from one article to the target."""
    cfg = _load(config, log_level, cache_dir, no_cache, max_hops, target)
    engine = _build_engine(cfg)
    start_url = start or cfg.fetch.random_url

    try:
        result = engine.find_path(start_url, cfg.engine.target_url)
    except PathError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    for article in result.path:
        console.print(article, markup=False, highlight=False)
    status = "[green]reached[/green]" if result.reached else f"[yellow]{result.outcome.value}[/yellow]"
    note = " (cached)" if result.cached else ""
    console.print(f"\n{len(result.path)} articles, {status}{note}")
    if result.error:
        console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(code=1)


@app.command()
def batch(
    count: int | None = typer.Option(None, "--count", "-n", help="Number of random traversals."),
    report: Path | None = typer.Option(None, "--report", "-r", help="Write a .html or .md report."),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    target: str | None = _TARGET_OPTION,
    config: Path | None = _CONFIG_OPTION,
    log_level: str | None = _LOG_LEVEL_OPTION,
    cache_dir: Path | None = _CACHE_DIR_OPTION,
    no_cache: bool = _NO_CACHE_OPTION,
    max_hops: int | None = _MAX_HOPS_OPTION,
):
    """Run many random traversals and print summary statistics."""
    cfg = _load(config, log_level, cache_dir, no_cache, max_hops, target)
    if count is not None:
        cfg.batch.count = count
    engine = _build_engine(cfg)

    result = run_batch(
        engine,
        cfg.batch.count,
        cfg.fetch.random_url,
        cfg.engine.target_url,
        delay_seconds=cfg.batch.delay_seconds,
        top_articles=cfg.batch.top_articles,
        show_progress=progress,
        console=console,
    )

    for index, item in enumerate(result.results, start=1):
        console.print(f"Path {index}: {format_path(item.path)}", markup=False, highlight=False)
    console.print("\n=== SUMMARY STATISTICS ===")
    for line in summary_lines(result):
        console.print(line, markup=False, highlight=False)
    common = result.most_common()
    if common:
        console.print("\nMost common articles in paths:")
        for rank, (article, hits) in enumerate(common, start=1):
            console.print(f'{rank}. "{article}" appeared in {hits} paths', markup=False, highlight=False)

    if report is not None:
        title = f"Paths to {result.target}"
        if report.suffix.lower() in (".md", ".markdown"):
            render_markdown(result, report, title)
        else:
            render_html(result, report, title)
        console.print(f"Report generated: {report}")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind."),
    port: int | None = typer.Option(None, "--port", "-p", envvar="PORT", help="Port to listen on."),
    config: Path | None = _CONFIG_OPTION,
    log_level: str | None = _LOG_LEVEL_OPTION,
    cache_dir: Path | None = _CACHE_DIR_OPTION,
    no_cache: bool = _NO_CACHE_OPTION,
    max_hops: int | None = _MAX_HOPS_OPTION,
):
    """Serve POST /find-path over HTTP."""
    import uvicorn

    from .server import create_app

    cfg = _load(config, log_level, cache_dir, no_cache, max_hops, None)
    if host:
        cfg.server.host = host
    if port is not None:
        cfg.server.port = port

    console.print(f"Server is running on port {cfg.server.port}")
    console.print(f"Open http://{cfg.server.host}:{cfg.server.port}/docs in your browser")
    uvicorn.run(create_app(cfg), host=cfg.server.host, port=cfg.server.port, log_level=cfg.logging.level.lower())


@app.command("cache-info")
def cache_info(
    target: str | None = _TARGET_OPTION,
    config: Path | None = _CONFIG_OPTION,
    cache_dir: Path | None = _CACHE_DIR_OPTION,
):
    """Show where the path cache for a target lives and how many articles it holds."""
    cfg = _load(config, None, cache_dir, False, None, target)
    cache_path = cache_file_for(cfg.cache, cfg.engine.target_url)
    cache = PathCache.load(cache_path)
    console.print(f"Target: {cfg.engine.target_url}")
    console.print(f"Cache file: {cache_path}")
    console.print(f"Cached articles: {len(cache)}")


if __name__ == "__main__":
    app()
