from __future__ import annotations

import logging
import sys

import typer
from dotenv import load_dotenv

from myhttp.config import DEFAULT_PARALLEL, ConfigError, build_config
from myhttp.runner import EXIT_ERROR, run_sync

app = typer.Typer(
    add_completion=False,
    help="Fetch URLs in parallel and print the MD5 digest of each response body.",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )
    # httpx logs every request at INFO/DEBUG.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@app.command()
def fetch(
    urls: list[str] | None = typer.Argument(None, help="URLs to fetch; http:// is assumed when no scheme is given"),
    parallel: int = typer.Option(DEFAULT_PARALLEL, "--parallel", "-p", help="limit the number of parallel requests"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="log debug details to stderr"),
) -> None:
    load_dotenv()
    _configure_logging(verbose)

    try:
        config = build_config(urls or [], parallel)
    except ConfigError as exc:
        typer.echo(f"Error: {exc}", err=True)
        typer.echo("Usage: myhttp [--parallel N] [url ...]", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    raise typer.Exit(code=run_sync(config))


if __name__ == "__main__":
    app()
