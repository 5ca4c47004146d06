# Copyright (c)
# SPDX-License-Identifier: MIT
"""Fact cache CLI: inspect and seed cache entries.

Commands:
    show FACT     Print the cached mapping for FACT as YAML (exit 1 if absent).
    put FACT VAL  Parse VAL as YAML and store it as the value of FACT.
    status FACT   Print the entry state (fresh/stale/missing/corrupt/disabled).

Environment:
    FACT_CACHE_EXTERNAL_FACTS_ENABLED   Gate for file-backed caching.
    FACT_CACHE_SEARCH_PATH              Candidate directories (os.pathsep separated).
    FACT_CACHE_TTL_SECONDS              Default freshness window.
    LOG_LEVEL                           Root log level.
"""

from __future__ import annotations

import typer
import yaml

from fact_cache.domain.exceptions.base import DomainError
from fact_cache.infrastructure.caching import yaml_codec
from fact_cache.infrastructure.host.settings_capabilities import build_fact_cache
from fact_cache.infrastructure.logging.logger import configure_root_logging, get_json_logger

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("show")
def show(
    fact: str = typer.Argument(..., help="Fact name."),  # noqa: B008
    ttl: int | None = typer.Option(
        None, min=0, help="Freshness window override in seconds."
    ),  # noqa: B008
) -> None:
    """Print the cached mapping for a fact."""
    entry = build_fact_cache().cached(fact, ttl=ttl)
    if entry is None:
        typer.echo(f"{fact}: no fresh cache entry", err=True)
        raise typer.Exit(code=1)
    typer.echo(yaml_codec.dumps(dict(entry)), nl=False)


@app.command("put")
def put(
    fact: str = typer.Argument(..., help="Fact name."),  # noqa: B008
    value: str = typer.Argument(..., help="Value, parsed as YAML."),  # noqa: B008
) -> None:
    """Store a value for a fact."""
    try:
        parsed = yaml.safe_load(value)
    except (yaml.YAMLError, ValueError, RecursionError) as exc:
        typer.echo(f"Invalid YAML value: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    if parsed is None:
        typer.echo(f"{fact}: a null value cannot be cached", err=True)
        raise typer.Exit(code=2)

    try:
        build_fact_cache().cache(fact, parsed)
    except DomainError as exc:
        log.error("fact_cache.cli.put_failed", extra={"code": exc.code, **exc.details})
        typer.echo(f"{exc.code}: {exc}", err=True)
        raise typer.Exit(code=2) from exc


@app.command("status")
def status(
    fact: str = typer.Argument(..., help="Fact name."),  # noqa: B008
    ttl: int | None = typer.Option(
        None, min=0, help="Freshness window override in seconds."
    ),  # noqa: B008
) -> None:
    """Print the state of a fact's cache entry."""
    state = build_fact_cache().inspect(fact, ttl=ttl)
    typer.echo(state.value)


if __name__ == "__main__":  # pragma: no cover
    app()
