from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_point
from models.errors import DialectError, PipelineError
from services.dialects import build_mapper
from services.pipeline import normalize
from settings import DEFAULT_DIALECTS


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for sending and previewing personal weather station readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def parse_params(values: List[str]) -> List[Tuple[str, str]]:
    """Split ``key=value`` arguments, keeping repeats and order."""
    pairs: List[Tuple[str, str]] = []
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {item!r}.", param_hint="--param")
        pairs.append((key, value))
    return pairs


def _station_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Ingest service base URL (defaults to API_BASE_URL env or http://localhost:8080).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds.",
    ),
    path: Optional[str] = typer.Option(
        None,
        "--path",
        help="Ingest route on the server, e.g. /data/report.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout, path=path)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("send")
def send_command(
    ctx: typer.Context,
    param: List[str] = typer.Option(
        [],
        "--param",
        "-p",
        help="Query parameter as key=value; repeat for each field.",
    ),
    stamp: bool = typer.Option(
        False,
        "--stamp/--no-stamp",
        help="Add dateutc with the current UTC time when it is not given.",
    ),
) -> None:
    """Push one reading to the ingest service the way a station would."""
    state = _get_state(ctx)
    pairs = parse_params(param)
    if stamp and not any(key == "dateutc" for key, _ in pairs):
        pairs.append(("dateutc", _station_now()))
    typer.echo(f"Sending {len(pairs)} parameters to {state.config.base_url}{state.config.path} ...")
    body = state.client.send_reading(pairs)
    typer.secho(body, fg=typer.colors.GREEN)


@app.command("preview")
def preview_command(
    ctx: typer.Context,
    param: List[str] = typer.Option(
        [],
        "--param",
        "-p",
        help="Query parameter as key=value; repeat for each field.",
    ),
    remote: bool = typer.Option(
        False,
        "--remote/--local",
        help="Normalize on the server instead of in-process.",
    ),
    dialect: List[str] = typer.Option(
        list(DEFAULT_DIALECTS),
        "--dialect",
        "-d",
        help="Dialects enabled for local normalization.",
    ),
) -> None:
    """Show the point a reading would produce without writing it."""
    state = _get_state(ctx)
    pairs = parse_params(param)

    if remote:
        render_point(state.client.preview_reading(pairs))
        return

    try:
        mapper = build_mapper(dialect)
    except DialectError as exc:
        raise typer.BadParameter(str(exc), param_hint="--dialect") from exc

    params: dict[str, List[str]] = {}
    for key, value in pairs:
        params.setdefault(key, []).append(value)

    try:
        result = normalize(params, datetime.now(timezone.utc), mapper)
    except PipelineError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    render_point(result.point.as_dict())


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Check that the ingest service is up."""
    state = _get_state(ctx)
    payload = state.client.health()
    typer.echo(f"status: {payload.get('status')}")
    typer.echo(f"storage: {payload.get('storage')}")
