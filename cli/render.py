from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_point(payload: Dict[str, Any]) -> None:
    echo_heading("Point")
    echo_key_values(
        [
            ("measurement", payload.get("measurement")),
            ("time", payload.get("time")),
        ]
    )

    typer.echo()
    echo_heading("Tags")
    echo_key_values((payload.get("tags") or {}).items())

    typer.echo()
    echo_heading("Fields")
    fields = payload.get("fields") or {}
    if fields:
        echo_key_values(fields.items())
    else:
        typer.echo("No fields recorded.")
