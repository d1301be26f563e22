from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_submission(payload: Dict[str, Any]) -> None:
    echo_heading("Submission Result")
    if not payload.get("overtemp"):
        echo_key_values([("overtemp", False)])
        return
    typer.secho("overtemp: True", fg=typer.colors.YELLOW)
    echo_key_values(
        [
            ("device_id", payload.get("device_id")),
            ("formatted_time", payload.get("formatted_time")),
        ]
    )


def render_errors(errors: List[str]) -> None:
    echo_heading("Rejected Submissions")
    if not errors:
        typer.echo("No errors recorded.")
        return
    for index, raw in enumerate(errors, start=1):
        typer.echo(f"  {index}. {raw!r}")
