from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer
import uvicorn

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_errors, render_submission
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the temperature telemetry service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8080).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    if ctx.invoked_subcommand == "serve":
        return
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("submit")
def submit_command(
    ctx: typer.Context,
    payload: str = typer.Argument(
        ..., help="Raw payload, e.g. \"42:1690000000000:'Temperature':91.5\"."
    ),
) -> None:
    """Submit a raw temperature payload."""
    state = _get_state(ctx)
    result = state.client.submit(payload)
    render_submission(result)


@app.command("errors")
def errors_command(ctx: typer.Context) -> None:
    """List submissions the service rejected."""
    state = _get_state(ctx)
    render_errors(state.client.list_errors())


@app.command("clear-errors")
def clear_errors_command(ctx: typer.Context) -> None:
    """Clear the service's error log."""
    state = _get_state(ctx)
    message = state.client.clear_errors()
    typer.secho(f"Error log cleared ({message}).", fg=typer.colors.GREEN)


@app.command("serve")
def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (SERVER_HOST)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind (SERVER_PORT)."),
) -> None:
    """Run the HTTP service."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )
