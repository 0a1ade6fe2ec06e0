from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import ConsoleNotifier, render_analysis, render_latest, render_summary
from logging_config import configure_logging
from models.records import ConnectionMode, Reading, Scenario
from services.advisor import analyze
from services.chat import ChatResponder, ChatSession
from services.monitor import build_monitor
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for monitoring simulated PCB health through the backend.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Backend base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log monitor activity to stderr."),
) -> None:
    """Entry point for the CLI."""
    if verbose:
        configure_logging("DEBUG")
    config = load_config(base_url=base_url, request_timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("send")
def send_command(
    ctx: typer.Context,
    voltage: float = typer.Argument(..., help="Measured voltage in volts."),
    current: float = typer.Argument(..., help="Measured current in amperes."),
    temperature: Optional[float] = typer.Option(
        None, "--temperature", "-t", help="Board temperature in degrees Celsius."
    ),
    mode: Optional[ConnectionMode] = typer.Option(
        None, "--mode", help="Connection mode the reading arrived over."
    ),
) -> None:
    """Post a reading as the device would."""
    state = _get_state(ctx)
    message = state.client.post_reading(voltage, current, temperature, mode)
    typer.secho(message, fg=typer.colors.GREEN)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the latest reading stored by the backend."""
    state = _get_state(ctx)
    render_latest(state.client.get_latest())


@app.command("classify")
def classify_command(
    voltage: float = typer.Argument(..., help="Voltage in volts."),
    temperature: float = typer.Argument(..., help="Temperature in degrees Celsius."),
) -> None:
    """Classify a reading locally and print the advisory."""
    reading = Reading(voltage=voltage, temperature=temperature, timestamp=datetime.now(timezone.utc))
    render_analysis(analyze(reading))


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    count: int = typer.Option(0, "--count", "-n", min=0, help="Stop after N polls (0 = forever)."),
    interval: Optional[float] = typer.Option(
        None, "--interval", help="Seconds between polls (defaults to the configured poll interval)."
    ),
    scenario: Scenario = typer.Option(
        Scenario.normal, "--scenario", help="Synthetic scenario used when the backend has no data."
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for synthetic readings."),
) -> None:
    """Poll the backend, falling back to synthetic readings, and print alerts."""
    state = _get_state(ctx)
    monitor = build_monitor(source=state.client, sink=ConsoleNotifier(), seed=seed)
    monitor.set_scenario(scenario)
    wait = interval if interval is not None else get_settings().poll_interval

    polls = 0
    try:
        while True:
            analysis = monitor.tick()
            if analysis is not None:
                render_analysis(analysis, simulated=monitor.simulated)
            polls += 1
            if count and polls >= count:
                break
            time.sleep(wait)
    except KeyboardInterrupt:
        typer.echo()
    render_summary(monitor.history.summarize())


@app.command("chat")
def chat_command(
    ctx: typer.Context,
    message: List[str] = typer.Argument(..., help="Question for the diagnostics assistant."),
    delay: Optional[float] = typer.Option(
        None, "--delay", min=0.0, help="Seconds the assistant 'thinks' before replying."
    ),
) -> None:
    """Ask the diagnostics assistant one question about the current readings."""
    state = _get_state(ctx)
    monitor = build_monitor(source=state.client, sink=ConsoleNotifier())
    monitor.tick()

    response_delay = delay if delay is not None else get_settings().chat_response_delay
    session = ChatSession(
        ChatResponder(controls=monitor),
        monitor.hardware_details,
        delay=response_delay,
    )
    session.open()
    text = " ".join(message)
    if not session.submit(text):
        raise typer.BadParameter("Message must not be blank.")
    typer.echo("Analyzing your query...")
    try:
        reply = session.wait_for_reply(timeout=response_delay + 10.0)
    finally:
        session.close()
    if reply is None:
        typer.secho("The assistant did not answer in time.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo(reply.text)
