from __future__ import annotations

import typer

from ...infra.uow import session as uow_session
from ...ordering import OrderingService
from ...usecases import session_add as _uc_session_add
from ...usecases import session_show as _uc_session_show
from ._output import echo_schedule, emit_json, fail

app = typer.Typer(name="session", help="Presentation session registration and lookup")


def _echo_session(result: dict) -> None:
    typer.echo(f"  ID: {result['id']}")
    typer.echo(f"  Start: {result['start_datetime']}")
    typer.echo(f"  Minutes per slot: {result['duration_per_slot']}")
    if result.get("end_datetime"):
        typer.echo(f"  End: {result['end_datetime']}")


@app.command("add")
def add_session(
    start: str = typer.Option(..., "--start", help="Start of the first slot (ISO-8601, e.g. 2025-09-05T08:30:00Z)"),
    duration: int = typer.Option(..., "--duration", help="Minutes per presenting group"),
    end: str | None = typer.Option(None, "--end", help="Informational end of the session (ISO-8601)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Register a presentation session.

    Examples:
        presentation-order session add --start 2025-09-05T08:30:00Z --duration 20
    """
    try:
        with uow_session() as db:
            result = _uc_session_add.add_session(
                db,
                start_datetime=_uc_session_add.parse_datetime(start, "start"),
                duration_per_slot=duration,
                end_datetime=_uc_session_add.parse_datetime(end, "end") if end else None,
            )
    except Exception as e:
        fail(e, json_output, "creating session")

    if json_output:
        emit_json({"session": result})
    else:
        typer.echo("Session created:")
        _echo_session(result)


@app.command("show")
def show_session(
    session_id: int = typer.Argument(..., help="Presentation session ID"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Show a session and its current presentation order."""
    try:
        with uow_session() as db:
            result = _uc_session_show.show_session(db, session_id=session_id)
    except Exception as e:
        fail(e, json_output, "showing session")

    if json_output:
        emit_json({"session": result})
    else:
        typer.echo("Session:")
        _echo_session(result)
        echo_schedule(result["slots"])


@app.command("update")
def update_session(
    session_id: int = typer.Argument(..., help="Presentation session ID"),
    start: str | None = typer.Option(None, "--start", help="New start (ISO-8601)"),
    duration: int | None = typer.Option(None, "--duration", help="New minutes per slot"),
    end: str | None = typer.Option(None, "--end", help="New informational end (ISO-8601)"),
    clear_end: bool = typer.Option(False, "--clear-end", help="Clear the end datetime"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Change a session's window; existing slots are retimed from their positions.

    Examples:
        presentation-order session update 3 --start 2025-09-05T09:00:00Z
        presentation-order session update 3 --duration 25
    """
    try:
        result = OrderingService().update_session(
            session_id,
            start_datetime=_uc_session_add.parse_datetime(start, "start") if start else None,
            duration_per_slot=duration,
            end_datetime=_uc_session_add.parse_datetime(end, "end") if end else None,
            clear_end=clear_end,
        )
    except Exception as e:
        fail(e, json_output, "updating session")

    if json_output:
        emit_json({"session": result})
    else:
        typer.echo("Session updated:")
        _echo_session(result)
