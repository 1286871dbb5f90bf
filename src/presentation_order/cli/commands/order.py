from __future__ import annotations

import typer

from ...ordering import OrderingService, export_csv
from ...ordering.projection import ScheduleEntry
from ...ordering.sequence import ALGORITHMS, SEQUENTIAL
from ._output import echo_schedule, emit_json, fail, parse_group_ids

app = typer.Typer(name="order", help="Presentation order (slot) operations")

OUTPUT_FORMATS = ("table", "json", "csv")


def _report(entries: list[ScheduleEntry], json_output: bool, heading: str, session_id: int | None = None) -> None:
    slots = [entry.to_dict() for entry in entries]
    if json_output:
        payload: dict = {"total": len(slots), "slots": slots}
        if session_id is not None:
            payload["session_id"] = session_id
        emit_json(payload)
    else:
        typer.echo(heading)
        echo_schedule(slots)


@app.command("replace")
def replace_order(
    session_id: int = typer.Argument(..., help="Presentation session ID"),
    groups: str = typer.Option(..., "--groups", help="Comma-separated group IDs in presentation order (empty clears)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Replace the session's whole order. Existing slot IDs are discarded.

    Examples:
        presentation-order order replace 3 --groups 5,6,7
    """
    try:
        entries = OrderingService().replace_all(session_id, parse_group_ids(groups))
    except Exception as e:
        fail(e, json_output, "replacing order")
    _report(entries, json_output, "Order replaced:", session_id)


@app.command("generate")
def generate_order(
    session_id: int = typer.Argument(..., help="Presentation session ID"),
    groups: str = typer.Option(..., "--groups", help="Comma-separated group IDs to schedule"),
    algorithm: str = typer.Option(SEQUENTIAL, "--algorithm", help=f"Ordering algorithm: {', '.join(ALGORITHMS)}"),
    seed: int | None = typer.Option(None, "--seed", help="Shuffle seed for the random algorithm"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Generate a full order (as given, or shuffled) and replace the session's slots.

    Examples:
        presentation-order order generate 3 --groups 5,6,7,8
        presentation-order order generate 3 --groups 5,6,7,8 --algorithm random --seed 42
    """
    try:
        entries = OrderingService().generate(session_id, parse_group_ids(groups), algorithm, seed)
    except Exception as e:
        fail(e, json_output, "generating order")
    _report(entries, json_output, "Order generated:", session_id)


@app.command("insert")
def insert_slot(
    session_id: int = typer.Argument(..., help="Presentation session ID"),
    group: int = typer.Option(..., "--group", help="Group ID to schedule"),
    position: int | None = typer.Option(None, "--position", help="1-based position (default: append)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Insert a slot for a group; later slots shift down by one."""
    try:
        entries = OrderingService().insert(session_id, group, position)
    except Exception as e:
        fail(e, json_output, "inserting slot")
    _report(entries, json_output, "Slot inserted:", session_id)


@app.command("move")
def move_slot(
    slot_id: int = typer.Argument(..., help="Slot ID"),
    to: int = typer.Option(..., "--to", help="Target 1-based position"),
    group: int | None = typer.Option(None, "--group", help="Reassign the slot to this group"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Move a slot to a new position, optionally reassigning its group.

    Examples:
        presentation-order order move 12 --to 1
        presentation-order order move 12 --to 3 --group 9
    """
    try:
        entries = OrderingService().move(slot_id, to, group)
    except Exception as e:
        fail(e, json_output, "moving slot")
    _report(entries, json_output, "Slot moved:")


@app.command("reorder")
def reorder_slots(
    session_id: int = typer.Argument(..., help="Presentation session ID"),
    from_position: int = typer.Option(..., "--from", help="Current 1-based position"),
    to_position: int = typer.Option(..., "--to", help="Target 1-based position"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Move whichever slot is at --from to --to.

    Examples:
        presentation-order order reorder 3 --from 3 --to 1
    """
    try:
        entries = OrderingService().reorder(session_id, from_position, to_position)
    except Exception as e:
        fail(e, json_output, "reordering slots")
    _report(entries, json_output, "Order updated:", session_id)


@app.command("remove")
def remove_slot(
    slot_id: int = typer.Argument(..., help="Slot ID"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Remove a slot; the slots after it move up one position."""
    try:
        entries = OrderingService().remove(slot_id)
    except Exception as e:
        fail(e, json_output, "removing slot")
    _report(entries, json_output, f"Slot {slot_id} removed:")


@app.command("show")
def show_order(
    session_id: int = typer.Argument(..., help="Presentation session ID"),
    output_format: str = typer.Option("table", "--format", help=f"Output format: {', '.join(OUTPUT_FORMATS)}"),
    json_output: bool = typer.Option(False, "--json", help="Shorthand for --format json"),
):
    """Show the session's presentation order with derived times."""
    fmt = "json" if json_output else output_format.lower()
    if fmt not in OUTPUT_FORMATS:
        typer.echo(f"Error: Invalid format '{output_format}'. Valid values: {list(OUTPUT_FORMATS)}", err=True)
        raise typer.Exit(1)

    try:
        entries = OrderingService().schedule(session_id)
    except Exception as e:
        fail(e, fmt == "json", "showing order")

    if fmt == "csv":
        typer.echo(export_csv(entries), nl=False)
    elif fmt == "json":
        emit_json({"session_id": session_id, "total": len(entries), "slots": [e.to_dict() for e in entries]})
    else:
        typer.echo(f"Presentation order for session {session_id}:")
        echo_schedule([e.to_dict() for e in entries])
