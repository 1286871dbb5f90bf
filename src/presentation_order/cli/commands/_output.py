"""Shared output and error-code helpers for command groups."""

from __future__ import annotations

import json
from typing import Any

import typer

from ...infra.exceptions import PresentationOrderError, ValidationError
from ...ordering.exceptions import (
    DuplicateGroup,
    InvalidAlgorithm,
    InvariantViolation,
    PositionOutOfRange,
    SessionBusy,
    SessionNotFound,
    SlotNotFound,
    SlotTimeOverflow,
)

ERROR_CODES: dict[type[PresentationOrderError], str] = {
    SessionNotFound: "SESSION_NOT_FOUND",
    SlotNotFound: "SLOT_NOT_FOUND",
    PositionOutOfRange: "POSITION_OUT_OF_RANGE",
    DuplicateGroup: "GROUP_DUPLICATE",
    InvalidAlgorithm: "INVALID_ALGORITHM",
    SessionBusy: "SESSION_BUSY",
    SlotTimeOverflow: "SLOT_TIME_OUT_OF_RANGE",
    InvariantViolation: "INVARIANT_VIOLATION",
}


def error_code(exc: Exception) -> str:
    for exc_type, code in ERROR_CODES.items():
        if isinstance(exc, exc_type):
            return code
    if isinstance(exc, ValidationError):
        return "VALIDATION_ERROR"
    return "UNKNOWN_ERROR"


def fail(exc: Exception, json_output: bool, action: str) -> None:
    """Report ``exc`` and exit with status 1."""
    if json_output:
        typer.echo(json.dumps({"status": "error", "code": error_code(exc), "message": str(exc)}, indent=2))
    elif isinstance(exc, PresentationOrderError):
        typer.echo(f"Error: {exc}", err=True)
    else:
        typer.echo(f"Error {action}: {exc}", err=True)
    raise typer.Exit(1)


def emit_json(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps({"status": "ok", **payload}, indent=2))


def parse_group_ids(raw: str) -> list[int]:
    """Parse a comma-separated list of integer group ids; blank means none."""
    groups: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            groups.append(int(part))
        except ValueError:
            raise ValidationError(f"Invalid group id '{part}'. Use comma-separated integers, e.g. 5,6,7")
    return groups


def echo_schedule(slots: list[dict[str, Any]]) -> None:
    if not slots:
        typer.echo("No slots scheduled")
        return
    for slot in slots:
        typer.echo(
            f"  {slot['position']:>3}. group {slot['group_id']:<8} "
            f"{slot['scheduled_at']} - {slot['ends_at']}  (slot {slot['id']})"
        )
    typer.echo(f"\nTotal: {len(slots)} slots")
