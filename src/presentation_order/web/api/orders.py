"""
REST API endpoints for presentation sessions and their presentation order.

Routes mirror the order service of the evaluation backend:
``/presentations/{id}/orders`` for session-scoped operations and
``/orders/{slot_id}`` for single-slot operations. Every response carries the
full, freshly projected order so clients never have to patch local state.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ...infra.exceptions import ConcurrencyError, NotFoundError, PresentationOrderError, ValidationError
from ...infra.uow import get_db
from ...ordering import OrderingService
from ...ordering.projection import ScheduleEntry
from ...ordering.sequence import ALGORITHMS, MAX_MINUTES_PER_SLOT, SEQUENTIAL
from ...usecases import session_add, session_show

router = APIRouter(prefix="/api", tags=["orders"])


def get_service() -> OrderingService:
    """Dependency returning the ordering service; overridden in tests."""
    return OrderingService()


def _http_error(exc: PresentationOrderError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, ConcurrencyError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def _payload(entries: list[ScheduleEntry], session_id: int | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "status": "ok",
        "total": len(entries),
        "slots": [entry.to_dict() for entry in entries],
    }
    if session_id is not None:
        payload["session_id"] = session_id
    return payload


# ============================================================================
# Pydantic Models for Request/Response
# ============================================================================


class SessionCreate(BaseModel):
    """Request model for registering a presentation session."""
    start_datetime: str = Field(..., description="Start of the first slot (ISO-8601)")
    duration_per_slot: int = Field(
        ..., gt=0, le=MAX_MINUTES_PER_SLOT, description="Minutes per presenting group"
    )
    end_datetime: str | None = Field(None, description="Informational end (ISO-8601)")


class SessionUpdate(BaseModel):
    """Request model for changing a session's window."""
    start_datetime: str | None = Field(None, description="New start (ISO-8601)")
    duration_per_slot: int | None = Field(
        None, gt=0, le=MAX_MINUTES_PER_SLOT, description="New minutes per slot"
    )
    end_datetime: str | None = Field(None, description="New informational end (ISO-8601)")
    clear_end: bool = Field(False, description="Clear end_datetime")


class GenerateOrders(BaseModel):
    """Request model for generating a full order."""
    group_ids: list[int] = Field(..., description="Groups to schedule")
    algorithm: str = Field(SEQUENTIAL, description=f"One of {list(ALGORITHMS)}")
    shuffle_seed: int | None = Field(None, description="Seed for the random algorithm")


class SaveOrders(BaseModel):
    """Request model for replacing the order with already sorted groups."""
    group_ids: list[int] = Field(..., description="Groups in presentation order")


class CreateOrder(BaseModel):
    """Request model for inserting one slot."""
    group_id: int = Field(..., description="Group to schedule")
    position: int | None = Field(None, description="1-based position (default: append)")


class UpdateOrder(BaseModel):
    """Request model for moving a slot and/or reassigning its group."""
    position: int = Field(..., description="Target 1-based position")
    group_id: int | None = Field(None, description="New group")


class ReorderOrders(BaseModel):
    """Request model for moving the slot at one position to another."""
    from_position: int = Field(..., alias="from", description="Current 1-based position")
    to_position: int = Field(..., alias="to", description="Target 1-based position")


# ============================================================================
# Session Endpoints
# ============================================================================


@router.post("/presentations", status_code=201)
def create_session(body: SessionCreate, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Register a presentation session."""
    try:
        result = session_add.add_session(
            db,
            start_datetime=session_add.parse_datetime(body.start_datetime, "start_datetime"),
            duration_per_slot=body.duration_per_slot,
            end_datetime=session_add.parse_datetime(body.end_datetime, "end_datetime")
            if body.end_datetime
            else None,
        )
    except PresentationOrderError as e:
        raise _http_error(e)
    return {"status": "ok", "session": result}


@router.get("/presentations/{session_id}")
def get_session(session_id: int, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Get a session with its current order."""
    try:
        result = session_show.show_session(db, session_id=session_id)
    except PresentationOrderError as e:
        raise _http_error(e)
    return {"status": "ok", "session": result}


@router.patch("/presentations/{session_id}")
def update_session(
    session_id: int,
    body: SessionUpdate,
    service: OrderingService = Depends(get_service),
) -> dict[str, Any]:
    """Change a session's window; slots are retimed from their positions."""
    try:
        result = service.update_session(
            session_id,
            start_datetime=session_add.parse_datetime(body.start_datetime, "start_datetime")
            if body.start_datetime
            else None,
            duration_per_slot=body.duration_per_slot,
            end_datetime=session_add.parse_datetime(body.end_datetime, "end_datetime")
            if body.end_datetime
            else None,
            clear_end=body.clear_end,
        )
    except PresentationOrderError as e:
        raise _http_error(e)
    return {"status": "ok", "session": result}


# ============================================================================
# Order Endpoints
# ============================================================================


@router.post("/presentations/{session_id}/orders/generate", status_code=201)
def generate_orders(
    session_id: int,
    body: GenerateOrders,
    service: OrderingService = Depends(get_service),
) -> dict[str, Any]:
    """Generate the whole order (sequential or seeded random) and replace existing slots."""
    try:
        entries = service.generate(session_id, body.group_ids, body.algorithm, body.shuffle_seed)
    except PresentationOrderError as e:
        raise _http_error(e)
    return _payload(entries, session_id)


@router.put("/presentations/{session_id}/orders")
def save_orders(
    session_id: int,
    body: SaveOrders,
    service: OrderingService = Depends(get_service),
) -> dict[str, Any]:
    """Replace the order with groups that are already sorted."""
    try:
        entries = service.replace_all(session_id, body.group_ids)
    except PresentationOrderError as e:
        raise _http_error(e)
    return _payload(entries, session_id)


@router.post("/presentations/{session_id}/orders", status_code=201)
def create_order(
    session_id: int,
    body: CreateOrder,
    service: OrderingService = Depends(get_service),
) -> dict[str, Any]:
    """Insert a slot at a position (or append)."""
    try:
        entries = service.insert(session_id, body.group_id, body.position)
    except PresentationOrderError as e:
        raise _http_error(e)
    return _payload(entries, session_id)


@router.get("/presentations/{session_id}/orders")
def list_orders(
    session_id: int,
    service: OrderingService = Depends(get_service),
) -> dict[str, Any]:
    """List the order with derived times."""
    try:
        entries = service.schedule(session_id)
    except PresentationOrderError as e:
        raise _http_error(e)
    return _payload(entries, session_id)


@router.patch("/presentations/{session_id}/orders/reorder")
def reorder_orders(
    session_id: int,
    body: ReorderOrders,
    service: OrderingService = Depends(get_service),
) -> dict[str, Any]:
    """Move the slot at ``from`` to ``to``."""
    try:
        entries = service.reorder(session_id, body.from_position, body.to_position)
    except PresentationOrderError as e:
        raise _http_error(e)
    return _payload(entries, session_id)


@router.put("/orders/{slot_id}")
def update_order(
    slot_id: int,
    body: UpdateOrder,
    service: OrderingService = Depends(get_service),
) -> dict[str, Any]:
    """Move a slot and/or reassign its group."""
    try:
        entries = service.move(slot_id, body.position, body.group_id)
    except PresentationOrderError as e:
        raise _http_error(e)
    return _payload(entries)


@router.delete("/orders/{slot_id}")
def delete_order(
    slot_id: int,
    service: OrderingService = Depends(get_service),
) -> dict[str, Any]:
    """Remove a slot and close the gap."""
    try:
        entries = service.remove(slot_id)
    except PresentationOrderError as e:
        raise _http_error(e)
    return _payload(entries)
