# router/tickets/tickets_router.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_db as get_public_db
from shared.core.schemas import DeleteResult, Lookup, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session as get_db

from ...crud.tickets import ticket_history_crud as history_crud
from ...crud.tickets import tickets_crud as crud
from ...schemas.tickets.tickets_schemas import (
    TicketAssign,
    TicketCreate,
    TicketHistoryListResponse,
    TicketListResponse,
    TicketOut,
    TicketRequest,
    TicketStatusUpdate,
    TicketUpdate,
)

router = APIRouter(
    prefix="/api/tickets",
    tags=["Tickets"],
    dependencies=[Depends(validate_current_token)]
)


# ---------------- Get All ----------------
@router.get("/", response_model=TicketListResponse)
def get_tickets(
    params: TicketRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_tickets(db, current_tenant_id(current_user), params)


@router.get("/urgent", response_model=TicketListResponse)
def get_urgent_tickets(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_urgent_tickets(db, current_tenant_id(current_user), limit)


# ---------------- Lookups ----------------
@router.get("/status-lookup", response_model=List[Lookup])
def status_lookup():
    return crud.status_lookup()


@router.get("/priority-lookup", response_model=List[Lookup])
def priority_lookup():
    return crud.priority_lookup()


# ---------------- Get By ID ----------------
@router.get("/{ticket_id}", response_model=TicketOut)
def get_ticket(
    ticket_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_ticket(db, current_tenant_id(current_user), ticket_id)


# ---------------- Create ----------------
@router.post("/", response_model=TicketOut)
def create_ticket(
    ticket: TicketCreate,
    request: Request,
    db: Session = Depends(get_db),
    public_db: Session = Depends(get_public_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_ticket(
        db, public_db, current_tenant_id(current_user), ticket, current_user,
        history_crud.request_audit_info(request))


# ---------------- Update ----------------
@router.put("/{ticket_id}", response_model=TicketOut)
def update_ticket(
    ticket_id: UUID,
    ticket: TicketUpdate,
    request: Request,
    db: Session = Depends(get_db),
    public_db: Session = Depends(get_public_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_ticket(
        db, public_db, current_tenant_id(current_user), ticket_id, ticket, current_user,
        history_crud.request_audit_info(request))


@router.post("/{ticket_id}/status", response_model=TicketOut)
def change_ticket_status(
    ticket_id: UUID,
    body: TicketStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.change_ticket_status(
        db, current_tenant_id(current_user), ticket_id, body, current_user,
        history_crud.request_audit_info(request))


@router.post("/{ticket_id}/assign", response_model=TicketOut)
def assign_ticket(
    ticket_id: UUID,
    body: TicketAssign,
    request: Request,
    db: Session = Depends(get_db),
    public_db: Session = Depends(get_public_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.assign_ticket(
        db, public_db, current_tenant_id(current_user), ticket_id, body, current_user,
        history_crud.request_audit_info(request))


# ---------------- Delete (Soft Delete) ----------------
@router.delete("/{ticket_id}", response_model=DeleteResult)
def delete_ticket(
    ticket_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_ticket_soft(
        db, current_tenant_id(current_user), ticket_id, current_user,
        history_crud.request_audit_info(request))


# ---------------- History ----------------
@router.get("/{ticket_id}/history", response_model=TicketHistoryListResponse)
def get_ticket_history(
    ticket_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return history_crud.get_ticket_history(db, current_tenant_id(current_user), ticket_id)
