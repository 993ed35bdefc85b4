# crud/tickets/tickets_crud.py
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.helpers.user_helper import get_user_names_bulk
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from ...enum.ticket_enum import (
    FINISHED_STATUSES, OPEN_STATUSES, URGENT_PRIORITIES, TicketHistoryAction, TicketPriority, TicketStatus
)
from ...models.tickets.ticket_hierarchy import TicketAction, TicketCategory, TicketSubcategory
from ...models.tickets.tickets import Ticket
from ...schemas.tickets.tickets_schemas import (
    TicketAssign, TicketCreate, TicketListResponse, TicketOut, TicketRequest, TicketStatusUpdate, TicketUpdate
)
from . import ticket_history_crud as history

logger = logging.getLogger(__name__)

HIERARCHY_FIELDS = ("category_id", "subcategory_id", "action_id")


# ---------------- Helpers ----------------
def ticket_to_out(ticket: Ticket, user_names: Optional[Dict[UUID, str]] = None) -> TicketOut:
    if user_names is None:
        user_names = get_user_names_bulk([ticket.assigned_to_id])

    return TicketOut.model_validate({
        **ticket.__dict__,
        "is_overdue": ticket.is_overdue,
        "category_name": ticket.category.name if ticket.category else None,
        "subcategory_name": ticket.subcategory.name if ticket.subcategory else None,
        "action_name": ticket.action.name if ticket.action else None,
        "assigned_to_name": user_names.get(ticket.assigned_to_id),
    })


def generate_ticket_number(db: Session, tenant_id: UUID) -> str:
    # soft deleted tickets keep their numbers
    count = db.query(func.count(Ticket.id)).filter(Ticket.tenant_id == tenant_id).scalar() or 0
    return f"TKT-{count + 1:06d}"


def validate_ticket_hierarchy(
    db: Session,
    tenant_id: UUID,
    category_id: Optional[UUID],
    subcategory_id: Optional[UUID],
    action_id: Optional[UUID],
):
    """Category, subcategory and action must exist, be active and chain together."""
    if subcategory_id and not category_id:
        return error_response(
            message="A subcategory requires a category",
            status_code=str(AppStatusCode.INVALID_REFERENCE)
        )
    if action_id and not subcategory_id:
        return error_response(
            message="An action requires a subcategory",
            status_code=str(AppStatusCode.INVALID_REFERENCE)
        )

    if category_id:
        category = db.query(TicketCategory).filter(
            TicketCategory.id == category_id,
            TicketCategory.tenant_id == tenant_id,
            TicketCategory.active == True
        ).first()
        if not category:
            return error_response(
                message="Category does not exist or is inactive",
                status_code=str(AppStatusCode.INVALID_REFERENCE)
            )

    if subcategory_id:
        subcategory = db.query(TicketSubcategory).filter(
            TicketSubcategory.id == subcategory_id,
            TicketSubcategory.tenant_id == tenant_id,
            TicketSubcategory.active == True
        ).first()
        if not subcategory or subcategory.category_id != category_id:
            return error_response(
                message="Subcategory does not belong to the selected category",
                status_code=str(AppStatusCode.INVALID_REFERENCE)
            )

    if action_id:
        action = db.query(TicketAction).filter(
            TicketAction.id == action_id,
            TicketAction.tenant_id == tenant_id,
            TicketAction.active == True
        ).first()
        if not action or action.subcategory_id != subcategory_id:
            return error_response(
                message="Action does not belong to the selected subcategory",
                status_code=str(AppStatusCode.INVALID_REFERENCE)
            )


def validate_assignee(public_db: Session, tenant_id: UUID, user_id: Optional[UUID]):
    if not user_id:
        return None

    user = public_db.query(Users).filter(
        Users.id == user_id,
        Users.tenant_id == tenant_id,
        Users.is_active == True
    ).first()
    if not user:
        return error_response(
            message="Assignee must be an active user of this tenant",
            status_code=str(AppStatusCode.INVALID_REFERENCE)
        )
    return user


def _apply_resolution_date(ticket: Ticket, new_status: TicketStatus):
    if new_status in FINISHED_STATUSES:
        if not ticket.resolution_date:
            ticket.resolution_date = datetime.now(timezone.utc)
    else:
        ticket.resolution_date = None


# ---------------- Build Filters ----------------
def build_ticket_filters(tenant_id: UUID, params: TicketRequest):
    filters = [
        Ticket.tenant_id == tenant_id,
        Ticket.is_active == True
    ]

    if params.status and params.status.lower() != "all":
        filters.append(Ticket.status == TicketStatus(params.status.lower()))

    if params.priority and params.priority.lower() != "all":
        filters.append(Ticket.priority == TicketPriority(params.priority.lower()))

    if params.assigned_to_id:
        filters.append(Ticket.assigned_to_id == params.assigned_to_id)

    if params.company_id:
        filters.append(Ticket.company_id == params.company_id)

    if params.category_id:
        filters.append(Ticket.category_id == params.category_id)

    if params.customer_id:
        filters.append(Ticket.customer_id == params.customer_id)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            Ticket.ticket_number.ilike(search_term),
            Ticket.title.ilike(search_term),
            Ticket.description.ilike(search_term)
        ))

    return filters


def _validate_list_params(params: TicketRequest):
    try:
        if params.status and params.status.lower() != "all":
            TicketStatus(params.status.lower())
        if params.priority and params.priority.lower() != "all":
            TicketPriority(params.priority.lower())
    except ValueError as e:
        return error_response(message=str(e), status_code=str(AppStatusCode.INVALID_INPUT))


def _with_relations(query):
    return query.options(
        joinedload(Ticket.category),
        joinedload(Ticket.subcategory),
        joinedload(Ticket.action),
    )


# ---------------- Get All ----------------
def get_tickets(db: Session, tenant_id: UUID, params: TicketRequest) -> TicketListResponse:
    _validate_list_params(params)
    filters = build_ticket_filters(tenant_id, params)

    base_query = db.query(Ticket).filter(*filters)
    total = base_query.count()

    tickets = (
        _with_relations(base_query)
        .order_by(Ticket.created_at.desc(), Ticket.ticket_number.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )

    user_names = get_user_names_bulk(t.assigned_to_id for t in tickets)
    return {
        "tickets": [ticket_to_out(t, user_names) for t in tickets],
        "total": total
    }


def get_urgent_tickets(db: Session, tenant_id: UUID, limit: int = 50) -> TicketListResponse:
    base_query = db.query(Ticket).filter(
        Ticket.tenant_id == tenant_id,
        Ticket.is_active == True,
        Ticket.priority.in_(list(URGENT_PRIORITIES)),
        Ticket.status.in_(list(OPEN_STATUSES))
    )
    total = base_query.count()

    tickets = (
        _with_relations(base_query)
        .order_by(
            Ticket.due_date.is_(None),
            Ticket.due_date.asc(),
            Ticket.created_at.desc()
        )
        .limit(limit)
        .all()
    )

    user_names = get_user_names_bulk(t.assigned_to_id for t in tickets)
    return {
        "tickets": [ticket_to_out(t, user_names) for t in tickets],
        "total": total
    }


# ---------------- Get By ID ----------------
def get_ticket_by_id(db: Session, tenant_id: UUID, ticket_id: UUID) -> Optional[Ticket]:
    return db.query(Ticket).filter(
        Ticket.id == ticket_id,
        Ticket.tenant_id == tenant_id,
        Ticket.is_active == True
    ).first()


def get_ticket(db: Session, tenant_id: UUID, ticket_id: UUID) -> TicketOut:
    ticket = get_ticket_by_id(db, tenant_id, ticket_id)
    if not ticket:
        return not_found_response("Ticket")
    return ticket_to_out(ticket)


# ---------------- Create ----------------
def create_ticket(
    db: Session,
    public_db: Session,
    tenant_id: UUID,
    ticket: TicketCreate,
    current_user: UserToken,
    audit: Optional[dict] = None,
) -> TicketOut:
    validate_ticket_hierarchy(db, tenant_id, ticket.category_id, ticket.subcategory_id, ticket.action_id)
    validate_assignee(public_db, tenant_id, ticket.assigned_to_id)

    db_ticket = Ticket(
        **ticket.model_dump(),
        tenant_id=tenant_id,
        ticket_number=generate_ticket_number(db, tenant_id),
        created_by_id=UUID(current_user.user_id),
        updated_by_id=UUID(current_user.user_id),
    )
    if db_ticket.status in FINISHED_STATUSES:
        db_ticket.resolution_date = datetime.now(timezone.utc)

    db.add(db_ticket)
    db.flush()

    history.record_history(
        db, db_ticket,
        action_type=TicketHistoryAction.CREATED,
        description=f"Ticket {db_ticket.ticket_number} created",
        current_user=current_user,
        audit=audit,
        context={"status": db_ticket.status.value, "priority": db_ticket.priority.value},
    )

    db.commit()
    db.refresh(db_ticket)
    logger.info("Ticket %s created in tenant %s", db_ticket.ticket_number, tenant_id)
    return ticket_to_out(db_ticket)


# ---------------- Update ----------------
def update_ticket(
    db: Session,
    public_db: Session,
    tenant_id: UUID,
    ticket_id: UUID,
    ticket: TicketUpdate,
    current_user: UserToken,
    audit: Optional[dict] = None,
) -> TicketOut:
    db_ticket = get_ticket_by_id(db, tenant_id, ticket_id)
    if not db_ticket:
        return not_found_response("Ticket")

    update_data = ticket.model_dump(exclude_unset=True)

    # required columns cannot be cleared
    for field in ("title", "status", "priority", "tags", "custom_fields"):
        if field in update_data and update_data[field] is None:
            return error_response(
                message=f"'{field}' cannot be empty",
                status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR)
            )

    if any(field in update_data for field in HIERARCHY_FIELDS):
        merged = {field: update_data.get(field, getattr(db_ticket, field)) for field in HIERARCHY_FIELDS}
        validate_ticket_hierarchy(db, tenant_id, **merged)

    if "assigned_to_id" in update_data:
        validate_assignee(public_db, tenant_id, update_data["assigned_to_id"])

    old_values = {field: getattr(db_ticket, field) for field in update_data}
    changes = history.diff_ticket_fields(old_values, update_data)

    if not changes:
        return ticket_to_out(db_ticket)

    changed_fields = [field for field, _, _ in changes]
    for field, _, new_value in changes:
        setattr(db_ticket, field, new_value)
    if "status" in changed_fields:
        _apply_resolution_date(db_ticket, db_ticket.status)
    db_ticket.updated_by_id = UUID(current_user.user_id)

    history.record_field_changes(db, db_ticket, changes, current_user, audit)

    db.commit()
    db.refresh(db_ticket)
    logger.info("Ticket %s updated (%s)", db_ticket.ticket_number, ", ".join(changed_fields))
    return ticket_to_out(db_ticket)


# ---------------- Status ----------------
def change_ticket_status(
    db: Session,
    tenant_id: UUID,
    ticket_id: UUID,
    body: TicketStatusUpdate,
    current_user: UserToken,
    audit: Optional[dict] = None,
) -> TicketOut:
    db_ticket = get_ticket_by_id(db, tenant_id, ticket_id)
    if not db_ticket:
        return not_found_response("Ticket")

    if db_ticket.status == body.status:
        return error_response(
            message=f"Ticket is already {body.status.value}",
            status_code=str(AppStatusCode.OPERATION_ERROR)
        )

    old_status = db_ticket.status
    db_ticket.status = body.status
    _apply_resolution_date(db_ticket, body.status)
    db_ticket.updated_by_id = UUID(current_user.user_id)

    history.record_history(
        db, db_ticket,
        action_type=TicketHistoryAction.STATUS_CHANGED,
        description=history.describe_change("status", old_status, body.status),
        current_user=current_user,
        audit=audit,
        field_name="status",
        old_value=old_status,
        new_value=body.status,
        context={"comment": body.comment} if body.comment else None,
    )

    db.commit()
    db.refresh(db_ticket)
    return ticket_to_out(db_ticket)


# ---------------- Assign ----------------
def assign_ticket(
    db: Session,
    public_db: Session,
    tenant_id: UUID,
    ticket_id: UUID,
    body: TicketAssign,
    current_user: UserToken,
    audit: Optional[dict] = None,
) -> TicketOut:
    db_ticket = get_ticket_by_id(db, tenant_id, ticket_id)
    if not db_ticket:
        return not_found_response("Ticket")

    assignee = validate_assignee(public_db, tenant_id, body.assigned_to_id)

    if db_ticket.assigned_to_id == body.assigned_to_id:
        return error_response(
            message="Ticket is already assigned to this user",
            status_code=str(AppStatusCode.OPERATION_ERROR)
        )

    old_assignee = db_ticket.assigned_to_id
    names = get_user_names_bulk([old_assignee])
    db_ticket.assigned_to_id = body.assigned_to_id
    db_ticket.updated_by_id = UUID(current_user.user_id)

    if assignee:
        description = f"Ticket assigned to {assignee.full_name}"
    else:
        description = "Ticket unassigned"

    context = {
        "previous_assignee_name": names.get(old_assignee),
        "assignee_name": assignee.full_name if assignee else None,
    }
    if body.comment:
        context["comment"] = body.comment

    history.record_history(
        db, db_ticket,
        action_type=TicketHistoryAction.ASSIGNED,
        description=description,
        current_user=current_user,
        audit=audit,
        field_name="assigned_to_id",
        old_value=old_assignee,
        new_value=body.assigned_to_id,
        context=context,
    )

    db.commit()
    db.refresh(db_ticket)
    return ticket_to_out(db_ticket)


# ---------------- Soft Delete ----------------
def delete_ticket_soft(
    db: Session,
    tenant_id: UUID,
    ticket_id: UUID,
    current_user: UserToken,
    audit: Optional[dict] = None,
):
    db_ticket = get_ticket_by_id(db, tenant_id, ticket_id)
    if not db_ticket:
        return not_found_response("Ticket")

    db_ticket.is_active = False
    db_ticket.updated_by_id = UUID(current_user.user_id)

    history.record_history(
        db, db_ticket,
        action_type=TicketHistoryAction.DELETED,
        description=f"Ticket {db_ticket.ticket_number} deleted",
        current_user=current_user,
        audit=audit,
    )
    db.commit()

    logger.info("Ticket %s deleted in tenant %s", db_ticket.ticket_number, tenant_id)
    return {"id": db_ticket.id, "deleted": True}


# ---------------- Lookups ----------------
def status_lookup() -> List[Lookup]:
    return [
        Lookup(id=status.value, name=status.value.replace("_", " ").capitalize())
        for status in TicketStatus
    ]


def priority_lookup() -> List[Lookup]:
    return [
        Lookup(id=priority.value, name=priority.value.capitalize())
        for priority in TicketPriority
    ]
