# crud/tickets/ticket_history_crud.py
import json
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from fastapi import Request
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found_response
from ...enum.ticket_enum import TicketHistoryAction
from ...models.tickets.ticket_history import TicketHistory
from ...models.tickets.tickets import Ticket
from ...schemas.tickets.tickets_schemas import TicketHistoryListResponse, TicketHistoryOut

# Bookkeeping columns never reported as user changes
HISTORY_IGNORED_FIELDS = {
    "id",
    "tenant_id",
    "ticket_number",
    "created_at",
    "updated_at",
    "created_by_id",
    "updated_by_id",
}

FIELD_LABELS = {
    "assigned_to_id": "assignee",
    "category_id": "category",
    "subcategory_id": "subcategory",
    "action_id": "action",
    "due_date": "due date",
    "custom_fields": "custom fields",
}


def _normalize(value: Any):
    """Comparable form of a ticket value. ``None`` and blank strings are equal."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        try:
            return Decimal(str(value)).normalize()
        except InvalidOperation:
            return value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        # sqlite hands back naive timestamps
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True, default=str)
    return value


def serialize_history_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, dict, bool)):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def diff_ticket_fields(old: Dict[str, Any], new: Dict[str, Any]) -> List[Tuple[str, Any, Any]]:
    """(field, old, new) for every key of ``new`` whose value really changed."""
    changes = []
    for field, new_value in new.items():
        if field in HISTORY_IGNORED_FIELDS:
            continue
        old_value = old.get(field)
        if _normalize(old_value) != _normalize(new_value):
            changes.append((field, old_value, new_value))
    return changes


def describe_change(field: str, old_value: Any, new_value: Any) -> str:
    label = FIELD_LABELS.get(field, field.replace("_", " "))
    old_text = serialize_history_value(old_value)
    new_text = serialize_history_value(new_value)

    if old_text is None:
        return f"{label.capitalize()} set to '{new_text}'"
    if new_text is None:
        return f"{label.capitalize()} cleared (was '{old_text}')"
    return f"{label.capitalize()} changed from '{old_text}' to '{new_text}'"


def request_audit_info(request: Optional[Request]) -> Dict[str, Optional[str]]:
    if request is None:
        return {"ip_address": None, "user_agent": None}

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None

    return {
        "ip_address": ip_address,
        "user_agent": request.headers.get("user-agent"),
    }


# ---------------- Record ----------------
def record_history(
    db: Session,
    ticket: Ticket,
    action_type: TicketHistoryAction,
    description: str,
    current_user: UserToken,
    audit: Optional[Dict[str, Optional[str]]] = None,
    field_name: Optional[str] = None,
    old_value: Any = None,
    new_value: Any = None,
    context: Optional[Dict[str, Any]] = None,
) -> TicketHistory:
    """Adds one history row; the caller commits it together with the change."""
    audit = audit or {}
    entry = TicketHistory(
        tenant_id=ticket.tenant_id,
        ticket_id=ticket.id,
        action_type=action_type,
        description=description,
        field_name=field_name,
        old_value=serialize_history_value(old_value),
        new_value=serialize_history_value(new_value),
        performed_by=UUID(current_user.user_id),
        performed_by_name=current_user.name or current_user.email,
        ip_address=audit.get("ip_address"),
        user_agent=audit.get("user_agent"),
        context=context or {},
    )
    db.add(entry)
    return entry


def record_field_changes(
    db: Session,
    ticket: Ticket,
    changes: List[Tuple[str, Any, Any]],
    current_user: UserToken,
    audit: Optional[Dict[str, Optional[str]]] = None,
) -> List[TicketHistory]:
    return [
        record_history(
            db, ticket,
            action_type=TicketHistoryAction.FIELD_UPDATED,
            description=describe_change(field, old_value, new_value),
            current_user=current_user,
            audit=audit,
            field_name=field,
            old_value=old_value,
            new_value=new_value,
        )
        for field, old_value, new_value in changes
    ]


# ---------------- Get ----------------
def get_ticket_history(db: Session, tenant_id: UUID, ticket_id: UUID) -> TicketHistoryListResponse:
    # deleted tickets keep a readable trail
    exists = db.query(Ticket.id).filter(
        Ticket.id == ticket_id,
        Ticket.tenant_id == tenant_id
    ).first()
    if not exists:
        return not_found_response("Ticket")

    rows = (
        db.query(TicketHistory)
        .filter(
            TicketHistory.ticket_id == ticket_id,
            TicketHistory.tenant_id == tenant_id
        )
        .order_by(TicketHistory.created_at.desc())
        .all()
    )

    return {
        "history": [TicketHistoryOut.model_validate(row) for row in rows],
        "total": len(rows)
    }
