# crud/tenant_admin/tenant_settings_crud.py
import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.helpers.password_generator import generate_temporary_password
from shared.models.tenants import Tenant
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole
from ...enum.contract_enum import ContractStatus
from ...enum.ticket_enum import OPEN_STATUSES, TicketPriority, TicketStatus
from ...models.contracts.contracts import Contract
from ...models.parts_services.items import Item
from ...models.tickets.tickets import Ticket
from ...schemas.tenant_admin.tenant_admin_schemas import (
    TenantAnalytics,
    TenantSettingsOut,
    TenantSettingsUpdate,
    TenantUserCreate,
    TenantUserCreated,
    TenantUserListResponse,
    TenantUserOut,
    TenantUserRequest,
    TenantUserUpdate,
)

logger = logging.getLogger(__name__)


def _tenant_or_404(db: Session, tenant_id: UUID) -> Tenant:
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        return not_found_response("Tenant")
    return tenant


def _user_to_out(user: Users, schema=TenantUserOut, **extra):
    return schema.model_validate({**user.__dict__, "full_name": user.full_name, **extra})


# ---------------- Settings ----------------
def get_settings(db: Session, tenant_id: UUID) -> TenantSettingsOut:
    tenant = _tenant_or_404(db, tenant_id)
    return {"tenant_id": tenant.id, "name": tenant.name, "settings": tenant.settings or {}}


def update_settings(db: Session, tenant_id: UUID, payload: TenantSettingsUpdate) -> TenantSettingsOut:
    tenant = _tenant_or_404(db, tenant_id)

    # new dict so the JSON column is flagged dirty
    tenant.settings = {**(tenant.settings or {}), **payload.settings}
    db.commit()
    db.refresh(tenant)
    return {"tenant_id": tenant.id, "name": tenant.name, "settings": tenant.settings}


# ---------------- Users ----------------
def get_users(db: Session, tenant_id: UUID, params: TenantUserRequest) -> TenantUserListResponse:
    query = db.query(Users).filter(Users.tenant_id == tenant_id)

    if params.active and params.active.lower() != "all":
        query = query.filter(Users.is_active == (params.active.lower() == "true"))

    if params.role and params.role.lower() != "all":
        try:
            query = query.filter(Users.role == UserRole(params.role.lower()))
        except ValueError as e:
            return error_response(message=str(e), status_code=str(AppStatusCode.INVALID_INPUT))

    if params.search:
        search_term = f"%{params.search}%"
        query = query.filter(
            Users.email.ilike(search_term)
            | Users.first_name.ilike(search_term)
            | Users.last_name.ilike(search_term)
        )

    total = query.count()
    users = query.order_by(Users.first_name.asc()).offset(params.skip).limit(params.limit).all()
    return {"users": [_user_to_out(u) for u in users], "total": total}


def create_user(db: Session, tenant_id: UUID, payload: TenantUserCreate) -> TenantUserCreated:
    if payload.role == UserRole.SAAS_ADMIN:
        return error_response(
            message="Platform admins cannot be created inside a tenant",
            status_code=str(AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
            http_status=403
        )

    email = payload.email.lower()
    if db.query(Users.id).filter(Users.email == email).first():
        return error_response(
            message=f"A user with email '{email}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    temporary_password = None if payload.password else generate_temporary_password()
    user = Users(
        tenant_id=tenant_id,
        email=email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
        is_active=True,
    )
    user.set_password(payload.password or temporary_password)
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("User %s added to tenant %s", user.email, tenant_id)
    return _user_to_out(user, TenantUserCreated, temporary_password=temporary_password)


def update_user(
    db: Session, tenant_id: UUID, user_id: UUID, payload: TenantUserUpdate, current_user: UserToken
) -> TenantUserOut:
    user = db.query(Users).filter(Users.id == user_id, Users.tenant_id == tenant_id).first()
    if not user:
        return not_found_response("User")

    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("role") == UserRole.SAAS_ADMIN:
        return error_response(
            message="Platform admin role cannot be assigned inside a tenant",
            status_code=str(AppStatusCode.AUTHENTICATION_UNAUTHORIZED_ACCESS),
            http_status=403
        )

    if str(user.id) == current_user.user_id and update_data.get("is_active") is False:
        return error_response(
            message="You cannot deactivate your own account",
            status_code=str(AppStatusCode.OPERATION_FAILED)
        )

    password = update_data.pop("password", None)
    if password:
        user.set_password(password)

    for key, value in update_data.items():
        if value is None and key in ("first_name", "role", "is_active"):
            continue
        setattr(user, key, value)

    db.commit()
    db.refresh(user)
    return _user_to_out(user)


# ---------------- Analytics ----------------
def get_analytics(db: Session, public_db: Session, tenant_id: UUID) -> TenantAnalytics:
    ticket_filters = [Ticket.tenant_id == tenant_id, Ticket.is_active == True]

    by_status = {status.value: 0 for status in TicketStatus}
    for status, count in (
        db.query(Ticket.status, func.count(Ticket.id)).filter(*ticket_filters).group_by(Ticket.status).all()
    ):
        by_status[TicketStatus(status).value] = count

    by_priority = {priority.value: 0 for priority in TicketPriority}
    for priority, count in (
        db.query(Ticket.priority, func.count(Ticket.id)).filter(*ticket_filters).group_by(Ticket.priority).all()
    ):
        by_priority[TicketPriority(priority).value] = count

    items = db.query(func.count(Item.id)).filter(Item.tenant_id == tenant_id, Item.active == True).scalar() or 0
    active_contracts = db.query(func.count(Contract.id)).filter(
        Contract.tenant_id == tenant_id,
        Contract.is_active == True,
        Contract.status == ContractStatus.ACTIVE
    ).scalar() or 0

    active_users = public_db.query(func.count(Users.id)).filter(
        Users.tenant_id == tenant_id,
        Users.is_active == True
    ).scalar() or 0

    return {
        "tickets_total": sum(by_status.values()),
        "tickets_open": sum(by_status[s.value] for s in OPEN_STATUSES),
        "tickets_by_status": by_status,
        "tickets_by_priority": by_priority,
        "active_users": active_users,
        "items": items,
        "active_contracts": active_contracts,
    }
