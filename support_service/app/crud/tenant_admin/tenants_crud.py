# crud/tenant_admin/tenants_crud.py
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.tenancy import drop_tenant_schema, get_tenant_db, provision_tenant_schema
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.helpers.password_generator import generate_temporary_password
from shared.models.tenants import Tenant
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole
from ...schemas.tenant_admin.tenant_admin_schemas import (
    TenantCreate,
    TenantCreateResult,
    TenantListResponse,
    TenantOut,
    TenantRequest,
    TenantUpdate,
    TenantUserCreated,
)
from ..tickets.ticket_hierarchy_crud import seed_default_hierarchy

logger = logging.getLogger(__name__)


def tenant_to_out(db: Session, tenant: Tenant) -> TenantOut:
    user_count = db.query(func.count(Users.id)).filter(Users.tenant_id == tenant.id).scalar() or 0
    return TenantOut.model_validate({
        **tenant.__dict__,
        "schema_name": tenant.schema_name,
        "user_count": user_count,
    })


def get_tenants(db: Session, params: TenantRequest) -> TenantListResponse:
    query = db.query(Tenant)

    if params.active and params.active.lower() != "all":
        query = query.filter(Tenant.is_active == (params.active.lower() == "true"))

    if params.search:
        search_term = f"%{params.search}%"
        query = query.filter(or_(Tenant.name.ilike(search_term), Tenant.subdomain.ilike(search_term)))

    total = query.count()
    tenants = query.order_by(Tenant.name.asc()).offset(params.skip).limit(params.limit).all()

    return {
        "tenants": [tenant_to_out(db, t) for t in tenants],
        "total": total
    }


def get_tenant_by_id(db: Session, tenant_id: UUID) -> Optional[Tenant]:
    return db.query(Tenant).filter(Tenant.id == tenant_id).first()


def get_tenant(db: Session, tenant_id: UUID) -> TenantOut:
    tenant = get_tenant_by_id(db, tenant_id)
    if not tenant:
        return not_found_response("Tenant")
    return tenant_to_out(db, tenant)


def create_tenant(db: Session, payload: TenantCreate) -> TenantCreateResult:
    """Creates the tenant row, provisions its schema, seeds the default
    ticket hierarchy and adds the first tenant admin.

    Any failure after the row is committed removes the row and the schema
    again, so a half-provisioned tenant never stays behind.
    """
    subdomain = payload.subdomain.lower()
    admin_email = payload.admin_email.lower()

    if db.query(Tenant.id).filter(Tenant.subdomain == subdomain).first():
        return error_response(
            message=f"Subdomain '{subdomain}' is already taken",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    if db.query(Users.id).filter(Users.email == admin_email).first():
        return error_response(
            message=f"A user with email '{admin_email}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    tenant = Tenant(name=payload.name, subdomain=subdomain, settings=payload.settings or {})
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    tenant_id = tenant.id

    try:
        provision_tenant_schema(tenant_id)

        if payload.seed_default_hierarchy:
            tenant_db = get_tenant_db(tenant_id)
            try:
                seed_default_hierarchy(tenant_db, tenant_id)
            finally:
                tenant_db.close()

        temporary_password = None if payload.admin_password else generate_temporary_password()
        admin = Users(
            tenant_id=tenant_id,
            email=admin_email,
            first_name=payload.admin_first_name,
            last_name=payload.admin_last_name,
            role=UserRole.TENANT_ADMIN,
            is_active=True,
        )
        admin.set_password(payload.admin_password or temporary_password)
        db.add(admin)
        db.commit()
        db.refresh(admin)
    except Exception:
        logger.exception("Provisioning failed for tenant %s", tenant_id)
        db.rollback()
        drop_tenant_schema(tenant_id)
        db.query(Tenant).filter(Tenant.id == tenant_id).delete()
        db.commit()
        return error_response(
            message="Tenant provisioning failed",
            status_code=str(AppStatusCode.OPERATION_ERROR),
            http_status=500
        )

    logger.info("Tenant %s (%s) created with admin %s", tenant.name, tenant_id, admin.email)
    admin_out = TenantUserCreated.model_validate({
        **admin.__dict__,
        "full_name": admin.full_name,
        "temporary_password": temporary_password,
    })
    return {"tenant": tenant_to_out(db, tenant), "admin_user": admin_out}


def update_tenant(db: Session, tenant_id: UUID, payload: TenantUpdate) -> TenantOut:
    tenant = get_tenant_by_id(db, tenant_id)
    if not tenant:
        return not_found_response("Tenant")

    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(tenant, key, value)

    db.commit()
    db.refresh(tenant)
    return tenant_to_out(db, tenant)


def deactivate_tenant(db: Session, tenant_id: UUID):
    tenant = get_tenant_by_id(db, tenant_id)
    if not tenant or not tenant.is_active:
        return not_found_response("Tenant")

    tenant.is_active = False
    db.commit()
    logger.warning("Tenant %s deactivated", tenant_id)
    return {"id": tenant_id, "deleted": True}
