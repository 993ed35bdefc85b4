# router/tenant_admin/tenant_admin_router.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_saas_admin, allow_tenant_admin, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import DeleteResult, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session

from ...crud.tenant_admin import tenant_settings_crud, tenants_crud
from ...schemas.tenant_admin.tenant_admin_schemas import (
    TenantAnalytics,
    TenantCreate,
    TenantCreateResult,
    TenantListResponse,
    TenantOut,
    TenantRequest,
    TenantSettingsOut,
    TenantSettingsUpdate,
    TenantUpdate,
    TenantUserCreate,
    TenantUserCreated,
    TenantUserListResponse,
    TenantUserOut,
    TenantUserRequest,
    TenantUserUpdate,
)

router = APIRouter(
    prefix="/api/tenant-admin",
    tags=["Tenant Admin"],
    dependencies=[Depends(validate_current_token)]
)


# ---------------- Tenants (platform admin) ----------------
@router.post("/tenants", response_model=TenantCreateResult)
def create_tenant(
    payload: TenantCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_saas_admin)
):
    return tenants_crud.create_tenant(db, payload)


@router.get("/tenants", response_model=TenantListResponse)
def get_tenants(
    params: TenantRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_saas_admin)
):
    return tenants_crud.get_tenants(db, params)


@router.get("/tenants/{tenant_id}", response_model=TenantOut)
def get_tenant(
    tenant_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_saas_admin)
):
    return tenants_crud.get_tenant(db, tenant_id)


@router.put("/tenants/{tenant_id}", response_model=TenantOut)
def update_tenant(
    tenant_id: UUID,
    payload: TenantUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_saas_admin)
):
    return tenants_crud.update_tenant(db, tenant_id, payload)


@router.delete("/tenants/{tenant_id}", response_model=DeleteResult)
def deactivate_tenant(
    tenant_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_saas_admin)
):
    return tenants_crud.deactivate_tenant(db, tenant_id)


# ---------------- Own tenant (tenant admin) ----------------
@router.get("/settings", response_model=TenantSettingsOut)
def get_settings(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return tenant_settings_crud.get_settings(db, current_tenant_id(current_user))


@router.put("/settings", response_model=TenantSettingsOut)
def update_settings(
    payload: TenantSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return tenant_settings_crud.update_settings(db, current_tenant_id(current_user), payload)


@router.get("/users", response_model=TenantUserListResponse)
def get_users(
    params: TenantUserRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return tenant_settings_crud.get_users(db, current_tenant_id(current_user), params)


@router.post("/users", response_model=TenantUserCreated)
def create_user(
    payload: TenantUserCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return tenant_settings_crud.create_user(db, current_tenant_id(current_user), payload)


@router.put("/users/{user_id}", response_model=TenantUserOut)
def update_user(
    user_id: UUID,
    payload: TenantUserUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return tenant_settings_crud.update_user(db, current_tenant_id(current_user), user_id, payload, current_user)


@router.get("/analytics", response_model=TenantAnalytics)
def get_analytics(
    db: Session = Depends(get_tenant_session),
    public_db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return tenant_settings_crud.get_analytics(db, public_db, current_tenant_id(current_user))
