from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from shared.core.schemas import CommonQueryParams
from shared.utils.enums import UserRole
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

SUBDOMAIN_PATTERN = r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$"


# ---------------- Tenants ----------------
class TenantCreate(EmptyStringModel):
    name: str = Field(..., min_length=2, max_length=200)
    subdomain: str = Field(..., min_length=2, max_length=63, pattern=SUBDOMAIN_PATTERN)
    settings: Dict[str, Any] = Field(default_factory=dict)
    admin_email: EmailStr
    admin_first_name: str = Field(..., min_length=1, max_length=100)
    admin_last_name: Optional[str] = Field(None, max_length=100)
    admin_password: Optional[str] = Field(None, min_length=8, max_length=128)
    seed_default_hierarchy: bool = True


class TenantUpdate(EmptyStringModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    is_active: Optional[bool] = None


class TenantOut(BaseModel):
    id: UUID
    name: str
    subdomain: str
    schema_name: str
    settings: Dict[str, Any] = {}
    is_active: bool
    user_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TenantListResponse(BaseModel):
    tenants: List[TenantOut]
    total: int


class TenantRequest(CommonQueryParams):
    active: Optional[str] = None


# ---------------- Users ----------------
class TenantUserCreate(EmptyStringModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.AGENT
    password: Optional[str] = Field(None, min_length=8, max_length=128)


class TenantUserUpdate(EmptyStringModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)


class TenantUserOut(BaseModel):
    id: UUID
    tenant_id: Optional[UUID] = None
    email: str
    first_name: str
    last_name: Optional[str] = None
    full_name: str
    role: UserRole
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TenantUserCreated(TenantUserOut):
    # only set when the password was generated
    temporary_password: Optional[str] = None


class TenantUserListResponse(BaseModel):
    users: List[TenantUserOut]
    total: int


class TenantUserRequest(CommonQueryParams):
    role: Optional[str] = None
    active: Optional[str] = None


class TenantCreateResult(BaseModel):
    tenant: TenantOut
    admin_user: TenantUserCreated


# ---------------- Settings / analytics ----------------
class TenantSettingsUpdate(EmptyStringModel):
    settings: Dict[str, Any]


class TenantSettingsOut(BaseModel):
    tenant_id: UUID
    name: str
    settings: Dict[str, Any] = {}


class TenantAnalytics(BaseModel):
    tickets_total: int
    tickets_open: int
    tickets_by_status: Dict[str, int]
    tickets_by_priority: Dict[str, int]
    active_users: int
    items: int
    active_contracts: int
