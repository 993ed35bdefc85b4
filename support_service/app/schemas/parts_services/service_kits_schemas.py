from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class ServiceKitItemCreate(EmptyStringModel):
    item_id: UUID
    quantity: Decimal = Field(Decimal("1"), gt=0)
    is_optional: bool = False
    notes: Optional[str] = None


class ServiceKitItemOut(BaseModel):
    id: UUID
    item_id: UUID
    item_name: Optional[str] = None
    item_code: Optional[str] = None
    quantity: float
    unit_cost: Optional[float] = None
    is_optional: bool
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class ServiceKitCreate(EmptyStringModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None
    service_type: Optional[str] = None
    equipment_type: Optional[str] = None
    equipment_model: Optional[str] = None
    equipment_brand: Optional[str] = None
    maintenance_interval_days: Optional[int] = Field(None, gt=0)
    estimated_time_minutes: Optional[int] = Field(None, ge=0)
    estimated_cost: Optional[Decimal] = Field(None, ge=0)
    items: List[ServiceKitItemCreate] = Field(default_factory=list)


class ServiceKitUpdate(EmptyStringModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    service_type: Optional[str] = None
    equipment_type: Optional[str] = None
    equipment_model: Optional[str] = None
    equipment_brand: Optional[str] = None
    maintenance_interval_days: Optional[int] = Field(None, gt=0)
    estimated_time_minutes: Optional[int] = Field(None, ge=0)
    estimated_cost: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ServiceKitOut(BaseModel):
    id: UUID
    code: str
    name: str
    description: Optional[str] = None
    service_type: Optional[str] = None
    equipment_type: Optional[str] = None
    equipment_model: Optional[str] = None
    equipment_brand: Optional[str] = None
    maintenance_interval_days: Optional[int] = None
    estimated_time_minutes: Optional[int] = None
    estimated_cost: Optional[float] = None
    is_active: bool
    item_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceKitDetailOut(ServiceKitOut):
    items: List[ServiceKitItemOut] = []
    estimated_material_cost: float = 0


class ServiceKitListResponse(BaseModel):
    service_kits: List[ServiceKitOut]
    total: int


class ServiceKitRequest(CommonQueryParams):
    service_type: Optional[str] = None
    active: Optional[str] = None
