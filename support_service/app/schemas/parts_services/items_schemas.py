from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.parts_services_enum import ItemStatus, ItemType, MeasurementUnit


class ItemBase(EmptyStringModel):
    name: str = Field(..., min_length=2, max_length=255)
    code: str = Field(..., min_length=1, max_length=100)
    type: ItemType
    integration_code: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    measurement_unit: MeasurementUnit = MeasurementUnit.UN
    group_name: Optional[str] = None
    maintenance_plan: Optional[str] = None
    default_checklist: Optional[str] = None
    cost_price: Decimal = Field(Decimal("0"), ge=0)
    sale_price: Decimal = Field(Decimal("0"), ge=0)
    minimum_stock: Decimal = Field(Decimal("0"), ge=0)
    maximum_stock: Optional[Decimal] = Field(None, ge=0)
    reorder_point: Optional[Decimal] = Field(None, ge=0)
    status: ItemStatus = ItemStatus.ACTIVE

    @model_validator(mode="after")
    def check_stock_bounds(self):
        if self.maximum_stock is not None and self.maximum_stock < self.minimum_stock:
            raise ValueError("maximum_stock must be greater than or equal to minimum_stock")
        return self


class ItemCreate(ItemBase):
    pass


class ItemUpdate(EmptyStringModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    code: Optional[str] = Field(None, min_length=1, max_length=100)
    integration_code: Optional[str] = None
    description: Optional[str] = None
    measurement_unit: Optional[MeasurementUnit] = None
    group_name: Optional[str] = None
    maintenance_plan: Optional[str] = None
    default_checklist: Optional[str] = None
    cost_price: Optional[Decimal] = Field(None, ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    minimum_stock: Optional[Decimal] = Field(None, ge=0)
    maximum_stock: Optional[Decimal] = Field(None, ge=0)
    reorder_point: Optional[Decimal] = Field(None, ge=0)
    status: Optional[ItemStatus] = None
    active: Optional[bool] = None


class ItemOut(BaseModel):
    id: UUID
    name: str
    code: str
    type: ItemType
    integration_code: Optional[str] = None
    description: Optional[str] = None
    measurement_unit: MeasurementUnit
    group_name: Optional[str] = None
    maintenance_plan: Optional[str] = None
    default_checklist: Optional[str] = None
    cost_price: Optional[float] = None
    sale_price: Optional[float] = None
    minimum_stock: Optional[float] = None
    maximum_stock: Optional[float] = None
    reorder_point: Optional[float] = None
    status: ItemStatus
    active: bool
    total_stock: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemListResponse(BaseModel):
    items: List[ItemOut]
    total: int


class ItemRequest(CommonQueryParams):
    type: Optional[str] = None
    status: Optional[str] = None
    active: Optional[str] = None
    group_name: Optional[str] = None


# ---------------- Links ----------------
class ItemLinkCreate(EmptyStringModel):
    linked_item_id: UUID
    link_type: str = Field("related", max_length=50)
    quantity: Decimal = Field(Decimal("1"), gt=0)
    notes: Optional[str] = None


class ItemLinkOut(BaseModel):
    id: UUID
    parent_item_id: UUID
    linked_item_id: UUID
    linked_item_name: Optional[str] = None
    linked_item_code: Optional[str] = None
    link_type: str
    quantity: Optional[float] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemCustomerLinkCreate(EmptyStringModel):
    customer_id: UUID
    customer_item_code: Optional[str] = Field(None, max_length=100)
    customer_item_name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    internal_code: Optional[str] = Field(None, max_length=100)
    special_price: Optional[Decimal] = Field(None, ge=0)
    discount_percent: Optional[Decimal] = Field(None, ge=0, le=100)


class ItemCustomerLinkUpdate(EmptyStringModel):
    customer_item_code: Optional[str] = Field(None, max_length=100)
    customer_item_name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    internal_code: Optional[str] = Field(None, max_length=100)
    special_price: Optional[Decimal] = Field(None, ge=0)
    discount_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None


class ItemCustomerLinkOut(BaseModel):
    id: UUID
    item_id: UUID
    customer_id: UUID
    customer_item_code: Optional[str] = None
    customer_item_name: Optional[str] = None
    description: Optional[str] = None
    internal_code: Optional[str] = None
    special_price: Optional[float] = None
    discount_percent: Optional[float] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemSupplierLinkCreate(EmptyStringModel):
    supplier_id: UUID
    part_number: Optional[str] = Field(None, max_length=100)
    supplier_description: Optional[str] = None
    quality_code: Optional[str] = Field(None, max_length=50)
    barcode: Optional[str] = Field(None, max_length=100)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    lead_time_days: Optional[int] = Field(None, ge=0)
    is_preferred: bool = False


class ItemSupplierLinkUpdate(EmptyStringModel):
    part_number: Optional[str] = Field(None, max_length=100)
    supplier_description: Optional[str] = None
    quality_code: Optional[str] = Field(None, max_length=50)
    barcode: Optional[str] = Field(None, max_length=100)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    lead_time_days: Optional[int] = Field(None, ge=0)
    is_preferred: Optional[bool] = None
    is_active: Optional[bool] = None


class ItemSupplierLinkOut(BaseModel):
    id: UUID
    item_id: UUID
    supplier_id: UUID
    part_number: Optional[str] = None
    supplier_description: Optional[str] = None
    quality_code: Optional[str] = None
    barcode: Optional[str] = None
    unit_price: Optional[float] = None
    lead_time_days: Optional[int] = None
    is_preferred: bool
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
