from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.parts_services_enum import LocationType, MovementType


# ---------------- Warehouses ----------------
class WarehouseCreate(EmptyStringModel):
    name: str = Field(..., min_length=2, max_length=255)
    code: str = Field(..., min_length=1, max_length=50)
    location_type: LocationType = LocationType.WAREHOUSE
    address: Dict[str, Any] = Field(default_factory=dict)
    capacity: Optional[Decimal] = Field(None, ge=0)
    allow_negative_stock: bool = False


class WarehouseUpdate(EmptyStringModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    location_type: Optional[LocationType] = None
    address: Optional[Dict[str, Any]] = None
    capacity: Optional[Decimal] = Field(None, ge=0)
    allow_negative_stock: Optional[bool] = None
    is_active: Optional[bool] = None


class WarehouseOut(BaseModel):
    id: UUID
    name: str
    code: str
    location_type: LocationType
    address: Dict[str, Any] = {}
    capacity: Optional[float] = None
    allow_negative_stock: bool
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WarehouseListResponse(BaseModel):
    warehouses: List[WarehouseOut]
    total: int


# ---------------- Stock levels ----------------
class StockItemUpdate(EmptyStringModel):
    minimum_stock: Optional[Decimal] = Field(None, ge=0)
    maximum_stock: Optional[Decimal] = Field(None, ge=0)
    reorder_point: Optional[Decimal] = Field(None, ge=0)
    reserved_quantity: Optional[Decimal] = Field(None, ge=0)


class StockItemOut(BaseModel):
    id: UUID
    item_id: UUID
    item_name: Optional[str] = None
    item_code: Optional[str] = None
    warehouse_id: UUID
    warehouse_name: Optional[str] = None
    current_quantity: float
    reserved_quantity: float
    available_quantity: float
    minimum_stock: Optional[float] = None
    maximum_stock: Optional[float] = None
    reorder_point: Optional[float] = None
    average_cost: Optional[float] = None
    is_low_stock: bool = False
    last_movement_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class StockListResponse(BaseModel):
    stock: List[StockItemOut]
    total: int


class StockRequest(CommonQueryParams):
    warehouse_id: Optional[UUID] = None
    item_id: Optional[UUID] = None
    low_stock: Optional[bool] = None


# ---------------- Movements ----------------
class StockMovementCreate(EmptyStringModel):
    movement_type: MovementType
    item_id: UUID
    # adjustment sets the level to this quantity
    quantity: Decimal = Field(..., ge=0)
    from_warehouse_id: Optional[UUID] = None
    to_warehouse_id: Optional[UUID] = None
    unit_cost: Optional[Decimal] = Field(None, ge=0)
    reference_type: Optional[str] = Field(None, max_length=50)
    reference_id: Optional[UUID] = None
    reference_number: Optional[str] = Field(None, max_length=100)
    reason: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class StockMovementOut(BaseModel):
    id: UUID
    movement_number: str
    movement_type: MovementType
    item_id: UUID
    item_name: Optional[str] = None
    from_warehouse_id: Optional[UUID] = None
    to_warehouse_id: Optional[UUID] = None
    quantity: float
    unit_cost: Optional[float] = None
    total_cost: Optional[float] = None
    reference_type: Optional[str] = None
    reference_id: Optional[UUID] = None
    reference_number: Optional[str] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_by_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StockMovementResult(BaseModel):
    movement: StockMovementOut
    stock_levels: List[StockItemOut]


class StockMovementListResponse(BaseModel):
    movements: List[StockMovementOut]
    total: int


class StockMovementRequest(CommonQueryParams):
    item_id: Optional[UUID] = None
    warehouse_id: Optional[UUID] = None
    movement_type: Optional[str] = None


class PartsServicesDashboard(BaseModel):
    total_items: int
    materials: int
    services: int
    warehouses: int
    low_stock_positions: int
    stock_value: float
    movements_today: int
