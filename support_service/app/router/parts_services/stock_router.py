# router/parts_services/stock_router.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.schemas import DeleteResult, Lookup, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session as get_db

from ...crud.parts_services import stock_crud as crud
from ...schemas.parts_services.stock_schemas import (
    PartsServicesDashboard,
    StockItemOut,
    StockItemUpdate,
    StockListResponse,
    StockMovementCreate,
    StockMovementListResponse,
    StockMovementRequest,
    StockMovementResult,
    StockRequest,
    WarehouseCreate,
    WarehouseListResponse,
    WarehouseOut,
    WarehouseUpdate,
)

router = APIRouter(
    prefix="/api/parts-services",
    tags=["Parts & Services - Stock"],
    dependencies=[Depends(validate_current_token)]
)


# ---------------- Warehouses ----------------
@router.get("/warehouses", response_model=WarehouseListResponse)
def get_warehouses(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_warehouses(db, current_tenant_id(current_user), include_inactive)


@router.get("/warehouses/lookup", response_model=List[Lookup])
def warehouse_lookup(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.warehouse_lookup(db, current_tenant_id(current_user))


@router.post("/warehouses", response_model=WarehouseOut)
def create_warehouse(
    warehouse: WarehouseCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_warehouse(db, current_tenant_id(current_user), warehouse)


@router.put("/warehouses/{warehouse_id}", response_model=WarehouseOut)
def update_warehouse(
    warehouse_id: UUID,
    warehouse: WarehouseUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_warehouse(db, current_tenant_id(current_user), warehouse_id, warehouse)


@router.delete("/warehouses/{warehouse_id}", response_model=DeleteResult)
def delete_warehouse(
    warehouse_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_warehouse_soft(db, current_tenant_id(current_user), warehouse_id)


# ---------------- Stock ----------------
@router.get("/stock", response_model=StockListResponse)
def get_stock(
    params: StockRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_stock(db, current_tenant_id(current_user), params)


@router.get("/stock/movements", response_model=StockMovementListResponse)
def get_movements(
    params: StockMovementRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_movements(db, current_tenant_id(current_user), params)


@router.post("/stock/movements", response_model=StockMovementResult)
def create_movement(
    movement: StockMovementCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.apply_stock_movement(db, current_tenant_id(current_user), movement, current_user)


@router.put("/stock/{stock_id}", response_model=StockItemOut)
def update_stock_item(
    stock_id: UUID,
    stock: StockItemUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_stock_item(db, current_tenant_id(current_user), stock_id, stock)


@router.get("/dashboard", response_model=PartsServicesDashboard)
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_dashboard(db, current_tenant_id(current_user))
