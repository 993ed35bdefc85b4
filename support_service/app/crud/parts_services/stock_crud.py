# crud/parts_services/stock_crud.py
import logging
from datetime import datetime, time, timezone
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.parts_services_enum import ItemType, MovementType
from ...models.parts_services.items import Item
from ...models.parts_services.stock import StockItem, StockMovement, Warehouse
from ...schemas.parts_services.stock_schemas import (
    PartsServicesDashboard,
    StockItemOut,
    StockItemUpdate,
    StockListResponse,
    StockMovementCreate,
    StockMovementListResponse,
    StockMovementOut,
    StockMovementRequest,
    StockMovementResult,
    StockRequest,
    WarehouseCreate,
    WarehouseListResponse,
    WarehouseOut,
    WarehouseUpdate,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


# ---------------- Warehouses ----------------
def get_warehouse_by_id(db: Session, tenant_id: UUID, warehouse_id: UUID) -> Optional[Warehouse]:
    return db.query(Warehouse).filter(
        Warehouse.id == warehouse_id,
        Warehouse.tenant_id == tenant_id
    ).first()


def get_warehouses(db: Session, tenant_id: UUID, include_inactive: bool = False) -> WarehouseListResponse:
    query = db.query(Warehouse).filter(Warehouse.tenant_id == tenant_id)
    if not include_inactive:
        query = query.filter(Warehouse.is_active == True)

    warehouses = query.order_by(Warehouse.name.asc()).all()
    return {
        "warehouses": [WarehouseOut.model_validate(w) for w in warehouses],
        "total": len(warehouses)
    }


def warehouse_lookup(db: Session, tenant_id: UUID) -> List[Lookup]:
    rows = db.query(Warehouse.id, Warehouse.name).filter(
        Warehouse.tenant_id == tenant_id,
        Warehouse.is_active == True
    ).order_by(Warehouse.name.asc()).all()
    return [Lookup(id=row.id, name=row.name) for row in rows]


def create_warehouse(db: Session, tenant_id: UUID, warehouse: WarehouseCreate) -> WarehouseOut:
    existing = db.query(Warehouse.id).filter(
        Warehouse.tenant_id == tenant_id,
        func.lower(Warehouse.code) == warehouse.code.lower()
    ).first()
    if existing:
        return error_response(
            message=f"Warehouse code '{warehouse.code}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    db_warehouse = Warehouse(**warehouse.model_dump(), tenant_id=tenant_id)
    db.add(db_warehouse)
    db.commit()
    db.refresh(db_warehouse)
    return WarehouseOut.model_validate(db_warehouse)


def update_warehouse(db: Session, tenant_id: UUID, warehouse_id: UUID, warehouse: WarehouseUpdate) -> WarehouseOut:
    db_warehouse = get_warehouse_by_id(db, tenant_id, warehouse_id)
    if not db_warehouse:
        return not_found_response("Warehouse")

    for key, value in warehouse.model_dump(exclude_unset=True).items():
        if value is None and key in ("name", "location_type", "address", "allow_negative_stock", "is_active"):
            continue
        setattr(db_warehouse, key, value)

    db.commit()
    db.refresh(db_warehouse)
    return WarehouseOut.model_validate(db_warehouse)


def delete_warehouse_soft(db: Session, tenant_id: UUID, warehouse_id: UUID):
    db_warehouse = get_warehouse_by_id(db, tenant_id, warehouse_id)
    if not db_warehouse or not db_warehouse.is_active:
        return not_found_response("Warehouse")

    has_stock = db.query(StockItem.id).filter(
        StockItem.warehouse_id == warehouse_id,
        StockItem.current_quantity > 0
    ).first()
    if has_stock:
        return error_response(
            message="Cannot delete a warehouse with stock on hand",
            status_code=str(AppStatusCode.DELETE_RESTRICTED)
        )

    db_warehouse.is_active = False
    db.commit()
    return {"id": warehouse_id, "deleted": True}


# ---------------- Stock levels ----------------
def stock_item_to_out(stock: StockItem) -> StockItemOut:
    return StockItemOut.model_validate({
        **stock.__dict__,
        "available_quantity": stock.available_quantity,
        "is_low_stock": stock.is_low_stock,
        "item_name": stock.item.name if stock.item else None,
        "item_code": stock.item.code if stock.item else None,
        "warehouse_name": stock.warehouse.name if stock.warehouse else None,
    })


def _low_stock_condition():
    threshold = func.coalesce(StockItem.reorder_point, StockItem.minimum_stock, 0)
    return (threshold > 0) & (StockItem.current_quantity <= threshold)


def build_stock_filters(tenant_id: UUID, params: StockRequest):
    filters = [StockItem.tenant_id == tenant_id]

    if params.warehouse_id:
        filters.append(StockItem.warehouse_id == params.warehouse_id)

    if params.item_id:
        filters.append(StockItem.item_id == params.item_id)

    if params.low_stock:
        filters.append(_low_stock_condition())

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Item.name.ilike(search_term), Item.code.ilike(search_term)))

    return filters


def get_stock(db: Session, tenant_id: UUID, params: StockRequest) -> StockListResponse:
    base_query = (
        db.query(StockItem)
        .join(Item, StockItem.item_id == Item.id)
        .filter(*build_stock_filters(tenant_id, params))
    )
    total = base_query.count()

    stock = (
        base_query
        .options(joinedload(StockItem.item), joinedload(StockItem.warehouse))
        .order_by(Item.name.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {
        "stock": [stock_item_to_out(s) for s in stock],
        "total": total
    }


def update_stock_item(db: Session, tenant_id: UUID, stock_id: UUID, stock: StockItemUpdate) -> StockItemOut:
    db_stock = db.query(StockItem).filter(
        StockItem.id == stock_id,
        StockItem.tenant_id == tenant_id
    ).first()
    if not db_stock:
        return not_found_response("Stock item")

    update_data = stock.model_dump(exclude_unset=True)
    if update_data.get("reserved_quantity") is not None and update_data["reserved_quantity"] > db_stock.current_quantity:
        return error_response(
            message="Reserved quantity cannot exceed the current quantity",
            status_code=str(AppStatusCode.INVALID_INPUT)
        )

    for key, value in update_data.items():
        if value is None and key == "reserved_quantity":
            continue
        setattr(db_stock, key, value)

    db.commit()
    db.refresh(db_stock)
    return stock_item_to_out(db_stock)


# ---------------- Movements ----------------
def generate_movement_number(db: Session, tenant_id: UUID) -> str:
    count = db.query(func.count(StockMovement.id)).filter(StockMovement.tenant_id == tenant_id).scalar() or 0
    return f"MOV-{count + 1:06d}"


def _active_warehouse(db: Session, tenant_id: UUID, warehouse_id: Optional[UUID], role: str) -> Warehouse:
    if not warehouse_id:
        return error_response(
            message=f"{role} warehouse is required for this movement",
            status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR)
        )

    warehouse = get_warehouse_by_id(db, tenant_id, warehouse_id)
    if not warehouse or not warehouse.is_active:
        return not_found_response(f"{role} warehouse")
    return warehouse


def _stock_level(db: Session, tenant_id: UUID, item_id: UUID, warehouse_id: UUID) -> StockItem:
    stock = db.query(StockItem).filter(
        StockItem.item_id == item_id,
        StockItem.warehouse_id == warehouse_id
    ).first()
    if stock:
        return stock

    stock = StockItem(
        tenant_id=tenant_id,
        item_id=item_id,
        warehouse_id=warehouse_id,
        current_quantity=ZERO,
        reserved_quantity=ZERO,
        average_cost=ZERO,
    )
    db.add(stock)
    db.flush()
    return stock


def _take_from(stock: StockItem, warehouse: Warehouse, quantity: Decimal):
    remaining = Decimal(stock.current_quantity or 0) - quantity
    if remaining < 0 and not warehouse.allow_negative_stock:
        return error_response(
            message=f"Insufficient stock in '{warehouse.name}': available "
                    f"{Decimal(stock.current_quantity or 0).normalize()}, requested {quantity.normalize()}",
            status_code=str(AppStatusCode.INSUFFICIENT_STOCK)
        )
    stock.current_quantity = remaining


def _put_into(stock: StockItem, quantity: Decimal, unit_cost: Optional[Decimal]):
    current = Decimal(stock.current_quantity or 0)
    if unit_cost is not None and current + quantity > 0:
        # weighted average over what is on hand
        on_hand_value = max(current, ZERO) * Decimal(stock.average_cost or 0)
        stock.average_cost = (on_hand_value + quantity * unit_cost) / (max(current, ZERO) + quantity)
    stock.current_quantity = current + quantity


def apply_stock_movement(
    db: Session,
    tenant_id: UUID,
    movement: StockMovementCreate,
    current_user: UserToken,
) -> StockMovementResult:
    """Records the movement and updates the affected stock levels in one commit."""
    item = db.query(Item).filter(
        Item.id == movement.item_id,
        Item.tenant_id == tenant_id,
        Item.active == True
    ).first()
    if not item:
        return not_found_response("Item")
    if item.type != ItemType.MATERIAL:
        return error_response(
            message="Stock movements only apply to material items",
            status_code=str(AppStatusCode.INVALID_INPUT)
        )

    quantity = movement.quantity
    kind = movement.movement_type
    if kind != MovementType.ADJUSTMENT and quantity <= 0:
        return error_response(
            message="Quantity must be greater than zero",
            status_code=str(AppStatusCode.INVALID_INPUT)
        )

    now = datetime.now(timezone.utc)
    touched: List[StockItem] = []
    from_id, to_id = None, None

    if kind in (MovementType.IN, MovementType.RETURN):
        target = _active_warehouse(db, tenant_id, movement.to_warehouse_id, "Destination")
        stock = _stock_level(db, tenant_id, item.id, target.id)
        _put_into(stock, quantity, movement.unit_cost)
        touched.append(stock)
        to_id = target.id

    elif kind == MovementType.OUT:
        source = _active_warehouse(db, tenant_id, movement.from_warehouse_id, "Source")
        stock = _stock_level(db, tenant_id, item.id, source.id)
        _take_from(stock, source, quantity)
        touched.append(stock)
        from_id = source.id

    elif kind == MovementType.TRANSFER:
        if movement.from_warehouse_id and movement.from_warehouse_id == movement.to_warehouse_id:
            return error_response(
                message="Source and destination warehouses must be different",
                status_code=str(AppStatusCode.INVALID_INPUT)
            )
        source = _active_warehouse(db, tenant_id, movement.from_warehouse_id, "Source")
        target = _active_warehouse(db, tenant_id, movement.to_warehouse_id, "Destination")
        source_stock = _stock_level(db, tenant_id, item.id, source.id)
        target_stock = _stock_level(db, tenant_id, item.id, target.id)
        _take_from(source_stock, source, quantity)
        _put_into(target_stock, quantity, source_stock.average_cost)
        touched.extend([source_stock, target_stock])
        from_id, to_id = source.id, target.id

    elif kind == MovementType.ADJUSTMENT:
        target = _active_warehouse(
            db, tenant_id, movement.to_warehouse_id or movement.from_warehouse_id, "Adjusted")
        stock = _stock_level(db, tenant_id, item.id, target.id)
        stock.current_quantity = quantity
        if movement.unit_cost is not None:
            stock.average_cost = movement.unit_cost
        touched.append(stock)
        to_id = target.id

    for stock in touched:
        stock.last_movement_date = now

    unit_cost = movement.unit_cost
    db_movement = StockMovement(
        tenant_id=tenant_id,
        movement_number=generate_movement_number(db, tenant_id),
        movement_type=kind,
        item_id=item.id,
        from_warehouse_id=from_id,
        to_warehouse_id=to_id,
        quantity=quantity,
        unit_cost=unit_cost,
        total_cost=(quantity * unit_cost) if unit_cost is not None else None,
        reference_type=movement.reference_type,
        reference_id=movement.reference_id,
        reference_number=movement.reference_number,
        reason=movement.reason,
        notes=movement.notes,
        created_by_id=UUID(current_user.user_id),
        created_at=now,
    )
    db.add(db_movement)
    db.commit()

    db.refresh(db_movement)
    for stock in touched:
        db.refresh(stock)

    logger.info("Stock movement %s (%s) applied to item %s", db_movement.movement_number, kind.value, item.code)
    return {
        "movement": movement_to_out(db_movement),
        "stock_levels": [stock_item_to_out(s) for s in touched],
    }


def movement_to_out(movement: StockMovement) -> StockMovementOut:
    return StockMovementOut.model_validate({
        **movement.__dict__,
        "item_name": movement.item.name if movement.item else None,
    })


def get_movements(db: Session, tenant_id: UUID, params: StockMovementRequest) -> StockMovementListResponse:
    filters = [StockMovement.tenant_id == tenant_id]

    if params.item_id:
        filters.append(StockMovement.item_id == params.item_id)

    if params.warehouse_id:
        filters.append(or_(
            StockMovement.from_warehouse_id == params.warehouse_id,
            StockMovement.to_warehouse_id == params.warehouse_id
        ))

    if params.movement_type and params.movement_type.lower() != "all":
        try:
            filters.append(StockMovement.movement_type == MovementType(params.movement_type.lower()))
        except ValueError as e:
            return error_response(message=str(e), status_code=str(AppStatusCode.INVALID_INPUT))

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            StockMovement.movement_number.ilike(search_term),
            StockMovement.reference_number.ilike(search_term)
        ))

    base_query = db.query(StockMovement).filter(*filters)
    total = base_query.count()

    movements = (
        base_query
        .options(joinedload(StockMovement.item))
        .order_by(StockMovement.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {
        "movements": [movement_to_out(m) for m in movements],
        "total": total
    }


# ---------------- Dashboard ----------------
def get_dashboard(db: Session, tenant_id: UUID) -> PartsServicesDashboard:
    type_counts: Dict[ItemType, int] = dict(
        db.query(Item.type, func.count(Item.id))
        .filter(Item.tenant_id == tenant_id, Item.active == True)
        .group_by(Item.type)
        .all()
    )

    warehouses = db.query(func.count(Warehouse.id)).filter(
        Warehouse.tenant_id == tenant_id,
        Warehouse.is_active == True
    ).scalar() or 0

    low_stock = db.query(func.count(StockItem.id)).filter(
        StockItem.tenant_id == tenant_id,
        _low_stock_condition()
    ).scalar() or 0

    stock_value = db.query(
        func.coalesce(func.sum(StockItem.current_quantity * StockItem.average_cost), 0)
    ).filter(
        StockItem.tenant_id == tenant_id,
        StockItem.current_quantity > 0
    ).scalar() or 0

    start_of_day = datetime.combine(datetime.now(timezone.utc).date(), time.min, tzinfo=timezone.utc)
    movements_today = db.query(func.count(StockMovement.id)).filter(
        StockMovement.tenant_id == tenant_id,
        StockMovement.created_at >= start_of_day
    ).scalar() or 0

    materials = type_counts.get(ItemType.MATERIAL, 0)
    services = type_counts.get(ItemType.SERVICE, 0)
    return {
        "total_items": materials + services,
        "materials": materials,
        "services": services,
        "warehouses": warehouses,
        "low_stock_positions": low_stock,
        "stock_value": round(float(stock_value), 2),
        "movements_today": movements_today,
    }
