# crud/parts_services/service_kits_crud.py
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...models.parts_services.items import Item
from ...models.parts_services.service_kits import ServiceKit, ServiceKitItem
from ...schemas.parts_services.service_kits_schemas import (
    ServiceKitCreate,
    ServiceKitDetailOut,
    ServiceKitItemCreate,
    ServiceKitItemOut,
    ServiceKitListResponse,
    ServiceKitOut,
    ServiceKitRequest,
    ServiceKitUpdate,
)


def build_service_kit_filters(tenant_id: UUID, params: ServiceKitRequest):
    filters = [ServiceKit.tenant_id == tenant_id]

    if params.active and params.active.lower() != "all":
        filters.append(ServiceKit.is_active == (params.active.lower() == "true"))
    elif not params.active:
        filters.append(ServiceKit.is_active == True)

    if params.service_type:
        filters.append(ServiceKit.service_type == params.service_type)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            ServiceKit.name.ilike(search_term),
            ServiceKit.code.ilike(search_term),
            ServiceKit.equipment_model.ilike(search_term)
        ))

    return filters


def _kit_item_to_out(kit_item: ServiceKitItem) -> ServiceKitItemOut:
    item = kit_item.item
    return ServiceKitItemOut.model_validate({
        **kit_item.__dict__,
        "item_name": item.name if item else None,
        "item_code": item.code if item else None,
        "unit_cost": item.cost_price if item else None,
    })


def _kit_to_detail(kit: ServiceKit) -> ServiceKitDetailOut:
    material_cost = sum(
        (Decimal(ki.quantity) * Decimal(ki.item.cost_price or 0)
         for ki in kit.items if not ki.is_optional and ki.item),
        Decimal("0")
    )
    return ServiceKitDetailOut.model_validate({
        **kit.__dict__,
        "item_count": len(kit.items),
        "items": [_kit_item_to_out(ki) for ki in kit.items],
        "estimated_material_cost": round(float(material_cost), 2),
    })


def get_service_kits(db: Session, tenant_id: UUID, params: ServiceKitRequest) -> ServiceKitListResponse:
    base_query = db.query(ServiceKit).filter(*build_service_kit_filters(tenant_id, params))
    total = base_query.count()

    kits = (
        base_query
        .options(selectinload(ServiceKit.items))
        .order_by(ServiceKit.name.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {
        "service_kits": [
            ServiceKitOut.model_validate({**kit.__dict__, "item_count": len(kit.items)})
            for kit in kits
        ],
        "total": total
    }


def get_service_kit_by_id(db: Session, tenant_id: UUID, kit_id: UUID) -> Optional[ServiceKit]:
    return (
        db.query(ServiceKit)
        .options(selectinload(ServiceKit.items).joinedload(ServiceKitItem.item))
        .filter(ServiceKit.id == kit_id, ServiceKit.tenant_id == tenant_id)
        .first()
    )


def get_service_kit(db: Session, tenant_id: UUID, kit_id: UUID) -> ServiceKitDetailOut:
    kit = get_service_kit_by_id(db, tenant_id, kit_id)
    if not kit:
        return not_found_response("Service kit")
    return _kit_to_detail(kit)


def _kit_component(db: Session, tenant_id: UUID, kit: ServiceKit, component: ServiceKitItemCreate) -> ServiceKitItem:
    item = db.query(Item.id).filter(
        Item.id == component.item_id,
        Item.tenant_id == tenant_id,
        Item.active == True
    ).first()
    if not item:
        return error_response(
            message=f"Item {component.item_id} does not exist or is inactive",
            status_code=str(AppStatusCode.INVALID_REFERENCE)
        )

    if any(ki.item_id == component.item_id for ki in kit.items):
        return error_response(
            message="Item is already part of this kit",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    return ServiceKitItem(**component.model_dump(), tenant_id=tenant_id)


def create_service_kit(db: Session, tenant_id: UUID, kit: ServiceKitCreate) -> ServiceKitDetailOut:
    existing = db.query(ServiceKit.id).filter(
        ServiceKit.tenant_id == tenant_id,
        func.lower(ServiceKit.code) == kit.code.lower()
    ).first()
    if existing:
        return error_response(
            message=f"Service kit code '{kit.code}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    db_kit = ServiceKit(**kit.model_dump(exclude={"items"}), tenant_id=tenant_id)
    for component in kit.items:
        db_kit.items.append(_kit_component(db, tenant_id, db_kit, component))

    db.add(db_kit)
    db.commit()
    return get_service_kit(db, tenant_id, db_kit.id)


def update_service_kit(db: Session, tenant_id: UUID, kit_id: UUID, kit: ServiceKitUpdate) -> ServiceKitDetailOut:
    db_kit = get_service_kit_by_id(db, tenant_id, kit_id)
    if not db_kit:
        return not_found_response("Service kit")

    for key, value in kit.model_dump(exclude_unset=True).items():
        if value is None and key in ("name", "is_active"):
            continue
        setattr(db_kit, key, value)

    db.commit()
    return get_service_kit(db, tenant_id, kit_id)


def delete_service_kit_soft(db: Session, tenant_id: UUID, kit_id: UUID):
    db_kit = get_service_kit_by_id(db, tenant_id, kit_id)
    if not db_kit or not db_kit.is_active:
        return not_found_response("Service kit")

    db_kit.is_active = False
    db.commit()
    return {"id": kit_id, "deleted": True}


def add_kit_item(db: Session, tenant_id: UUID, kit_id: UUID, component: ServiceKitItemCreate) -> ServiceKitDetailOut:
    db_kit = get_service_kit_by_id(db, tenant_id, kit_id)
    if not db_kit:
        return not_found_response("Service kit")

    db_kit.items.append(_kit_component(db, tenant_id, db_kit, component))
    db.commit()
    return get_service_kit(db, tenant_id, kit_id)


def remove_kit_item(db: Session, tenant_id: UUID, kit_id: UUID, kit_item_id: UUID) -> ServiceKitDetailOut:
    db_kit = get_service_kit_by_id(db, tenant_id, kit_id)
    if not db_kit:
        return not_found_response("Service kit")

    kit_item = next((ki for ki in db_kit.items if ki.id == kit_item_id), None)
    if not kit_item:
        return not_found_response("Kit item")

    db_kit.items.remove(kit_item)
    db.commit()
    return get_service_kit(db, tenant_id, kit_id)
