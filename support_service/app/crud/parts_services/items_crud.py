# crud/parts_services/items_crud.py
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.schemas import AttachmentOut, Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.parts_services_enum import ItemStatus, ItemType, MeasurementUnit
from ...models.parts_services.items import Item, ItemAttachment
from ...models.parts_services.stock import StockItem
from ...schemas.parts_services.items_schemas import (
    ItemCreate, ItemListResponse, ItemOut, ItemRequest, ItemUpdate
)

logger = logging.getLogger(__name__)

REQUIRED_ITEM_FIELDS = {"name", "code", "measurement_unit", "status", "active",
                        "cost_price", "sale_price", "minimum_stock"}


# ---------------- Build Filters ----------------
def build_item_filters(tenant_id: UUID, params: ItemRequest):
    filters = [Item.tenant_id == tenant_id]

    if params.active and params.active.lower() != "all":
        filters.append(Item.active == (params.active.lower() == "true"))
    elif not params.active:
        filters.append(Item.active == True)

    if params.type and params.type.lower() != "all":
        filters.append(Item.type == ItemType(params.type.lower()))

    if params.status and params.status.lower() != "all":
        filters.append(Item.status == ItemStatus(params.status.lower()))

    if params.group_name:
        filters.append(Item.group_name == params.group_name)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            Item.name.ilike(search_term),
            Item.code.ilike(search_term),
            Item.integration_code.ilike(search_term),
            Item.description.ilike(search_term)
        ))

    return filters


def _item_to_out(db: Session, item: Item) -> ItemOut:
    total_stock = None
    if item.type == ItemType.MATERIAL:
        total_stock = db.query(func.coalesce(func.sum(StockItem.current_quantity), 0)).filter(
            StockItem.item_id == item.id
        ).scalar()

    return ItemOut.model_validate({**item.__dict__, "total_stock": total_stock})


# ---------------- Get All ----------------
def get_items(db: Session, tenant_id: UUID, params: ItemRequest) -> ItemListResponse:
    try:
        filters = build_item_filters(tenant_id, params)
    except ValueError as e:
        return error_response(message=str(e), status_code=str(AppStatusCode.INVALID_INPUT))

    base_query = db.query(Item).filter(*filters)
    total = base_query.count()

    items = (
        base_query
        .order_by(Item.name.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )

    return {
        "items": [_item_to_out(db, item) for item in items],
        "total": total
    }


# ---------------- Get By ID ----------------
def get_item_by_id(db: Session, tenant_id: UUID, item_id: UUID, active_only: bool = True) -> Optional[Item]:
    query = db.query(Item).filter(Item.id == item_id, Item.tenant_id == tenant_id)
    if active_only:
        query = query.filter(Item.active == True)
    return query.first()


def get_item(db: Session, tenant_id: UUID, item_id: UUID) -> ItemOut:
    item = get_item_by_id(db, tenant_id, item_id, active_only=False)
    if not item:
        return not_found_response("Item")
    return _item_to_out(db, item)


def _ensure_unique_code(db: Session, tenant_id: UUID, code: str, exclude_id: Optional[UUID] = None):
    query = db.query(Item.id).filter(
        Item.tenant_id == tenant_id,
        func.lower(Item.code) == code.lower()
    )
    if exclude_id:
        query = query.filter(Item.id != exclude_id)

    if query.first():
        return error_response(
            message=f"Item code '{code}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )


# ---------------- Create ----------------
def create_item(db: Session, tenant_id: UUID, item: ItemCreate, current_user: UserToken) -> ItemOut:
    _ensure_unique_code(db, tenant_id, item.code)

    db_item = Item(
        **item.model_dump(),
        tenant_id=tenant_id,
        created_by_id=UUID(current_user.user_id)
    )
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    logger.info("Item %s created in tenant %s", db_item.code, tenant_id)
    return _item_to_out(db, db_item)


# ---------------- Update ----------------
def update_item(db: Session, tenant_id: UUID, item_id: UUID, item: ItemUpdate) -> ItemOut:
    db_item = get_item_by_id(db, tenant_id, item_id, active_only=False)
    if not db_item:
        return not_found_response("Item")

    update_data = item.model_dump(exclude_unset=True)
    if update_data.get("code") and update_data["code"] != db_item.code:
        _ensure_unique_code(db, tenant_id, update_data["code"], exclude_id=item_id)

    for key, value in update_data.items():
        if value is None and key in REQUIRED_ITEM_FIELDS:
            continue
        setattr(db_item, key, value)

    maximum = db_item.maximum_stock
    if maximum is not None and maximum < (db_item.minimum_stock or 0):
        return error_response(
            message="maximum_stock must be greater than or equal to minimum_stock",
            status_code=str(AppStatusCode.INVALID_INPUT)
        )

    db.commit()
    db.refresh(db_item)
    return _item_to_out(db, db_item)


# ---------------- Soft Delete ----------------
def delete_item_soft(db: Session, tenant_id: UUID, item_id: UUID):
    db_item = get_item_by_id(db, tenant_id, item_id)
    if not db_item:
        return not_found_response("Item")

    on_hand = db.query(func.coalesce(func.sum(StockItem.current_quantity), 0)).filter(
        StockItem.item_id == item_id
    ).scalar()
    if on_hand and on_hand > 0:
        return error_response(
            message="Cannot delete an item with stock on hand",
            status_code=str(AppStatusCode.DELETE_RESTRICTED)
        )

    db_item.active = False
    db.commit()
    return {"id": item_id, "deleted": True}


# ---------------- Lookups ----------------
def item_lookup(db: Session, tenant_id: UUID, item_type: Optional[str] = None) -> List[Lookup]:
    query = db.query(Item.id, Item.code, Item.name).filter(
        Item.tenant_id == tenant_id,
        Item.active == True
    )
    if item_type and item_type.lower() != "all":
        try:
            query = query.filter(Item.type == ItemType(item_type.lower()))
        except ValueError as e:
            return error_response(message=str(e), status_code=str(AppStatusCode.INVALID_INPUT))

    return [
        Lookup(id=row.id, name=f"{row.code} - {row.name}")
        for row in query.order_by(Item.name.asc()).all()
    ]


def measurement_unit_lookup() -> List[Lookup]:
    return [Lookup(id=unit.value, name=unit.value) for unit in MeasurementUnit]


# ---------------- Attachments ----------------
def get_item_attachments(db: Session, tenant_id: UUID, item_id: UUID) -> List[AttachmentOut]:
    if not get_item_by_id(db, tenant_id, item_id, active_only=False):
        return not_found_response("Item")

    attachments = (
        db.query(ItemAttachment)
        .filter(ItemAttachment.item_id == item_id, ItemAttachment.tenant_id == tenant_id)
        .order_by(ItemAttachment.created_at.desc())
        .all()
    )
    return [AttachmentOut.model_validate(a) for a in attachments]


async def add_item_attachment(
    db: Session,
    tenant_id: UUID,
    item_id: UUID,
    file: UploadFile,
    description: Optional[str],
    category: Optional[str],
    current_user: UserToken,
) -> AttachmentOut:
    if not get_item_by_id(db, tenant_id, item_id):
        return not_found_response("Item")

    content_type = file.content_type or "application/octet-stream"
    if content_type not in settings.ALLOWED_ATTACHMENT_TYPES:
        return error_response(
            message=f"File type '{content_type}' is not allowed",
            status_code=str(AppStatusCode.INVALID_INPUT)
        )

    max_bytes = int(settings.MAX_ATTACHMENT_SIZE_MB * 1024 * 1024)
    # one byte past the limit is enough to reject
    file_data = await file.read(max_bytes + 1)
    if not file_data:
        return error_response(message="Uploaded file is empty", status_code=str(AppStatusCode.INVALID_INPUT))
    if len(file_data) > max_bytes:
        return error_response(
            message=f"File exceeds the {settings.MAX_ATTACHMENT_SIZE_MB:g} MB limit",
            status_code=str(AppStatusCode.INVALID_INPUT)
        )

    attachment = ItemAttachment(
        tenant_id=tenant_id,
        item_id=item_id,
        file_name=file.filename or "attachment",
        content_type=content_type,
        file_size=len(file_data),
        file_data=file_data,
        description=description,
        category=category or "other",
        uploaded_by_id=UUID(current_user.user_id),
    )
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    return AttachmentOut.model_validate(attachment)


def get_attachment(db: Session, tenant_id: UUID, attachment_id: UUID) -> ItemAttachment:
    attachment = db.query(ItemAttachment).filter(
        ItemAttachment.id == attachment_id,
        ItemAttachment.tenant_id == tenant_id
    ).first()
    if not attachment:
        return not_found_response("Attachment")
    return attachment


def delete_attachment(db: Session, tenant_id: UUID, attachment_id: UUID):
    attachment = get_attachment(db, tenant_id, attachment_id)
    db.delete(attachment)
    db.commit()
    return {"id": attachment_id, "deleted": True}
