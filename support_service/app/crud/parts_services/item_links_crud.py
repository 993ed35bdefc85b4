# crud/parts_services/item_links_crud.py
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...models.parts_services.item_links import ItemCustomerLink, ItemLink, ItemSupplierLink
from ...schemas.parts_services.items_schemas import (
    ItemCustomerLinkCreate,
    ItemCustomerLinkOut,
    ItemCustomerLinkUpdate,
    ItemLinkCreate,
    ItemLinkOut,
    ItemSupplierLinkCreate,
    ItemSupplierLinkOut,
    ItemSupplierLinkUpdate,
)
from .items_crud import get_item_by_id


def _require_item(db: Session, tenant_id: UUID, item_id: UUID, active_only: bool = True):
    item = get_item_by_id(db, tenant_id, item_id, active_only=active_only)
    if not item:
        return not_found_response("Item")
    return item


def _link_to_out(link: ItemLink) -> ItemLinkOut:
    return ItemLinkOut.model_validate({
        **link.__dict__,
        "linked_item_name": link.linked_item.name if link.linked_item else None,
        "linked_item_code": link.linked_item.code if link.linked_item else None,
    })


# ---------------- Item <-> Item ----------------
def get_item_links(db: Session, tenant_id: UUID, item_id: UUID) -> List[ItemLinkOut]:
    _require_item(db, tenant_id, item_id, active_only=False)

    links = (
        db.query(ItemLink)
        .options(joinedload(ItemLink.linked_item))
        .filter(
            ItemLink.tenant_id == tenant_id,
            ItemLink.parent_item_id == item_id,
            ItemLink.is_active == True
        )
        .order_by(ItemLink.created_at.asc())
        .all()
    )
    return [_link_to_out(link) for link in links]


def create_item_link(db: Session, tenant_id: UUID, item_id: UUID, link: ItemLinkCreate) -> ItemLinkOut:
    _require_item(db, tenant_id, item_id)

    if link.linked_item_id == item_id:
        return error_response(
            message="An item cannot be linked to itself",
            status_code=str(AppStatusCode.INVALID_REFERENCE)
        )

    if not get_item_by_id(db, tenant_id, link.linked_item_id):
        return not_found_response("Linked item")

    existing = db.query(ItemLink.id).filter(
        ItemLink.tenant_id == tenant_id,
        ItemLink.parent_item_id == item_id,
        ItemLink.linked_item_id == link.linked_item_id,
        ItemLink.is_active == True
    ).first()
    if existing:
        return error_response(
            message="These items are already linked",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    db_link = ItemLink(**link.model_dump(), tenant_id=tenant_id, parent_item_id=item_id)
    db.add(db_link)
    db.commit()
    db.refresh(db_link)
    return _link_to_out(db_link)


def delete_item_link(db: Session, tenant_id: UUID, link_id: UUID):
    db_link = db.query(ItemLink).filter(
        ItemLink.id == link_id,
        ItemLink.tenant_id == tenant_id,
        ItemLink.is_active == True
    ).first()
    if not db_link:
        return not_found_response("Item link")

    db_link.is_active = False
    db.commit()
    return {"id": link_id, "deleted": True}


# ---------------- Item <-> Customer ----------------
def get_customer_links(db: Session, tenant_id: UUID, item_id: UUID) -> List[ItemCustomerLinkOut]:
    _require_item(db, tenant_id, item_id, active_only=False)

    links = db.query(ItemCustomerLink).filter(
        ItemCustomerLink.tenant_id == tenant_id,
        ItemCustomerLink.item_id == item_id,
        ItemCustomerLink.is_active == True
    ).all()
    return [ItemCustomerLinkOut.model_validate(link) for link in links]


def create_customer_link(
    db: Session, tenant_id: UUID, item_id: UUID, link: ItemCustomerLinkCreate
) -> ItemCustomerLinkOut:
    _require_item(db, tenant_id, item_id)

    existing = db.query(ItemCustomerLink.id).filter(
        ItemCustomerLink.tenant_id == tenant_id,
        ItemCustomerLink.item_id == item_id,
        ItemCustomerLink.customer_id == link.customer_id,
        ItemCustomerLink.is_active == True
    ).first()
    if existing:
        return error_response(
            message="Item is already linked to this customer",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    db_link = ItemCustomerLink(**link.model_dump(), tenant_id=tenant_id, item_id=item_id)
    db.add(db_link)
    db.commit()
    db.refresh(db_link)
    return ItemCustomerLinkOut.model_validate(db_link)


def _get_customer_link(db: Session, tenant_id: UUID, link_id: UUID) -> ItemCustomerLink:
    db_link = db.query(ItemCustomerLink).filter(
        ItemCustomerLink.id == link_id,
        ItemCustomerLink.tenant_id == tenant_id,
        ItemCustomerLink.is_active == True
    ).first()
    if not db_link:
        return not_found_response("Customer link")
    return db_link


def update_customer_link(
    db: Session, tenant_id: UUID, link_id: UUID, link: ItemCustomerLinkUpdate
) -> ItemCustomerLinkOut:
    db_link = _get_customer_link(db, tenant_id, link_id)

    for key, value in link.model_dump(exclude_unset=True).items():
        if key == "is_active" and value is None:
            continue
        setattr(db_link, key, value)

    db.commit()
    db.refresh(db_link)
    return ItemCustomerLinkOut.model_validate(db_link)


def delete_customer_link(db: Session, tenant_id: UUID, link_id: UUID):
    db_link = _get_customer_link(db, tenant_id, link_id)
    db_link.is_active = False
    db.commit()
    return {"id": link_id, "deleted": True}


# ---------------- Item <-> Supplier ----------------
def _clear_preferred_supplier(db: Session, tenant_id: UUID, item_id: UUID, keep_id: UUID = None):
    query = db.query(ItemSupplierLink).filter(
        ItemSupplierLink.tenant_id == tenant_id,
        ItemSupplierLink.item_id == item_id,
        ItemSupplierLink.is_preferred == True
    )
    if keep_id:
        query = query.filter(ItemSupplierLink.id != keep_id)
    for other in query.all():
        other.is_preferred = False


def get_supplier_links(db: Session, tenant_id: UUID, item_id: UUID) -> List[ItemSupplierLinkOut]:
    _require_item(db, tenant_id, item_id, active_only=False)

    links = (
        db.query(ItemSupplierLink)
        .filter(
            ItemSupplierLink.tenant_id == tenant_id,
            ItemSupplierLink.item_id == item_id,
            ItemSupplierLink.is_active == True
        )
        .order_by(ItemSupplierLink.is_preferred.desc(), ItemSupplierLink.created_at.asc())
        .all()
    )
    return [ItemSupplierLinkOut.model_validate(link) for link in links]


def create_supplier_link(
    db: Session, tenant_id: UUID, item_id: UUID, link: ItemSupplierLinkCreate
) -> ItemSupplierLinkOut:
    _require_item(db, tenant_id, item_id)

    existing = db.query(ItemSupplierLink.id).filter(
        ItemSupplierLink.tenant_id == tenant_id,
        ItemSupplierLink.item_id == item_id,
        ItemSupplierLink.supplier_id == link.supplier_id,
        ItemSupplierLink.is_active == True
    ).first()
    if existing:
        return error_response(
            message="Item is already linked to this supplier",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )

    if link.is_preferred:
        _clear_preferred_supplier(db, tenant_id, item_id)

    db_link = ItemSupplierLink(**link.model_dump(), tenant_id=tenant_id, item_id=item_id)
    db.add(db_link)
    db.commit()
    db.refresh(db_link)
    return ItemSupplierLinkOut.model_validate(db_link)


def _get_supplier_link(db: Session, tenant_id: UUID, link_id: UUID) -> ItemSupplierLink:
    db_link = db.query(ItemSupplierLink).filter(
        ItemSupplierLink.id == link_id,
        ItemSupplierLink.tenant_id == tenant_id,
        ItemSupplierLink.is_active == True
    ).first()
    if not db_link:
        return not_found_response("Supplier link")
    return db_link


def update_supplier_link(
    db: Session, tenant_id: UUID, link_id: UUID, link: ItemSupplierLinkUpdate
) -> ItemSupplierLinkOut:
    db_link = _get_supplier_link(db, tenant_id, link_id)
    update_data = link.model_dump(exclude_unset=True)

    if update_data.get("is_preferred"):
        _clear_preferred_supplier(db, tenant_id, db_link.item_id, keep_id=link_id)

    for key, value in update_data.items():
        if key in ("is_active", "is_preferred") and value is None:
            continue
        setattr(db_link, key, value)

    db.commit()
    db.refresh(db_link)
    return ItemSupplierLinkOut.model_validate(db_link)


def delete_supplier_link(db: Session, tenant_id: UUID, link_id: UUID):
    db_link = _get_supplier_link(db, tenant_id, link_id)
    db_link.is_active = False
    db_link.is_preferred = False
    db.commit()
    return {"id": link_id, "deleted": True}
