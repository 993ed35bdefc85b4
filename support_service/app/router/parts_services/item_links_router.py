# router/parts_services/item_links_router.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.schemas import DeleteResult, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session as get_db

from ...crud.parts_services import item_links_crud as crud
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

router = APIRouter(
    prefix="/api/parts-services",
    tags=["Parts & Services - Links"],
    dependencies=[Depends(validate_current_token)]
)


# ---------------- Item Links ----------------
@router.get("/items/{item_id}/links", response_model=List[ItemLinkOut])
def get_item_links(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_item_links(db, current_tenant_id(current_user), item_id)


@router.post("/items/{item_id}/links", response_model=ItemLinkOut)
def create_item_link(
    item_id: UUID,
    link: ItemLinkCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_item_link(db, current_tenant_id(current_user), item_id, link)


@router.delete("/links/{link_id}", response_model=DeleteResult)
def delete_item_link(
    link_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_item_link(db, current_tenant_id(current_user), link_id)


# ---------------- Customer Links ----------------
@router.get("/items/{item_id}/customer-links", response_model=List[ItemCustomerLinkOut])
def get_customer_links(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_customer_links(db, current_tenant_id(current_user), item_id)


@router.post("/items/{item_id}/customer-links", response_model=ItemCustomerLinkOut)
def create_customer_link(
    item_id: UUID,
    link: ItemCustomerLinkCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_customer_link(db, current_tenant_id(current_user), item_id, link)


@router.put("/customer-links/{link_id}", response_model=ItemCustomerLinkOut)
def update_customer_link(
    link_id: UUID,
    link: ItemCustomerLinkUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_customer_link(db, current_tenant_id(current_user), link_id, link)


@router.delete("/customer-links/{link_id}", response_model=DeleteResult)
def delete_customer_link(
    link_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_customer_link(db, current_tenant_id(current_user), link_id)


# ---------------- Supplier Links ----------------
@router.get("/items/{item_id}/supplier-links", response_model=List[ItemSupplierLinkOut])
def get_supplier_links(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_supplier_links(db, current_tenant_id(current_user), item_id)


@router.post("/items/{item_id}/supplier-links", response_model=ItemSupplierLinkOut)
def create_supplier_link(
    item_id: UUID,
    link: ItemSupplierLinkCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_supplier_link(db, current_tenant_id(current_user), item_id, link)


@router.put("/supplier-links/{link_id}", response_model=ItemSupplierLinkOut)
def update_supplier_link(
    link_id: UUID,
    link: ItemSupplierLinkUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_supplier_link(db, current_tenant_id(current_user), link_id, link)


@router.delete("/supplier-links/{link_id}", response_model=DeleteResult)
def delete_supplier_link(
    link_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_supplier_link(db, current_tenant_id(current_user), link_id)
