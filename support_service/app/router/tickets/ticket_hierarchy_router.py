# router/tickets/ticket_hierarchy_router.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_tenant_admin, validate_current_token
from shared.core.schemas import DeleteResult, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session as get_db

from ...crud.tickets import ticket_hierarchy_crud as crud
from ...schemas.tickets.ticket_hierarchy_schemas import (
    HierarchyTreeResponse,
    TicketActionCreate,
    TicketActionOut,
    TicketActionUpdate,
    TicketCategoryCreate,
    TicketCategoryOut,
    TicketCategoryUpdate,
    TicketSubcategoryCreate,
    TicketSubcategoryOut,
    TicketSubcategoryUpdate,
)

router = APIRouter(
    prefix="/api/ticket-hierarchy",
    tags=["Ticket Hierarchy"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/tree", response_model=HierarchyTreeResponse)
def get_hierarchy_tree(
    company_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_hierarchy_tree(db, current_tenant_id(current_user), company_id)


# ---------------- Categories ----------------
@router.get("/categories", response_model=List[TicketCategoryOut])
def get_categories(
    company_id: Optional[UUID] = Query(None),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_categories(db, current_tenant_id(current_user), company_id, include_inactive)


@router.post("/categories", response_model=TicketCategoryOut)
def create_category(
    category: TicketCategoryCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.create_category(db, current_tenant_id(current_user), category)


@router.put("/categories/{category_id}", response_model=TicketCategoryOut)
def update_category(
    category_id: UUID,
    category: TicketCategoryUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.update_category(db, current_tenant_id(current_user), category_id, category)


@router.delete("/categories/{category_id}", response_model=DeleteResult)
def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.delete_category_soft(db, current_tenant_id(current_user), category_id)


# ---------------- Subcategories ----------------
@router.get("/categories/{category_id}/subcategories", response_model=List[TicketSubcategoryOut])
def get_subcategories(
    category_id: UUID,
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_subcategories(db, current_tenant_id(current_user), category_id, include_inactive)


@router.post("/subcategories", response_model=TicketSubcategoryOut)
def create_subcategory(
    subcategory: TicketSubcategoryCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.create_subcategory(db, current_tenant_id(current_user), subcategory)


@router.put("/subcategories/{subcategory_id}", response_model=TicketSubcategoryOut)
def update_subcategory(
    subcategory_id: UUID,
    subcategory: TicketSubcategoryUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.update_subcategory(db, current_tenant_id(current_user), subcategory_id, subcategory)


@router.delete("/subcategories/{subcategory_id}", response_model=DeleteResult)
def delete_subcategory(
    subcategory_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.delete_subcategory_soft(db, current_tenant_id(current_user), subcategory_id)


# ---------------- Actions ----------------
@router.get("/subcategories/{subcategory_id}/actions", response_model=List[TicketActionOut])
def get_actions(
    subcategory_id: UUID,
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_actions(db, current_tenant_id(current_user), subcategory_id, include_inactive)


@router.post("/actions", response_model=TicketActionOut)
def create_action(
    action: TicketActionCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.create_action(db, current_tenant_id(current_user), action)


@router.put("/actions/{action_id}", response_model=TicketActionOut)
def update_action(
    action_id: UUID,
    action: TicketActionUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.update_action(db, current_tenant_id(current_user), action_id, action)


@router.delete("/actions/{action_id}", response_model=DeleteResult)
def delete_action(
    action_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.delete_action_soft(db, current_tenant_id(current_user), action_id)
