# crud/tickets/ticket_hierarchy_crud.py
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...data.default_hierarchy import DEFAULT_TICKET_HIERARCHY
from ...enum.ticket_enum import TicketActionType
from ...models.tickets.ticket_hierarchy import TicketAction, TicketCategory, TicketSubcategory
from ...schemas.tickets.ticket_hierarchy_schemas import (
    CategoryTreeNode,
    HierarchyTreeResponse,
    SubcategoryTreeNode,
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

logger = logging.getLogger(__name__)


# ---------------- Helpers ----------------
def _company_scope(model, company_id: Optional[UUID]):
    """Rows for one company also include the tenant wide (company-less) rows."""
    if company_id:
        return or_(model.company_id == company_id, model.company_id.is_(None))
    return model.company_id.is_(None)


def _ensure_unique_name(
    db: Session,
    model,
    tenant_id: UUID,
    name: str,
    company_id: Optional[UUID],
    parent_filter=None,
    exclude_id: Optional[UUID] = None,
):
    query = db.query(model).filter(
        model.tenant_id == tenant_id,
        func.lower(model.name) == name.strip().lower(),
        model.active == True,
    )
    query = query.filter(model.company_id == company_id) if company_id else query.filter(model.company_id.is_(None))
    if parent_filter is not None:
        query = query.filter(parent_filter)
    if exclude_id:
        query = query.filter(model.id != exclude_id)

    if query.first():
        return error_response(
            message=f"'{name}' already exists at this level",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )


def _reactivating(node, update_data: dict) -> bool:
    return update_data.get("active") is True and not node.active


def _ensure_active_parent(parent, message: str):
    if not parent or not parent.active:
        return error_response(message=message, status_code=str(AppStatusCode.INVALID_REFERENCE))


def _ordered(query, model):
    return query.order_by(model.sort_order.asc(), model.name.asc())


# nulls sent for these are ignored rather than stored
REQUIRED_NODE_FIELDS = {"name", "sort_order", "active", "estimated_time_minutes", "action_type"}


def _apply_update(db: Session, node, update_data: dict):
    for key, value in update_data.items():
        if value is None and key in REQUIRED_NODE_FIELDS:
            continue
        setattr(node, key, value)
    db.commit()
    db.refresh(node)
    return node


# ---------------- Categories ----------------
def get_category_by_id(db: Session, tenant_id: UUID, category_id: UUID) -> Optional[TicketCategory]:
    return db.query(TicketCategory).filter(
        TicketCategory.id == category_id,
        TicketCategory.tenant_id == tenant_id
    ).first()


def get_categories(
    db: Session,
    tenant_id: UUID,
    company_id: Optional[UUID] = None,
    include_inactive: bool = False
) -> List[TicketCategoryOut]:
    query = db.query(TicketCategory).filter(
        TicketCategory.tenant_id == tenant_id,
        _company_scope(TicketCategory, company_id)
    )
    if not include_inactive:
        query = query.filter(TicketCategory.active == True)

    return [TicketCategoryOut.model_validate(c) for c in _ordered(query, TicketCategory).all()]


def create_category(db: Session, tenant_id: UUID, category: TicketCategoryCreate) -> TicketCategoryOut:
    _ensure_unique_name(db, TicketCategory, tenant_id, category.name, category.company_id)

    db_category = TicketCategory(**category.model_dump(exclude_none=True), tenant_id=tenant_id)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return TicketCategoryOut.model_validate(db_category)


def update_category(db: Session, tenant_id: UUID, category_id: UUID, category: TicketCategoryUpdate):
    db_category = get_category_by_id(db, tenant_id, category_id)
    if not db_category:
        return not_found_response("Category")

    update_data = category.model_dump(exclude_unset=True)
    if update_data.get("name") or _reactivating(db_category, update_data):
        _ensure_unique_name(db, TicketCategory, tenant_id, update_data.get("name") or db_category.name,
                            db_category.company_id, exclude_id=category_id)

    if update_data.get("active") is False:
        _ensure_no_active_children(db, TicketSubcategory, TicketSubcategory.category_id == category_id,
                                   "Category has active subcategories")

    return TicketCategoryOut.model_validate(_apply_update(db, db_category, update_data))


def _ensure_no_active_children(db: Session, child_model, parent_filter, message: str):
    has_children = db.query(child_model.id).filter(
        parent_filter,
        child_model.active == True
    ).first()
    if has_children:
        return error_response(
            message=f"{message}, deactivate them first",
            status_code=str(AppStatusCode.DELETE_RESTRICTED)
        )


def delete_category_soft(db: Session, tenant_id: UUID, category_id: UUID):
    db_category = get_category_by_id(db, tenant_id, category_id)
    if not db_category or not db_category.active:
        return not_found_response("Category")

    _ensure_no_active_children(db, TicketSubcategory, TicketSubcategory.category_id == category_id,
                               "Category has active subcategories")

    db_category.active = False
    db.commit()
    return {"id": category_id, "deleted": True}


# ---------------- Subcategories ----------------
def get_subcategory_by_id(db: Session, tenant_id: UUID, subcategory_id: UUID) -> Optional[TicketSubcategory]:
    return db.query(TicketSubcategory).filter(
        TicketSubcategory.id == subcategory_id,
        TicketSubcategory.tenant_id == tenant_id
    ).first()


def get_subcategories(
    db: Session,
    tenant_id: UUID,
    category_id: UUID,
    include_inactive: bool = False
) -> List[TicketSubcategoryOut]:
    if not get_category_by_id(db, tenant_id, category_id):
        return not_found_response("Category")

    query = db.query(TicketSubcategory).filter(
        TicketSubcategory.tenant_id == tenant_id,
        TicketSubcategory.category_id == category_id
    )
    if not include_inactive:
        query = query.filter(TicketSubcategory.active == True)

    return [TicketSubcategoryOut.model_validate(s) for s in _ordered(query, TicketSubcategory).all()]


def create_subcategory(db: Session, tenant_id: UUID, subcategory: TicketSubcategoryCreate) -> TicketSubcategoryOut:
    parent = get_category_by_id(db, tenant_id, subcategory.category_id)
    if not parent:
        return not_found_response("Category")
    if not parent.active:
        return error_response(
            message="Cannot add a subcategory to an inactive category",
            status_code=str(AppStatusCode.INVALID_REFERENCE)
        )

    _ensure_unique_name(db, TicketSubcategory, tenant_id, subcategory.name, subcategory.company_id,
                        parent_filter=TicketSubcategory.category_id == subcategory.category_id)

    db_subcategory = TicketSubcategory(**subcategory.model_dump(exclude_none=True), tenant_id=tenant_id)
    db.add(db_subcategory)
    db.commit()
    db.refresh(db_subcategory)
    return TicketSubcategoryOut.model_validate(db_subcategory)


def update_subcategory(db: Session, tenant_id: UUID, subcategory_id: UUID, subcategory: TicketSubcategoryUpdate):
    db_subcategory = get_subcategory_by_id(db, tenant_id, subcategory_id)
    if not db_subcategory:
        return not_found_response("Subcategory")

    update_data = subcategory.model_dump(exclude_unset=True)
    if _reactivating(db_subcategory, update_data):
        _ensure_active_parent(get_category_by_id(db, tenant_id, db_subcategory.category_id),
                              "Cannot reactivate a subcategory of an inactive category")

    if update_data.get("name") or _reactivating(db_subcategory, update_data):
        _ensure_unique_name(db, TicketSubcategory, tenant_id, update_data.get("name") or db_subcategory.name,
                            db_subcategory.company_id,
                            parent_filter=TicketSubcategory.category_id == db_subcategory.category_id,
                            exclude_id=subcategory_id)

    if update_data.get("active") is False:
        _ensure_no_active_children(db, TicketAction, TicketAction.subcategory_id == subcategory_id,
                                   "Subcategory has active actions")

    return TicketSubcategoryOut.model_validate(_apply_update(db, db_subcategory, update_data))


def delete_subcategory_soft(db: Session, tenant_id: UUID, subcategory_id: UUID):
    db_subcategory = get_subcategory_by_id(db, tenant_id, subcategory_id)
    if not db_subcategory or not db_subcategory.active:
        return not_found_response("Subcategory")

    _ensure_no_active_children(db, TicketAction, TicketAction.subcategory_id == subcategory_id,
                               "Subcategory has active actions")

    db_subcategory.active = False
    db.commit()
    return {"id": subcategory_id, "deleted": True}


# ---------------- Actions ----------------
def get_action_by_id(db: Session, tenant_id: UUID, action_id: UUID) -> Optional[TicketAction]:
    return db.query(TicketAction).filter(
        TicketAction.id == action_id,
        TicketAction.tenant_id == tenant_id
    ).first()


def get_actions(
    db: Session,
    tenant_id: UUID,
    subcategory_id: UUID,
    include_inactive: bool = False
) -> List[TicketActionOut]:
    if not get_subcategory_by_id(db, tenant_id, subcategory_id):
        return not_found_response("Subcategory")

    query = db.query(TicketAction).filter(
        TicketAction.tenant_id == tenant_id,
        TicketAction.subcategory_id == subcategory_id
    )
    if not include_inactive:
        query = query.filter(TicketAction.active == True)

    return [TicketActionOut.model_validate(a) for a in _ordered(query, TicketAction).all()]


def create_action(db: Session, tenant_id: UUID, action: TicketActionCreate) -> TicketActionOut:
    parent = get_subcategory_by_id(db, tenant_id, action.subcategory_id)
    if not parent:
        return not_found_response("Subcategory")
    if not parent.active:
        return error_response(
            message="Cannot add an action to an inactive subcategory",
            status_code=str(AppStatusCode.INVALID_REFERENCE)
        )

    _ensure_unique_name(db, TicketAction, tenant_id, action.name, action.company_id,
                        parent_filter=TicketAction.subcategory_id == action.subcategory_id)

    db_action = TicketAction(**action.model_dump(exclude_none=True), tenant_id=tenant_id)
    db.add(db_action)
    db.commit()
    db.refresh(db_action)
    return TicketActionOut.model_validate(db_action)


def update_action(db: Session, tenant_id: UUID, action_id: UUID, action: TicketActionUpdate):
    db_action = get_action_by_id(db, tenant_id, action_id)
    if not db_action:
        return not_found_response("Action")

    update_data = action.model_dump(exclude_unset=True)
    if _reactivating(db_action, update_data):
        _ensure_active_parent(get_subcategory_by_id(db, tenant_id, db_action.subcategory_id),
                              "Cannot reactivate an action of an inactive subcategory")

    if update_data.get("name") or _reactivating(db_action, update_data):
        _ensure_unique_name(db, TicketAction, tenant_id, update_data.get("name") or db_action.name,
                            db_action.company_id,
                            parent_filter=TicketAction.subcategory_id == db_action.subcategory_id,
                            exclude_id=action_id)

    return TicketActionOut.model_validate(_apply_update(db, db_action, update_data))


def delete_action_soft(db: Session, tenant_id: UUID, action_id: UUID):
    db_action = get_action_by_id(db, tenant_id, action_id)
    if not db_action or not db_action.active:
        return not_found_response("Action")

    db_action.active = False
    db.commit()
    return {"id": action_id, "deleted": True}


# ---------------- Tree ----------------
def get_hierarchy_tree(db: Session, tenant_id: UUID, company_id: Optional[UUID] = None) -> HierarchyTreeResponse:
    categories = _ordered(
        db.query(TicketCategory).filter(
            TicketCategory.tenant_id == tenant_id,
            TicketCategory.active == True,
            _company_scope(TicketCategory, company_id)
        ),
        TicketCategory
    ).all()

    subcategories = _ordered(
        db.query(TicketSubcategory).filter(
            TicketSubcategory.tenant_id == tenant_id,
            TicketSubcategory.active == True,
            _company_scope(TicketSubcategory, company_id)
        ),
        TicketSubcategory
    ).all()

    actions = _ordered(
        db.query(TicketAction).filter(
            TicketAction.tenant_id == tenant_id,
            TicketAction.active == True,
            _company_scope(TicketAction, company_id)
        ),
        TicketAction
    ).all()

    actions_by_parent = {}
    for action in actions:
        actions_by_parent.setdefault(action.subcategory_id, []).append(TicketActionOut.model_validate(action))

    subs_by_parent = {}
    for sub in subcategories:
        node = SubcategoryTreeNode.model_validate({
            **TicketSubcategoryOut.model_validate(sub).model_dump(),
            "actions": actions_by_parent.get(sub.id, [])
        })
        subs_by_parent.setdefault(sub.category_id, []).append(node)

    tree = [
        CategoryTreeNode.model_validate({
            **TicketCategoryOut.model_validate(cat).model_dump(),
            "subcategories": subs_by_parent.get(cat.id, [])
        })
        for cat in categories
    ]

    return {
        "categories": tree,
        "total_categories": len(tree),
        "total_subcategories": sum(len(c.subcategories) for c in tree),
        "total_actions": sum(len(s.actions) for c in tree for s in c.subcategories),
    }


# ---------------- Seed ----------------
def seed_default_hierarchy(db: Session, tenant_id: UUID) -> int:
    """Default support tree for a freshly provisioned tenant. Returns categories added."""
    if db.query(TicketCategory.id).filter(TicketCategory.tenant_id == tenant_id).first():
        return 0

    for cat_order, cat in enumerate(DEFAULT_TICKET_HIERARCHY):
        category = TicketCategory(
            tenant_id=tenant_id,
            name=cat["name"],
            description=cat.get("description"),
            color=cat.get("color"),
            icon=cat.get("icon"),
            sort_order=cat_order,
        )
        db.add(category)
        db.flush()

        for sub_order, sub in enumerate(cat.get("subcategories", [])):
            subcategory = TicketSubcategory(
                tenant_id=tenant_id,
                category_id=category.id,
                name=sub["name"],
                description=sub.get("description"),
                color=cat.get("color"),
                sort_order=sub_order,
            )
            db.add(subcategory)
            db.flush()

            for action_order, action in enumerate(sub.get("actions", [])):
                db.add(TicketAction(
                    tenant_id=tenant_id,
                    subcategory_id=subcategory.id,
                    name=action["name"],
                    estimated_time_minutes=action.get("estimated_time_minutes", 0),
                    action_type=TicketActionType(action.get("action_type", "other")),
                    color=cat.get("color"),
                    sort_order=action_order,
                ))

    db.commit()
    logger.info("Seeded %d default ticket categories for tenant %s", len(DEFAULT_TICKET_HIERARCHY), tenant_id)
    return len(DEFAULT_TICKET_HIERARCHY)
