# crud/timecard/schedule_templates_crud.py
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.schedule_enum import ScheduleCategory
from ...models.timecard.schedule_templates import ScheduleTemplate
from ...schemas.timecard.schedule_templates_schemas import (
    ScheduleTemplateCreate,
    ScheduleTemplateListResponse,
    ScheduleTemplateOut,
    ScheduleTemplateRequest,
    ScheduleTemplateUpdate,
)

logger = logging.getLogger(__name__)


def build_template_filters(tenant_id: UUID, params: ScheduleTemplateRequest):
    filters = [ScheduleTemplate.tenant_id == tenant_id]

    if params.active and params.active.lower() != "all":
        filters.append(ScheduleTemplate.is_active == (params.active.lower() == "true"))
    elif not params.active:
        filters.append(ScheduleTemplate.is_active == True)

    if params.category and params.category.lower() != "all":
        filters.append(ScheduleTemplate.category == ScheduleCategory(params.category.lower()))

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            ScheduleTemplate.name.ilike(search_term),
            ScheduleTemplate.description.ilike(search_term)
        ))

    return filters


def get_templates(db: Session, tenant_id: UUID, params: ScheduleTemplateRequest) -> ScheduleTemplateListResponse:
    try:
        filters = build_template_filters(tenant_id, params)
    except ValueError as e:
        return error_response(message=str(e), status_code=str(AppStatusCode.INVALID_INPUT))

    base_query = db.query(ScheduleTemplate).filter(*filters)
    total = base_query.count()

    templates = (
        base_query
        .order_by(ScheduleTemplate.name.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {
        "templates": [ScheduleTemplateOut.model_validate(t) for t in templates],
        "total": total
    }


def get_template_by_id(db: Session, tenant_id: UUID, template_id: UUID) -> Optional[ScheduleTemplate]:
    return db.query(ScheduleTemplate).filter(
        ScheduleTemplate.id == template_id,
        ScheduleTemplate.tenant_id == tenant_id
    ).first()


def get_template(db: Session, tenant_id: UUID, template_id: UUID) -> ScheduleTemplateOut:
    template = get_template_by_id(db, tenant_id, template_id)
    if not template:
        return not_found_response("Schedule template")
    return ScheduleTemplateOut.model_validate(template)


def _ensure_unique_name(db: Session, tenant_id: UUID, name: str, exclude_id: Optional[UUID] = None):
    query = db.query(ScheduleTemplate.id).filter(
        ScheduleTemplate.tenant_id == tenant_id,
        ScheduleTemplate.is_active == True,
        func.lower(ScheduleTemplate.name) == name.lower()
    )
    if exclude_id:
        query = query.filter(ScheduleTemplate.id != exclude_id)

    if query.first():
        return error_response(
            message=f"Schedule template '{name}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR)
        )


def create_template(
    db: Session, tenant_id: UUID, template: ScheduleTemplateCreate, current_user: UserToken
) -> ScheduleTemplateOut:
    _ensure_unique_name(db, tenant_id, template.name)

    db_template = ScheduleTemplate(
        **template.model_dump(mode="json"),
        tenant_id=tenant_id,
        created_by_id=UUID(current_user.user_id)
    )
    db.add(db_template)
    db.commit()
    db.refresh(db_template)
    logger.info("Schedule template '%s' created in tenant %s", db_template.name, tenant_id)
    return ScheduleTemplateOut.model_validate(db_template)


def update_template(
    db: Session, tenant_id: UUID, template_id: UUID, template: ScheduleTemplateUpdate
) -> ScheduleTemplateOut:
    db_template = get_template_by_id(db, tenant_id, template_id)
    if not db_template:
        return not_found_response("Schedule template")

    update_data = template.model_dump(mode="json", exclude_unset=True)
    reactivating = update_data.get("is_active") is True and not db_template.is_active
    if update_data.get("name") or reactivating:
        _ensure_unique_name(db, tenant_id, update_data.get("name") or db_template.name, exclude_id=template_id)

    for key, value in update_data.items():
        if value is None and key in ("name", "category", "schedule_type", "configuration",
                                     "requires_approval", "is_active"):
            continue
        setattr(db_template, key, value)

    category = ScheduleCategory(db_template.category)
    if category == ScheduleCategory.ROTATING and not db_template.rotation_cycle_days:
        db.rollback()
        return error_response(
            message="rotating templates require rotation_cycle_days",
            status_code=str(AppStatusCode.REQUIRED_VALIDATION_ERROR)
        )

    db.commit()
    db.refresh(db_template)
    return ScheduleTemplateOut.model_validate(db_template)


def delete_template_soft(db: Session, tenant_id: UUID, template_id: UUID):
    db_template = get_template_by_id(db, tenant_id, template_id)
    if not db_template or not db_template.is_active:
        return not_found_response("Schedule template")

    db_template.is_active = False
    db.commit()
    return {"id": template_id, "deleted": True}
