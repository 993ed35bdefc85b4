# router/timecard/schedule_templates_router.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.schemas import DeleteResult, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session as get_db

from ...crud.timecard import schedule_templates_crud as crud
from ...schemas.timecard.schedule_templates_schemas import (
    ScheduleTemplateCreate,
    ScheduleTemplateListResponse,
    ScheduleTemplateOut,
    ScheduleTemplateRequest,
    ScheduleTemplateUpdate,
)

router = APIRouter(
    prefix="/api/timecard/schedule-templates",
    tags=["Schedule Templates"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/", response_model=ScheduleTemplateListResponse)
def get_templates(
    params: ScheduleTemplateRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_templates(db, current_tenant_id(current_user), params)


@router.get("/{template_id}", response_model=ScheduleTemplateOut)
def get_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_template(db, current_tenant_id(current_user), template_id)


@router.post("/", response_model=ScheduleTemplateOut)
def create_template(
    template: ScheduleTemplateCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_template(db, current_tenant_id(current_user), template, current_user)


@router.put("/{template_id}", response_model=ScheduleTemplateOut)
def update_template(
    template_id: UUID,
    template: ScheduleTemplateUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_template(db, current_tenant_id(current_user), template_id, template)


@router.delete("/{template_id}", response_model=DeleteResult)
def delete_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_template_soft(db, current_tenant_id(current_user), template_id)
