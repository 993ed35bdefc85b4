# router/parts_services/service_kits_router.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.schemas import DeleteResult, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session as get_db

from ...crud.parts_services import service_kits_crud as crud
from ...schemas.parts_services.service_kits_schemas import (
    ServiceKitCreate,
    ServiceKitDetailOut,
    ServiceKitItemCreate,
    ServiceKitListResponse,
    ServiceKitRequest,
    ServiceKitUpdate,
)

router = APIRouter(
    prefix="/api/parts-services/service-kits",
    tags=["Parts & Services - Service Kits"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/", response_model=ServiceKitListResponse)
def get_service_kits(
    params: ServiceKitRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_service_kits(db, current_tenant_id(current_user), params)


@router.get("/{kit_id}", response_model=ServiceKitDetailOut)
def get_service_kit(
    kit_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_service_kit(db, current_tenant_id(current_user), kit_id)


@router.post("/", response_model=ServiceKitDetailOut)
def create_service_kit(
    kit: ServiceKitCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_service_kit(db, current_tenant_id(current_user), kit)


@router.put("/{kit_id}", response_model=ServiceKitDetailOut)
def update_service_kit(
    kit_id: UUID,
    kit: ServiceKitUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_service_kit(db, current_tenant_id(current_user), kit_id, kit)


@router.delete("/{kit_id}", response_model=DeleteResult)
def delete_service_kit(
    kit_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_service_kit_soft(db, current_tenant_id(current_user), kit_id)


@router.post("/{kit_id}/items", response_model=ServiceKitDetailOut)
def add_kit_item(
    kit_id: UUID,
    component: ServiceKitItemCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.add_kit_item(db, current_tenant_id(current_user), kit_id, component)


@router.delete("/{kit_id}/items/{kit_item_id}", response_model=ServiceKitDetailOut)
def remove_kit_item(
    kit_id: UUID,
    kit_item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.remove_kit_item(db, current_tenant_id(current_user), kit_id, kit_item_id)
