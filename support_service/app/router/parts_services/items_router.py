# router/parts_services/items_router.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.schemas import AttachmentOut, DeleteResult, Lookup, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session as get_db

from ...crud.parts_services import items_crud as crud
from ...schemas.parts_services.items_schemas import (
    ItemCreate,
    ItemListResponse,
    ItemOut,
    ItemRequest,
    ItemUpdate,
)

router = APIRouter(
    prefix="/api/parts-services",
    tags=["Parts & Services"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/items", response_model=ItemListResponse)
def get_items(
    params: ItemRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_items(db, current_tenant_id(current_user), params)


@router.get("/items/lookup", response_model=List[Lookup])
def item_lookup(
    type: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.item_lookup(db, current_tenant_id(current_user), type)


@router.get("/measurement-unit-lookup", response_model=List[Lookup])
def measurement_unit_lookup():
    return crud.measurement_unit_lookup()


@router.get("/items/{item_id}", response_model=ItemOut)
def get_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_item(db, current_tenant_id(current_user), item_id)


@router.post("/items", response_model=ItemOut)
def create_item(
    item: ItemCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_item(db, current_tenant_id(current_user), item, current_user)


@router.put("/items/{item_id}", response_model=ItemOut)
def update_item(
    item_id: UUID,
    item: ItemUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_item(db, current_tenant_id(current_user), item_id, item)


@router.delete("/items/{item_id}", response_model=DeleteResult)
def delete_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_item_soft(db, current_tenant_id(current_user), item_id)


# ---------------- Attachments ----------------
@router.get("/items/{item_id}/attachments", response_model=List[AttachmentOut])
def get_item_attachments(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_item_attachments(db, current_tenant_id(current_user), item_id)


@router.post("/items/{item_id}/attachments", response_model=AttachmentOut)
async def upload_item_attachment(
    item_id: UUID,
    file: UploadFile = File(...),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return await crud.add_item_attachment(
        db, current_tenant_id(current_user), item_id, file, description, category, current_user
    )


@router.get("/attachments/{attachment_id}/download")
def download_attachment(
    attachment_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    attachment = crud.get_attachment(db, current_tenant_id(current_user), attachment_id)
    return Response(
        content=attachment.file_data,
        media_type=attachment.content_type,
        headers={"Content-Disposition": f'attachment; filename="{attachment.file_name}"'}
    )


@router.delete("/attachments/{attachment_id}", response_model=DeleteResult)
def delete_attachment(
    attachment_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_attachment(db, current_tenant_id(current_user), attachment_id)
