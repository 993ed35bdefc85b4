# router/contracts/contracts_router.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.schemas import DeleteResult, Lookup, UserToken
from shared.core.tenancy import current_tenant_id, get_tenant_session as get_db

from ...crud.contracts import contracts_crud as crud
from ...schemas.contracts.contracts_schemas import (
    ContractCreate,
    ContractListResponse,
    ContractOut,
    ContractOverview,
    ContractRenew,
    ContractRequest,
    ContractUpdate,
)

router = APIRouter(
    prefix="/api/contracts",
    tags=["Contracts"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=ContractListResponse)
def get_contracts(
    params: ContractRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_contracts(db, current_tenant_id(current_user), params)


@router.get("/overview", response_model=ContractOverview)
def get_overview(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_contract_overview(db, current_tenant_id(current_user))


@router.get("/upcoming-renewals", response_model=List[ContractOut])
def get_upcoming_renewals(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_upcoming_renewals(db, current_tenant_id(current_user), days)


@router.get("/status-lookup", response_model=List[Lookup])
def status_lookup():
    return crud.contract_status_lookup()


@router.get("/type-lookup", response_model=List[Lookup])
def type_lookup():
    return crud.contract_type_lookup()


@router.get("/{contract_id}", response_model=ContractOut)
def get_contract(
    contract_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_contract(db, current_tenant_id(current_user), contract_id)


@router.post("/", response_model=ContractOut)
def create_contract(
    contract: ContractCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_contract(db, current_tenant_id(current_user), contract, current_user)


@router.put("/{contract_id}", response_model=ContractOut)
def update_contract(
    contract_id: UUID,
    contract: ContractUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_contract(db, current_tenant_id(current_user), contract_id, contract)


@router.delete("/{contract_id}", response_model=DeleteResult)
def delete_contract(
    contract_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_contract_soft(db, current_tenant_id(current_user), contract_id)


@router.post("/{contract_id}/renew", response_model=ContractOut)
def renew_contract(
    contract_id: UUID,
    renewal: ContractRenew,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.renew_contract(db, current_tenant_id(current_user), contract_id, renewal)
