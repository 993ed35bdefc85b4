# crud/contracts/contracts_crud.py
import logging
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.contract_enum import ContractStatus, ContractType
from ...models.contracts.contracts import Contract
from ...schemas.contracts.contracts_schemas import (
    ContractCreate,
    ContractListResponse,
    ContractOut,
    ContractOverview,
    ContractRenew,
    ContractRequest,
    ContractUpdate,
)

logger = logging.getLogger(__name__)

EXPIRY_WINDOW_DAYS = 30


def contract_to_out(contract: Contract) -> ContractOut:
    days_until_expiry = None
    if contract.end_date:
        days_until_expiry = (contract.end_date - date.today()).days
    return ContractOut.model_validate({**contract.__dict__, "days_until_expiry": days_until_expiry})


def build_contract_filters(tenant_id: UUID, params: ContractRequest):
    filters = [Contract.tenant_id == tenant_id, Contract.is_active == True]

    if params.status and params.status.lower() != "all":
        filters.append(Contract.status == ContractStatus(params.status.lower()))

    if params.contract_type and params.contract_type.lower() != "all":
        filters.append(Contract.contract_type == ContractType(params.contract_type.lower()))

    if params.customer_id:
        filters.append(Contract.customer_id == params.customer_id)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(
            Contract.title.ilike(search_term),
            Contract.contract_number.ilike(search_term),
            Contract.description.ilike(search_term)
        ))

    return filters


def get_contracts(db: Session, tenant_id: UUID, params: ContractRequest) -> ContractListResponse:
    try:
        filters = build_contract_filters(tenant_id, params)
    except ValueError as e:
        return error_response(message=str(e), status_code=str(AppStatusCode.INVALID_INPUT))

    base_query = db.query(Contract).filter(*filters)
    total = base_query.count()

    contracts = (
        base_query
        .order_by(Contract.start_date.desc(), Contract.contract_number.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {
        "contracts": [contract_to_out(c) for c in contracts],
        "total": total
    }


def get_contract_overview(db: Session, tenant_id: UUID) -> ContractOverview:
    today = date.today()
    horizon = today + timedelta(days=EXPIRY_WINDOW_DAYS)
    base = [Contract.tenant_id == tenant_id, Contract.is_active == True]

    total = db.query(func.count(Contract.id)).filter(*base).scalar() or 0
    active = db.query(func.count(Contract.id)).filter(
        *base, Contract.status == ContractStatus.ACTIVE
    ).scalar() or 0
    expiring = db.query(func.count(Contract.id)).filter(
        *base,
        Contract.status == ContractStatus.ACTIVE,
        Contract.end_date.isnot(None),
        Contract.end_date >= today,
        Contract.end_date <= horizon
    ).scalar() or 0
    total_value = db.query(func.coalesce(func.sum(Contract.total_value), 0)).filter(
        *base, Contract.status == ContractStatus.ACTIVE
    ).scalar() or 0

    return {
        "total_contracts": total,
        "active_contracts": active,
        "expiring_soon": expiring,
        "total_value": round(float(total_value), 2),
    }


def get_contract_by_id(db: Session, tenant_id: UUID, contract_id: UUID) -> Optional[Contract]:
    return db.query(Contract).filter(
        Contract.id == contract_id,
        Contract.tenant_id == tenant_id,
        Contract.is_active == True
    ).first()


def get_contract(db: Session, tenant_id: UUID, contract_id: UUID) -> ContractOut:
    contract = get_contract_by_id(db, tenant_id, contract_id)
    if not contract:
        return not_found_response("Contract")
    return contract_to_out(contract)


def generate_contract_number(db: Session, tenant_id: UUID) -> str:
    count = db.query(func.count(Contract.id)).filter(Contract.tenant_id == tenant_id).scalar() or 0
    return f"CTR-{count + 1:06d}"


def create_contract(db: Session, tenant_id: UUID, contract: ContractCreate, current_user: UserToken) -> ContractOut:
    db_contract = Contract(
        **contract.model_dump(),
        tenant_id=tenant_id,
        contract_number=generate_contract_number(db, tenant_id),
        created_by_id=UUID(current_user.user_id)
    )
    db.add(db_contract)
    db.commit()
    db.refresh(db_contract)
    logger.info("Contract %s created in tenant %s", db_contract.contract_number, tenant_id)
    return contract_to_out(db_contract)


def update_contract(db: Session, tenant_id: UUID, contract_id: UUID, contract: ContractUpdate) -> ContractOut:
    db_contract = get_contract_by_id(db, tenant_id, contract_id)
    if not db_contract:
        return not_found_response("Contract")

    update_data = contract.model_dump(exclude_unset=True)
    start_date = update_data.get("start_date") or db_contract.start_date
    end_date = update_data["end_date"] if "end_date" in update_data else db_contract.end_date
    if end_date and end_date < start_date:
        return error_response(
            message="end_date must not be before start_date",
            status_code=str(AppStatusCode.INVALID_INPUT)
        )

    for key, value in update_data.items():
        if value is None and key in ("title", "contract_type", "status", "start_date", "total_value",
                                     "currency", "auto_renewal", "renewal_period_months", "terms"):
            continue
        setattr(db_contract, key, value)

    db.commit()
    db.refresh(db_contract)
    return contract_to_out(db_contract)


def delete_contract_soft(db: Session, tenant_id: UUID, contract_id: UUID):
    db_contract = get_contract_by_id(db, tenant_id, contract_id)
    if not db_contract:
        return not_found_response("Contract")

    db_contract.is_active = False
    db.commit()
    return {"id": contract_id, "deleted": True}


def renew_contract(db: Session, tenant_id: UUID, contract_id: UUID, renewal: ContractRenew) -> ContractOut:
    """Extends the end date by the renewal period and reactivates the contract."""
    db_contract = get_contract_by_id(db, tenant_id, contract_id)
    if not db_contract:
        return not_found_response("Contract")

    if db_contract.status == ContractStatus.CANCELLED:
        return error_response(
            message="Cancelled contracts cannot be renewed",
            status_code=str(AppStatusCode.OPERATION_FAILED)
        )

    months = renewal.renewal_period_months or db_contract.renewal_period_months
    base_date = db_contract.end_date or db_contract.start_date
    db_contract.end_date = base_date + relativedelta(months=months)
    db_contract.renewal_period_months = months
    db_contract.status = ContractStatus.ACTIVE
    if renewal.new_total_value is not None:
        db_contract.total_value = renewal.new_total_value

    db.commit()
    db.refresh(db_contract)
    logger.info("Contract %s renewed until %s", db_contract.contract_number, db_contract.end_date)
    return contract_to_out(db_contract)


def get_upcoming_renewals(db: Session, tenant_id: UUID, days: int) -> List[ContractOut]:
    today = date.today()
    contracts = (
        db.query(Contract)
        .filter(
            Contract.tenant_id == tenant_id,
            Contract.is_active == True,
            Contract.status == ContractStatus.ACTIVE,
            Contract.end_date.isnot(None),
            Contract.end_date >= today,
            Contract.end_date <= today + timedelta(days=days)
        )
        .order_by(Contract.end_date.asc())
        .all()
    )
    return [contract_to_out(c) for c in contracts]


def contract_status_lookup() -> List[Lookup]:
    return [Lookup(id=status.value, name=status.name.replace("_", " ").title()) for status in ContractStatus]


def contract_type_lookup() -> List[Lookup]:
    return [Lookup(id=kind.value, name=kind.name.replace("_", " ").title()) for kind in ContractType]
