from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.contract_enum import ContractStatus, ContractType


class ContractBase(EmptyStringModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = None
    contract_type: ContractType = ContractType.SERVICE
    status: ContractStatus = ContractStatus.DRAFT
    customer_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    start_date: date
    end_date: Optional[date] = None
    total_value: Decimal = Field(Decimal("0"), ge=0)
    monthly_value: Optional[Decimal] = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    auto_renewal: bool = False
    renewal_period_months: int = Field(12, ge=1, le=120)
    terms: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ContractCreate(ContractBase):
    pass


class ContractUpdate(EmptyStringModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = None
    contract_type: Optional[ContractType] = None
    status: Optional[ContractStatus] = None
    customer_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_value: Optional[Decimal] = Field(None, ge=0)
    monthly_value: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    auto_renewal: Optional[bool] = None
    renewal_period_months: Optional[int] = Field(None, ge=1, le=120)
    terms: Optional[Dict[str, Any]] = None


class ContractOut(BaseModel):
    id: UUID
    contract_number: str
    title: str
    description: Optional[str] = None
    contract_type: ContractType
    status: ContractStatus
    customer_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    start_date: date
    end_date: Optional[date] = None
    total_value: float = 0
    monthly_value: Optional[float] = None
    currency: str
    auto_renewal: bool
    renewal_period_months: int
    terms: Dict[str, Any] = {}
    days_until_expiry: Optional[int] = None
    is_active: bool
    created_by_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ContractListResponse(BaseModel):
    contracts: List[ContractOut]
    total: int


class ContractRequest(CommonQueryParams):
    status: Optional[str] = None
    contract_type: Optional[str] = None
    customer_id: Optional[UUID] = None


class ContractRenew(EmptyStringModel):
    renewal_period_months: Optional[int] = Field(None, ge=1, le=120)
    new_total_value: Optional[Decimal] = Field(None, ge=0)


class ContractOverview(BaseModel):
    total_contracts: int
    active_contracts: int
    expiring_soon: int
    total_value: float
