import uuid
from sqlalchemy import (
    Boolean, Column, Date, DateTime, Enum, Integer, Numeric, String, Text, UniqueConstraint, Uuid, func
)
from shared.core.database import JsonB, TenantBase
from ...enum.contract_enum import ContractStatus, ContractType


class Contract(TenantBase):
    __tablename__ = "contracts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    contract_number = Column(String(20), nullable=False)

    title = Column(String(255), nullable=False)
    description = Column(Text)
    contract_type = Column(
        Enum(ContractType, name="contract_type_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ContractType.SERVICE,
    )
    status = Column(
        Enum(ContractStatus, name="contract_status_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ContractStatus.DRAFT,
    )
    customer_id = Column(Uuid(as_uuid=True))
    company_id = Column(Uuid(as_uuid=True))
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)

    total_value = Column(Numeric(15, 2), default=0)
    monthly_value = Column(Numeric(15, 2))
    currency = Column(String(3), nullable=False, default="USD")
    auto_renewal = Column(Boolean, nullable=False, default=False)
    renewal_period_months = Column(Integer, nullable=False, default=12)
    terms = Column(JsonB, nullable=False, default=dict)

    is_active = Column(Boolean, default=True, nullable=False)
    created_by_id = Column(Uuid(as_uuid=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("tenant_id", "contract_number", name="uq_contracts_tenant_number"),
    )
