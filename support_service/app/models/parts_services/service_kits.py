import uuid
from sqlalchemy import (
    TIMESTAMP, Boolean, Column, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, Uuid, func
)
from sqlalchemy.orm import relationship
from shared.core.database import TenantBase


class ServiceKit(TenantBase):
    __tablename__ = "service_kits"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    code = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    service_type = Column(String(100))
    equipment_type = Column(String(100))
    equipment_model = Column(String(100))
    equipment_brand = Column(String(100))
    maintenance_interval_days = Column(Integer)
    estimated_time_minutes = Column(Integer)
    estimated_cost = Column(Numeric(15, 2))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    items = relationship(
        "ServiceKitItem", back_populates="kit", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_service_kits_tenant_code"),
    )


class ServiceKitItem(TenantBase):
    __tablename__ = "service_kit_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    kit_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.service_kits.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.items.id"), nullable=False)

    quantity = Column(Numeric(15, 4), nullable=False, default=1)
    is_optional = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    kit = relationship("ServiceKit", back_populates="items")
    item = relationship("Item")

    __table_args__ = (
        UniqueConstraint("kit_id", "item_id", name="uq_service_kit_items_kit_item"),
    )
