import uuid
from sqlalchemy import (
    TIMESTAMP, Boolean, Column, ForeignKey, Integer, Numeric, String, Text, Uuid, func
)
from sqlalchemy.orm import relationship
from shared.core.database import TenantBase


class ItemLink(TenantBase):
    """Item to item relation, e.g. a kit part or an accessory."""
    __tablename__ = "item_links"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    parent_item_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.items.id", ondelete="CASCADE"), nullable=False, index=True)
    linked_item_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.items.id", ondelete="CASCADE"), nullable=False)

    link_type = Column(String(50), nullable=False, default="related")
    quantity = Column(Numeric(15, 4), default=1)
    notes = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    parent_item = relationship("Item", foreign_keys=[parent_item_id])
    linked_item = relationship("Item", foreign_keys=[linked_item_id])


class ItemCustomerLink(TenantBase):
    __tablename__ = "item_customer_links"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    item_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.items.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(Uuid(as_uuid=True), nullable=False)

    customer_item_code = Column(String(100))
    customer_item_name = Column(String(255))
    description = Column(Text)
    internal_code = Column(String(100))
    special_price = Column(Numeric(15, 2))
    discount_percent = Column(Numeric(5, 2))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    item = relationship("Item")


class ItemSupplierLink(TenantBase):
    __tablename__ = "item_supplier_links"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    item_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.items.id", ondelete="CASCADE"), nullable=False, index=True)
    supplier_id = Column(Uuid(as_uuid=True), nullable=False)

    part_number = Column(String(100))
    supplier_description = Column(Text)
    quality_code = Column(String(50))
    barcode = Column(String(100))
    unit_price = Column(Numeric(15, 2))
    lead_time_days = Column(Integer)
    is_preferred = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    item = relationship("Item")
