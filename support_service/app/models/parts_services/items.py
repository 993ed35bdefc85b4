import uuid
from sqlalchemy import (
    TIMESTAMP, Boolean, Column, Enum, ForeignKey, Integer, LargeBinary, Numeric, String, Text,
    UniqueConstraint, Uuid, func
)
from sqlalchemy.orm import relationship
from shared.core.database import TenantBase
from ...enum.parts_services_enum import ItemStatus, ItemType, MeasurementUnit


class Item(TenantBase):
    __tablename__ = "items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    code = Column(String(100), nullable=False)
    integration_code = Column(String(100))
    type = Column(
        Enum(ItemType, name="item_type_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    description = Column(Text)
    measurement_unit = Column(
        Enum(MeasurementUnit, name="measurement_unit_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=MeasurementUnit.UN,
    )
    group_name = Column(String(100))
    maintenance_plan = Column(String(255))
    default_checklist = Column(Text)

    cost_price = Column(Numeric(15, 2), default=0)
    sale_price = Column(Numeric(15, 2), default=0)
    minimum_stock = Column(Numeric(15, 4), default=0)
    maximum_stock = Column(Numeric(15, 4))
    reorder_point = Column(Numeric(15, 4))

    status = Column(
        Enum(ItemStatus, name="item_status_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ItemStatus.ACTIVE,
    )
    active = Column(Boolean, nullable=False, default=True)
    created_by_id = Column(Uuid(as_uuid=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    attachments = relationship(
        "ItemAttachment", back_populates="item", cascade="all, delete-orphan")
    stock_items = relationship("StockItem", back_populates="item")

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_items_tenant_code"),
    )


class ItemAttachment(TenantBase):
    __tablename__ = "item_attachments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    item_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.items.id", ondelete="CASCADE"), nullable=False, index=True)

    file_name = Column(String(255), nullable=False)
    content_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_data = Column(LargeBinary, nullable=False)  # bytes stored in the row
    description = Column(Text)
    category = Column(String(50), default="other")

    uploaded_by_id = Column(Uuid(as_uuid=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    item = relationship("Item", back_populates="attachments")
