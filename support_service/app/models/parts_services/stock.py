import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    TIMESTAMP, Boolean, Column, Enum, ForeignKey, Numeric, String, Text, UniqueConstraint, Uuid, func
)
from sqlalchemy.orm import relationship
from shared.core.database import JsonB, TenantBase
from ...enum.parts_services_enum import LocationType, MovementType


class Warehouse(TenantBase):
    __tablename__ = "warehouses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    location_type = Column(
        Enum(LocationType, name="location_type_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=LocationType.WAREHOUSE,
    )
    address = Column(JsonB, nullable=False, default=dict)
    capacity = Column(Numeric(15, 2))
    allow_negative_stock = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    stock_items = relationship("StockItem", back_populates="warehouse")

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_warehouses_tenant_code"),
    )


class StockItem(TenantBase):
    """Stock level of one item in one warehouse."""
    __tablename__ = "stock_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    item_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.items.id"), nullable=False, index=True)
    warehouse_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.warehouses.id"), nullable=False, index=True)

    current_quantity = Column(Numeric(15, 4), nullable=False, default=0)
    reserved_quantity = Column(Numeric(15, 4), nullable=False, default=0)
    minimum_stock = Column(Numeric(15, 4), default=0)
    maximum_stock = Column(Numeric(15, 4))
    reorder_point = Column(Numeric(15, 4))
    average_cost = Column(Numeric(15, 4), default=0)
    last_movement_date = Column(TIMESTAMP(timezone=True))
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    item = relationship("Item", back_populates="stock_items")
    warehouse = relationship("Warehouse", back_populates="stock_items")

    __table_args__ = (
        UniqueConstraint("item_id", "warehouse_id", name="uq_stock_items_item_warehouse"),
    )

    @property
    def available_quantity(self):
        return (self.current_quantity or 0) - (self.reserved_quantity or 0)

    @property
    def is_low_stock(self) -> bool:
        threshold = self.reorder_point if self.reorder_point is not None else self.minimum_stock
        return threshold is not None and threshold > 0 and (self.current_quantity or 0) <= threshold


class StockMovement(TenantBase):
    __tablename__ = "stock_movements"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    movement_number = Column(String(20), nullable=False, unique=True)
    movement_type = Column(
        Enum(MovementType, name="movement_type_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    item_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.items.id"), nullable=False, index=True)
    from_warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("tenant.warehouses.id"))
    to_warehouse_id = Column(Uuid(as_uuid=True), ForeignKey("tenant.warehouses.id"))

    quantity = Column(Numeric(15, 4), nullable=False)
    unit_cost = Column(Numeric(15, 4))
    total_cost = Column(Numeric(15, 2))

    reference_type = Column(String(50))
    reference_id = Column(Uuid(as_uuid=True))
    reference_number = Column(String(100))
    reason = Column(String(255))
    notes = Column(Text)

    created_by_id = Column(Uuid(as_uuid=True))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False,
                        default=lambda: datetime.now(timezone.utc))

    item = relationship("Item")
    from_warehouse = relationship("Warehouse", foreign_keys=[from_warehouse_id])
    to_warehouse = relationship("Warehouse", foreign_keys=[to_warehouse_id])
