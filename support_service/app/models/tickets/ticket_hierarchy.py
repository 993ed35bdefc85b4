import uuid
from sqlalchemy import (
    TIMESTAMP, Boolean, Column, Enum, ForeignKey, Index, Integer, String, Text, Uuid, func
)
from sqlalchemy.orm import relationship
from shared.core.database import TenantBase
from ...enum.ticket_enum import TicketActionType


class TicketCategory(TenantBase):
    __tablename__ = "ticket_categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    # None = visible to every company of the tenant
    company_id = Column(Uuid(as_uuid=True), nullable=True)

    name = Column(String(255), nullable=False)
    description = Column(Text)
    color = Column(String(7), default="#3B82F6")
    icon = Column(String(50))
    sort_order = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    subcategories = relationship(
        "TicketSubcategory", back_populates="category", order_by="TicketSubcategory.sort_order")
    tickets = relationship("Ticket", back_populates="category")

    __table_args__ = (
        Index("ix_ticket_categories_tenant_company", "tenant_id", "company_id"),
    )


class TicketSubcategory(TenantBase):
    __tablename__ = "ticket_subcategories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    company_id = Column(Uuid(as_uuid=True), nullable=True)
    category_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.ticket_categories.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text)
    color = Column(String(7), default="#3B82F6")
    icon = Column(String(50))
    sort_order = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    category = relationship("TicketCategory", back_populates="subcategories")
    actions = relationship(
        "TicketAction", back_populates="subcategory", order_by="TicketAction.sort_order")


class TicketAction(TenantBase):
    __tablename__ = "ticket_actions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    company_id = Column(Uuid(as_uuid=True), nullable=True)
    subcategory_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.ticket_subcategories.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text)
    color = Column(String(7), default="#3B82F6")
    icon = Column(String(50))
    sort_order = Column(Integer, nullable=False, default=0)
    estimated_time_minutes = Column(Integer, default=0)
    action_type = Column(
        Enum(TicketActionType, name="ticket_action_type_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        default=TicketActionType.OTHER,
    )
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    subcategory = relationship("TicketSubcategory", back_populates="actions")
