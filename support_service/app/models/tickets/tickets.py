import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    TIMESTAMP, Boolean, Column, Enum, ForeignKey, Index, Numeric, String, Text, UniqueConstraint, Uuid, func
)
from sqlalchemy.orm import relationship
from shared.core.database import JsonB, TenantBase
from ...enum.ticket_enum import FINISHED_STATUSES, TicketPriority, TicketStatus


class Ticket(TenantBase):
    __tablename__ = "tickets"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    ticket_number = Column(String(20), nullable=False)

    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(
        Enum(TicketStatus, name="ticket_status_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        default=TicketStatus.OPEN,
        nullable=False,
    )
    priority = Column(
        Enum(TicketPriority, name="ticket_priority_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        default=TicketPriority.MEDIUM,
        nullable=False,
    )

    category_id = Column(Uuid(as_uuid=True), ForeignKey("tenant.ticket_categories.id"))
    subcategory_id = Column(Uuid(as_uuid=True), ForeignKey("tenant.ticket_subcategories.id"))
    action_id = Column(Uuid(as_uuid=True), ForeignKey("tenant.ticket_actions.id"))

    customer_id = Column(Uuid(as_uuid=True))
    company_id = Column(Uuid(as_uuid=True))
    location_id = Column(Uuid(as_uuid=True))
    # users live in the public schema, no FK across schemas
    assigned_to_id = Column(Uuid(as_uuid=True))

    estimated_hours = Column(Numeric(8, 2))
    actual_hours = Column(Numeric(8, 2))
    due_date = Column(TIMESTAMP(timezone=True))
    resolution_date = Column(TIMESTAMP(timezone=True))

    tags = Column(JsonB, nullable=False, default=list)
    custom_fields = Column(JsonB, nullable=False, default=dict)

    created_by_id = Column(Uuid(as_uuid=True))
    updated_by_id = Column(Uuid(as_uuid=True))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    category = relationship("TicketCategory", back_populates="tickets")
    subcategory = relationship("TicketSubcategory")
    action = relationship("TicketAction")
    history = relationship(
        "TicketHistory", back_populates="ticket", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("tenant_id", "ticket_number", name="uq_tickets_tenant_number"),
        Index("ix_tickets_tenant_status_created", "tenant_id", "status", "created_at"),
        Index("ix_tickets_assigned_status", "assigned_to_id", "status"),
        Index("ix_tickets_category", "category_id"),
    )

    @property
    def is_overdue(self) -> bool:
        if not self.due_date or self.status in FINISHED_STATUSES:
            return False
        due = self.due_date
        if due.tzinfo is None:
            due = due.replace(tzinfo=timezone.utc)
        return due < datetime.now(timezone.utc)
