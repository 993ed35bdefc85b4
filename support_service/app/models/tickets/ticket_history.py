import uuid
from datetime import datetime, timezone
from sqlalchemy import TIMESTAMP, Column, Enum, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import JsonB, TenantBase
from ...enum.ticket_enum import TicketHistoryAction


class TicketHistory(TenantBase):
    """Append-only audit row, one per changed field or lifecycle event."""
    __tablename__ = "ticket_history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    ticket_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenant.tickets.id", ondelete="CASCADE"), nullable=False)

    action_type = Column(
        Enum(TicketHistoryAction, name="ticket_history_action_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    description = Column(Text, nullable=False)
    field_name = Column(String(100))
    old_value = Column(Text)
    new_value = Column(Text)

    performed_by = Column(Uuid(as_uuid=True))
    performed_by_name = Column(String(255))
    ip_address = Column(String(64))
    user_agent = Column(Text)
    context = Column("metadata", JsonB, nullable=False, default=dict)

    # set in python for sub-second ordering
    created_at = Column(TIMESTAMP(timezone=True), nullable=False,
                        default=lambda: datetime.now(timezone.utc))

    ticket = relationship("Ticket", back_populates="history")

    __table_args__ = (
        Index("ix_ticket_history_ticket_created", "ticket_id", "created_at"),
    )
