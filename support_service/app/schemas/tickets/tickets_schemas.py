from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.ticket_enum import TicketHistoryAction, TicketPriority, TicketStatus


class TicketBase(EmptyStringModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = None
    priority: TicketPriority = TicketPriority.MEDIUM
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    action_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    assigned_to_id: Optional[UUID] = None
    estimated_hours: Optional[Decimal] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    custom_fields: Dict[str, Any] = Field(default_factory=dict)


class TicketCreate(TicketBase):
    status: TicketStatus = TicketStatus.OPEN


class TicketUpdate(EmptyStringModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = None
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    action_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    assigned_to_id: Optional[UUID] = None
    estimated_hours: Optional[Decimal] = Field(None, ge=0)
    actual_hours: Optional[Decimal] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    custom_fields: Optional[Dict[str, Any]] = None


class TicketStatusUpdate(EmptyStringModel):
    status: TicketStatus
    comment: Optional[str] = None


class TicketAssign(EmptyStringModel):
    # None unassigns
    assigned_to_id: Optional[UUID] = None
    comment: Optional[str] = None


class TicketOut(BaseModel):
    id: UUID
    tenant_id: UUID
    ticket_number: str
    title: str
    description: Optional[str] = None
    status: TicketStatus
    priority: TicketPriority
    category_id: Optional[UUID] = None
    category_name: Optional[str] = None
    subcategory_id: Optional[UUID] = None
    subcategory_name: Optional[str] = None
    action_id: Optional[UUID] = None
    action_name: Optional[str] = None
    customer_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    assigned_to_id: Optional[UUID] = None
    assigned_to_name: Optional[str] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    due_date: Optional[datetime] = None
    resolution_date: Optional[datetime] = None
    is_overdue: bool = False
    tags: List[str] = []
    custom_fields: Dict[str, Any] = {}
    created_by_id: Optional[UUID] = None
    updated_by_id: Optional[UUID] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TicketListResponse(BaseModel):
    tickets: List[TicketOut]
    total: int


class TicketRequest(CommonQueryParams):
    status: Optional[str] = None
    priority: Optional[str] = None
    assigned_to_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None


class TicketHistoryOut(BaseModel):
    id: UUID
    ticket_id: UUID
    action_type: TicketHistoryAction
    description: str
    field_name: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    performed_by: Optional[UUID] = None
    performed_by_name: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    context: Dict[str, Any] = {}
    created_at: datetime

    class Config:
        from_attributes = True


class TicketHistoryListResponse(BaseModel):
    history: List[TicketHistoryOut]
    total: int
