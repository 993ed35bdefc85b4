from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.ticket_enum import TicketActionType

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class HierarchyNodeBase(EmptyStringModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    icon: Optional[str] = Field(None, max_length=50)
    sort_order: int = 0
    company_id: Optional[UUID] = None


class HierarchyNodeUpdate(EmptyStringModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    icon: Optional[str] = Field(None, max_length=50)
    sort_order: Optional[int] = None
    active: Optional[bool] = None


# ---------------- Category ----------------
class TicketCategoryCreate(HierarchyNodeBase):
    pass


class TicketCategoryUpdate(HierarchyNodeUpdate):
    pass


class TicketCategoryOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int
    company_id: Optional[UUID] = None
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------------- Subcategory ----------------
class TicketSubcategoryCreate(HierarchyNodeBase):
    category_id: UUID


class TicketSubcategoryUpdate(HierarchyNodeUpdate):
    pass


class TicketSubcategoryOut(TicketCategoryOut):
    category_id: UUID


# ---------------- Action ----------------
class TicketActionCreate(HierarchyNodeBase):
    subcategory_id: UUID
    estimated_time_minutes: int = Field(0, ge=0)
    action_type: TicketActionType = TicketActionType.OTHER


class TicketActionUpdate(HierarchyNodeUpdate):
    estimated_time_minutes: Optional[int] = Field(None, ge=0)
    action_type: Optional[TicketActionType] = None


class TicketActionOut(TicketCategoryOut):
    subcategory_id: UUID
    estimated_time_minutes: Optional[int] = 0
    action_type: Optional[TicketActionType] = None


# ---------------- Tree ----------------
class SubcategoryTreeNode(TicketSubcategoryOut):
    actions: List[TicketActionOut] = []


class CategoryTreeNode(TicketCategoryOut):
    subcategories: List[SubcategoryTreeNode] = []


class HierarchyTreeResponse(BaseModel):
    categories: List[CategoryTreeNode]
    total_categories: int
    total_subcategories: int
    total_actions: int
