from pydantic import BaseModel
from typing import Generic, Optional, TypeVar, Union
from uuid import UUID

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    tenant_id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    role: str
    is_active: Optional[bool] = None
    exp: Optional[int] = None


class CommonQueryParams(EmptyStringModel):
    search: Optional[str] = None
    skip: Optional[int] = 0
    limit: Optional[int] = 100


class Lookup(BaseModel):
    id: Union[str, UUID]  # accepts both UUID and str
    name: str

    class Config:
        from_attributes = True


class JsonOutResult(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    status: str
    status_code: str
    message: str


class AttachmentOut(BaseModel):
    id: UUID
    file_name: str
    content_type: str
    file_size: int
    description: Optional[str] = None
    category: Optional[str] = None

    class Config:
        from_attributes = True


class DeleteResult(BaseModel):
    id: UUID
    deleted: bool = True
