import re
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.schedule_enum import ScheduleCategory

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def minutes_of_day(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class ScheduleConfiguration(EmptyStringModel):
    work_days: List[int] = Field(..., min_length=1)
    start_time: str
    end_time: str
    break_duration: int = Field(60, ge=0)
    flex_time_window: Optional[int] = Field(None, ge=0)

    @field_validator("work_days")
    @classmethod
    def check_work_days(cls, v: List[int]) -> List[int]:
        invalid = [d for d in v if d < 0 or d > 6]
        if invalid:
            raise ValueError(f"work_days must be between 0 (Sunday) and 6 (Saturday), got {invalid}")
        return sorted(set(v))

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, v: str) -> str:
        if not TIME_PATTERN.match(v):
            raise ValueError("time must use the HH:MM format")
        return v


class ScheduleTemplateBase(EmptyStringModel):
    name: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = None
    category: ScheduleCategory = ScheduleCategory.FIXED
    schedule_type: str = Field("5x2", max_length=50)
    rotation_cycle_days: Optional[int] = Field(None, gt=0)
    configuration: ScheduleConfiguration
    requires_approval: bool = False


class ScheduleTemplateCreate(ScheduleTemplateBase):
    @model_validator(mode="after")
    def check_rotation(self):
        if self.category == ScheduleCategory.ROTATING and not self.rotation_cycle_days:
            raise ValueError("rotating templates require rotation_cycle_days")
        return self


class ScheduleTemplateUpdate(EmptyStringModel):
    name: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = None
    category: Optional[ScheduleCategory] = None
    schedule_type: Optional[str] = Field(None, max_length=50)
    rotation_cycle_days: Optional[int] = Field(None, gt=0)
    configuration: Optional[ScheduleConfiguration] = None
    requires_approval: Optional[bool] = None
    is_active: Optional[bool] = None


class ScheduleTemplateOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    category: ScheduleCategory
    schedule_type: str
    rotation_cycle_days: Optional[int] = None
    configuration: ScheduleConfiguration
    requires_approval: bool
    is_active: bool
    created_by_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def work_days_per_week(self) -> int:
        return len(self.configuration.work_days)

    @computed_field
    @property
    def daily_work_minutes(self) -> int:
        start = minutes_of_day(self.configuration.start_time)
        end = minutes_of_day(self.configuration.end_time)
        span = end - start
        if span <= 0:
            # overnight shift
            span += 24 * 60
        return max(span - self.configuration.break_duration, 0)

    class Config:
        from_attributes = True


class ScheduleTemplateListResponse(BaseModel):
    templates: List[ScheduleTemplateOut]
    total: int


class ScheduleTemplateRequest(CommonQueryParams):
    category: Optional[str] = None
    active: Optional[str] = None
