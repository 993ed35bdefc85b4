import uuid
from sqlalchemy import TIMESTAMP, Boolean, Column, Enum, Integer, String, Text, Uuid, func
from shared.core.database import JsonB, TenantBase
from ...enum.schedule_enum import ScheduleCategory


class ScheduleTemplate(TenantBase):
    __tablename__ = "schedule_templates"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(
        Enum(ScheduleCategory, name="schedule_category_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ScheduleCategory.FIXED,
    )
    schedule_type = Column(String(50), nullable=False, default="5x2")
    rotation_cycle_days = Column(Integer)
    # work_days, start_time, end_time, break_duration, flex_time_window
    configuration = Column(JsonB, nullable=False, default=dict)
    requires_approval = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    created_by_id = Column(Uuid(as_uuid=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())
