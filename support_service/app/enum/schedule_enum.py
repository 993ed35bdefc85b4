from enum import Enum


class ScheduleCategory(str, Enum):
    FIXED = "fixed"
    ROTATING = "rotating"
    FLEXIBLE = "flexible"
    SHIFT = "shift"
