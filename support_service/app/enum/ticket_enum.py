from enum import Enum


class TicketStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    PENDING = "pending"
    RESOLVED = "resolved"
    CLOSED = "closed"
    CANCELLED = "cancelled"


# statuses that stamp resolution_date
FINISHED_STATUSES = {TicketStatus.RESOLVED, TicketStatus.CLOSED}
# statuses still needing work
OPEN_STATUSES = {TicketStatus.OPEN, TicketStatus.IN_PROGRESS, TicketStatus.PENDING}


class TicketPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


URGENT_PRIORITIES = {TicketPriority.HIGH, TicketPriority.CRITICAL}


class TicketHistoryAction(str, Enum):
    CREATED = "created"
    FIELD_UPDATED = "field_updated"
    STATUS_CHANGED = "status_changed"
    ASSIGNED = "assigned"
    DELETED = "deleted"


class TicketActionType(str, Enum):
    DIAGNOSTIC = "diagnostic"
    REPAIR = "repair"
    INSTALLATION = "installation"
    CONFIGURATION = "configuration"
    ANALYSIS = "analysis"
    SUPPORT = "support"
    OTHER = "other"
