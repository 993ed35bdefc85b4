from enum import Enum


class ContractStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class ContractType(str, Enum):
    SERVICE = "service"
    MAINTENANCE = "maintenance"
    SUPPORT = "support"
    RENTAL = "rental"
    LICENSE = "license"
