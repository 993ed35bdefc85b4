from enum import Enum


class ItemType(str, Enum):
    MATERIAL = "material"
    SERVICE = "service"


class MeasurementUnit(str, Enum):
    UN = "UN"
    M = "M"
    M2 = "M2"
    M3 = "M3"
    KG = "KG"
    L = "L"
    H = "H"
    PC = "PC"
    CX = "CX"
    GL = "GL"
    SET = "SET"


class ItemStatus(str, Enum):
    ACTIVE = "active"
    UNDER_REVIEW = "under_review"
    DISCONTINUED = "discontinued"


class MovementType(str, Enum):
    IN = "in"
    OUT = "out"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"
    RETURN = "return"


class LocationType(str, Enum):
    WAREHOUSE = "warehouse"
    STORE = "store"
    VEHICLE = "vehicle"
    CUSTOMER_SITE = "customer_site"
