from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class DetectedLocation(BaseModel):
    country: str
    country_code: str
    timezone: Optional[str] = None
    currency: Optional[str] = None
    market_code: str
    source: str
    confidence: float


class DisplayConfig(BaseModel):
    date_format: str
    time_format: str
    number_format: str
    address_format: str
    name_order: str


class MarketConfig(BaseModel):
    market_code: str
    country_code: str
    country: str
    language_code: str
    currency_code: str
    currency_symbol: str
    timezone: Optional[str] = None
    display_config: DisplayConfig
    validation_rules: Dict[str, Any] = {}
    legal_fields: Dict[str, Any] = {}


class DetectionResult(BaseModel):
    location: DetectedLocation
    market_config: MarketConfig


class CurrencyConversionRequest(EmptyStringModel):
    amount: Decimal = Field(..., ge=0)
    from_currency: str = Field(..., alias="from", min_length=3, max_length=3)
    to_currency: str = Field(..., alias="to", min_length=3, max_length=3)


class CurrencyConversionOut(BaseModel):
    original_amount: float
    original_currency: str
    converted_amount: float
    target_currency: str
    exchange_rate: float
    formatted_amount: str


class MarketInitializeRequest(EmptyStringModel):
    market_code: Optional[str] = Field(None, min_length=2, max_length=2)


class MarketInitializeOut(BaseModel):
    tenant_id: str
    market_code: str
    market_config: MarketConfig
