# crud/geolocation/geolocation_crud.py
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.models.tenants import Tenant
from shared.utils.app_status_code import AppStatusCode
from ...data.markets import CURRENCY_SYMBOLS, MARKETS
from ...schemas.geolocation.geolocation_schemas import (
    CurrencyConversionOut,
    CurrencyConversionRequest,
    DetectionResult,
    MarketConfig,
    MarketInitializeOut,
)

logger = logging.getLogger(__name__)

COUNTRY_HEADERS = ("cf-ipcountry", "x-country-code")
HEADER_CONFIDENCE = 0.9
LANGUAGE_CONFIDENCE = 0.6
DEFAULT_CONFIDENCE = 0.1
CENTS = Decimal("0.01")


def _region_from_accept_language(value: str) -> Optional[str]:
    """First known market among the Accept-Language tags, e.g. 'pt-BR,pt;q=0.9' -> 'BR'."""
    for part in value.split(","):
        tag = part.split(";")[0].strip()
        pieces = tag.replace("_", "-").split("-")
        if len(pieces) >= 2 and pieces[-1].upper() in MARKETS:
            return pieces[-1].upper()
    return None


def resolve_market(headers: Mapping[str, str]) -> Tuple[str, str, float]:
    """(market_code, source, confidence) for the request headers."""
    for header in COUNTRY_HEADERS:
        code = (headers.get(header) or "").strip().upper()
        if code in MARKETS:
            return code, header, HEADER_CONFIDENCE

    region = _region_from_accept_language(headers.get("accept-language") or "")
    if region:
        return region, "accept-language", LANGUAGE_CONFIDENCE

    return settings.DEFAULT_MARKET, "default", DEFAULT_CONFIDENCE


def market_config(market_code: str) -> MarketConfig:
    code = (market_code or "").upper()
    market = MARKETS.get(code)
    if not market:
        return not_found_response(f"Market '{market_code}'")

    return MarketConfig(
        market_code=code,
        country_code=code,
        country=market["country"],
        language_code=market["language_code"],
        currency_code=market["currency_code"],
        currency_symbol=CURRENCY_SYMBOLS.get(market["currency_code"], market["currency_code"]),
        timezone=market.get("timezone"),
        display_config=market["display_config"],
        validation_rules=market.get("validation_rules", {}),
        legal_fields=market.get("legal_fields", {}),
    )


def detect_location(headers: Mapping[str, str]) -> DetectionResult:
    code, source, confidence = resolve_market(headers)
    config = market_config(code)
    logger.debug("Detected market %s from %s", code, source)
    return {
        "location": {
            "country": config.country,
            "country_code": code,
            "timezone": config.timezone,
            "currency": config.currency_code,
            "market_code": code,
            "source": source,
            "confidence": confidence,
        },
        "market_config": config,
    }


def format_money(amount: Decimal, currency: str) -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    return f"{symbol}{amount:,.2f}"


def convert_currency(request: CurrencyConversionRequest) -> CurrencyConversionOut:
    source = request.from_currency.upper()
    target = request.to_currency.upper()
    rates = settings.CURRENCY_RATES

    unknown = [c for c in (source, target) if c not in rates]
    if unknown:
        return error_response(
            message=f"Unsupported currency: {', '.join(unknown)}",
            status_code=str(AppStatusCode.INVALID_INPUT)
        )

    # rates are units per 1 USD
    rate = Decimal(str(rates[target])) / Decimal(str(rates[source]))
    converted = (request.amount * rate).quantize(CENTS, rounding=ROUND_HALF_UP)

    return {
        "original_amount": float(request.amount),
        "original_currency": source,
        "converted_amount": float(converted),
        "target_currency": target,
        "exchange_rate": float(rate.quantize(Decimal("0.000001"), rounding=ROUND_HALF_UP)),
        "formatted_amount": format_money(converted, target),
    }


def initialize_market(
    db: Session, tenant_id: UUID, market_code: Optional[str], headers: Mapping[str, str]
) -> MarketInitializeOut:
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        return not_found_response("Tenant")

    code = market_code.upper() if market_code else resolve_market(headers)[0]
    config = market_config(code)

    # reassign so the JSON column is flagged dirty
    tenant.settings = {
        **(tenant.settings or {}),
        "market_code": code,
        "currency": config.currency_code,
        "language": config.language_code,
        "timezone": config.timezone,
    }
    db.commit()
    logger.info("Tenant %s initialised for market %s", tenant_id, code)
    return {"tenant_id": str(tenant_id), "market_code": code, "market_config": config}
