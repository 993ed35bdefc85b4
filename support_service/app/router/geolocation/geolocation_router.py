# router/geolocation/geolocation_router.py
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from shared.core.auth import allow_tenant_admin
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.core.tenancy import current_tenant_id

from ...crud.geolocation import geolocation_crud as crud
from ...schemas.geolocation.geolocation_schemas import (
    CurrencyConversionOut,
    CurrencyConversionRequest,
    DetectionResult,
    MarketConfig,
    MarketInitializeOut,
    MarketInitializeRequest,
)

# detection and conversion are used before login, so no router-wide auth
router = APIRouter(prefix="/api/geolocation", tags=["Geolocation"])


@router.post("/detect", response_model=DetectionResult)
def detect_location(request: Request):
    return crud.detect_location(request.headers)


@router.get("/config", response_model=MarketConfig)
def get_market_config(market_code: str = Query(..., min_length=2, max_length=2)):
    return crud.market_config(market_code)


@router.post("/convert-currency", response_model=CurrencyConversionOut)
def convert_currency(payload: CurrencyConversionRequest):
    return crud.convert_currency(payload)


@router.post("/initialize-market", response_model=MarketInitializeOut)
def initialize_market(
    payload: MarketInitializeRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_tenant_admin)
):
    return crud.initialize_market(db, current_tenant_id(current_user), payload.market_code, request.headers)
