# 运输报价相关接口 -> 前端 Pricing Management 页面调用

from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from transport_pricing.db.session import get_db
from transport_pricing.repository.pricing_config_repo import (
    activate_config,
    get_config,
    list_configs,
    resolve_config,
    to_dict,
)
from transport_pricing.services.pricing.errors import (
    ConfigIncompleteError,
    ConfigNotFoundError,
    InvalidRequestError,
)
from transport_pricing.services.pricing.models import PricingConfig, ShipmentRequest
from transport_pricing.services.pricing.pricing_service import quote_shipment


router = APIRouter(
    prefix="/transportation/pricing-configs",
    tags=["pricing"],
)


class AdditionalCosts(BaseModel):
    insurance_rate: Optional[float] = None
    toll_rates: Dict[str, Optional[float]] = Field(default_factory=dict)
    parking_fee_per_day: Optional[float] = None


class PricingConfigOut(BaseModel):
    id: Optional[int] = None
    client_id: str
    name: str
    type: str
    active: bool
    version: str
    description: Optional[str] = None

    # 费率表
    base_rates: Dict[str, Optional[float]]
    distance_rates: Dict[str, Optional[float]]
    weight_rates: Dict[str, Optional[float]]
    special_handling_rates: Dict[str, Optional[float]]
    surcharges: Dict[str, Optional[float]]
    additional_costs: AdditionalCosts
    holidays: List[date] = Field(default_factory=list)

    # 币种（展示用）
    currency_code: str
    currency_symbol: str
    decimal_places: int

    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PricingPreviewIn(BaseModel):
    client_id: str
    config_id: Optional[int] = None

    truck_capacity_tons: float
    cargo_weight: float
    cargo_unit: str = "kg"
    distance_km: float = 0.0
    route_type: str = "local"
    pickup_at: Optional[datetime] = None
    delivery_at: Optional[datetime] = None

    requires_refrigeration: bool = False
    requires_special_equipment: bool = False
    requires_escort: bool = False
    is_urgent_delivery: bool = False


class PricingPreviewOut(BaseModel):
    config_id: Optional[int] = None
    config_version: str

    base_rate: float
    distance_rate: float
    weight_rate: float
    special_handling_rate: float
    fuel_surcharge: float
    peak_hour_surcharge: float
    weekend_surcharge: float
    holiday_surcharge: float
    overtime_rate: float
    insurance_cost: float
    toll_fees: float
    parking_fees: float
    estimated_cost: float

    subtotal: float
    duration_days: int
    truck_tier: str
    weight_tier: str
    currency_code: str
    currency_symbol: str
    decimal_places: int


@router.get("", response_model=List[PricingConfigOut])
def get_configs(
    response: Response,
    client_id: str = Query(..., description="客户标识"),
    db: Session = Depends(get_db),
):
    response.headers["Cache-Control"] = "no-store"
    return [_serialize_row(row) for row in list_configs(db, client_id)]


@router.get("/default", response_model=PricingConfigOut)
def get_default_config(
    response: Response,
    client_id: str = Query(..., description="客户标识"),
    db: Session = Depends(get_db),
):
    """该 client 当前生效的配置；没有则返回系统默认。"""
    response.headers["Cache-Control"] = "no-store"
    return _serialize_config(resolve_config(db, client_id))


@router.post("/preview", response_model=PricingPreviewOut)
def preview_pricing(payload: PricingPreviewIn, db: Session = Depends(get_db)):
    request = ShipmentRequest(**payload.model_dump(exclude={"client_id", "config_id"}))
    try:
        config, breakdown = quote_shipment(db, payload.client_id, request, config_id=payload.config_id)
    except ConfigNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InvalidRequestError as exc:
        raise HTTPException(
            status_code=422,
            detail={"field": exc.field, "message": str(exc)},
        )
    except ConfigIncompleteError as exc:
        # 配置数据本身有问题，调用方改请求也没用
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "pricing config is incomplete", "missing": list(exc.missing)},
        )

    data = {k: _decimal_to_float(v) for k, v in breakdown.to_dict().items()}
    return PricingPreviewOut(config_id=config.id, config_version=config.version, **data)


@router.get("/{config_id}", response_model=PricingConfigOut)
def get_one_config(config_id: int, response: Response, db: Session = Depends(get_db)):
    response.headers["Cache-Control"] = "no-store"
    row = get_config(db, config_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pricing config not found")
    return _serialize_row(row)


@router.post("/{config_id}/activate", response_model=PricingConfigOut)
def activate_one_config(config_id: int, db: Session = Depends(get_db)):
    try:
        row = activate_config(db, config_id)
    except ConfigNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return _serialize_row(row)


def _decimal_to_float(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def _format_datetime(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return value.replace(microsecond=0).isoformat()
    return None


def _serialize_row(row: Any) -> PricingConfigOut:
    data = to_dict(row)
    data["created_at"] = _format_datetime(data.get("created_at"))
    data["updated_at"] = _format_datetime(data.get("updated_at"))
    return PricingConfigOut.model_validate(data)


def _serialize_config(config: PricingConfig) -> PricingConfigOut:
    return PricingConfigOut.model_validate(config.to_dict())
