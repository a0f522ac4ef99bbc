# 运输报价计算（纯函数：PricingConfig + ShipmentRequest -> PricingBreakdown）

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo
import logging

from transport_pricing.core.config import settings
from transport_pricing.services.pricing.errors import ConfigIncompleteError, InvalidRequestError
from transport_pricing.services.pricing.models import (
    ADDITIONAL_COST_KEYS,
    MAX_DECIMAL_PLACES,
    PER_DAY_HANDLING,
    REQUIRED_RATE_KEYS,
    ROUTE_TYPES,
    PricingBreakdown,
    PricingConfig,
    ShipmentRequest,
)
from transport_pricing.services.pricing.rounding import round_amount, to_decimal
from transport_pricing.services.pricing.surcharges import (
    HolidayPredicate,
    compute_duration_days,
    evaluate_surcharges,
    to_local,
    to_utc,
)
from transport_pricing.services.pricing.tiers import (
    classify_truck_tier,
    classify_weight_tier,
    normalize_weight_kg,
)


logger = logging.getLogger(__name__)

_PRICING_TZ = ZoneInfo(getattr(settings, "PRICING_TIMEZONE", "Asia/Manila"))
_ZERO = Decimal("0")

# 特殊处理标记 -> special_handling_rates 的 key
_HANDLING_FLAGS = {
    "refrigeration": "requires_refrigeration",
    "special_equipment": "requires_special_equipment",
    "escort": "requires_escort",
}


# --------- 配置整体校验 ----------
def _rate(table, key: str, path: str, bad: List[str]) -> Decimal:
    raw = table.get(key) if hasattr(table, "get") else None
    val = to_decimal(raw)
    if val is None or not val.is_finite() or val < 0:
        bad.append(path)
        return _ZERO
    return val


def resolve_rates(config: PricingConfig) -> Dict[str, Dict[str, Decimal]]:
    """
    把配置里的费率表一次性转成 Decimal，并收集所有缺失 / 非法的 key。
    缺 key 是配置数据的 bug，不能按 0 计价：只要有一个缺失就整体拒绝。
    """
    bad: List[str] = []
    rates: Dict[str, Dict[str, Decimal]] = {}

    for section, keys in REQUIRED_RATE_KEYS.items():
        table = getattr(config, section)
        rates[section] = {k: _rate(table, k, f"{section}.{k}", bad) for k in keys}

    extra = config.additional_costs
    rates["additional_costs"] = {
        k: _rate(extra, k, f"additional_costs.{k}", bad) for k in ADDITIONAL_COST_KEYS
    }
    tolls = extra.get("toll_rates") if hasattr(extra, "get") else None
    rates["toll_rates"] = {
        k: _rate(tolls or {}, k, f"additional_costs.toll_rates.{k}", bad) for k in ROUTE_TYPES
    }

    places = config.decimal_places
    if isinstance(places, bool) or not isinstance(places, int) or not 0 <= places <= MAX_DECIMAL_PLACES:
        bad.append("decimal_places")

    if bad:
        raise ConfigIncompleteError(bad, config_id=config.id)
    return rates


# --------- 请求校验 ----------
@dataclass(frozen=True)
class _NormalizedRequest:
    capacity_tons: Decimal
    weight_kg: Decimal
    distance_km: Decimal
    route_type: str
    pickup_at: Optional[datetime]
    delivery_at: Optional[datetime]


def _magnitude(value, field: str) -> Decimal:
    val = to_decimal(value)
    if val is None or not val.is_finite():
        raise InvalidRequestError(field, f"not a number: {value!r}")
    if val < 0:
        raise InvalidRequestError(field, "must not be negative")
    return val


def normalize_request(request: ShipmentRequest, tz: tzinfo) -> _NormalizedRequest:
    capacity = _magnitude(request.truck_capacity_tons, "truck_capacity_tons")
    weight = _magnitude(request.cargo_weight, "cargo_weight")
    distance = _magnitude(request.distance_km, "distance_km")

    route_type = (request.route_type or "").strip().lower()
    if route_type not in ROUTE_TYPES:
        raise InvalidRequestError("route_type", f"unknown route type {request.route_type!r}")

    pickup = to_local(request.pickup_at, tz)
    delivery = to_local(request.delivery_at, tz)
    if pickup is not None and delivery is not None and to_utc(delivery) < to_utc(pickup):
        raise InvalidRequestError("delivery_at", "must not be earlier than pickup_at")

    return _NormalizedRequest(
        capacity_tons=capacity,
        weight_kg=normalize_weight_kg(weight, request.cargo_unit),
        distance_km=distance,
        route_type=route_type,
        pickup_at=pickup,
        delivery_at=delivery,
    )


# --------- 顶层：一次报价 ----------
def calculate(
    config: PricingConfig,
    request: ShipmentRequest,
    is_holiday: Optional[HolidayPredicate] = None,
    *,
    tz: Optional[tzinfo] = None,
) -> PricingBreakdown:
    """
    固定顺序计算各分项；每一步只读配置和之前算出的值。
    所有分项保留全精度参与求和，estimated_cost 最后取整一次；
    分项自身也各自取整用于展示，两者在末位最多差 1 个单位，这是允许的。
    """
    rates = resolve_rates(config)
    req = normalize_request(request, tz or _PRICING_TZ)
    places = config.decimal_places

    truck_tier = classify_truck_tier(req.capacity_tons)
    weight_tier = classify_weight_tier(req.weight_kg)
    duration_days = compute_duration_days(req.pickup_at, req.delivery_at)
    days = Decimal(duration_days)

    base_rate = rates["base_rates"][truck_tier]
    distance_rate = rates["distance_rates"][req.route_type] * req.distance_km
    weight_rate = rates["weight_rates"][weight_tier]

    handling = rates["special_handling_rates"]
    special_handling_rate = sum(
        (handling[key] * days for key in PER_DAY_HANDLING if getattr(request, _HANDLING_FLAGS[key])),
        _ZERO,
    )
    if request.is_urgent_delivery:
        special_handling_rate += handling["urgent"]

    subtotal = base_rate + distance_rate + weight_rate + special_handling_rate

    # 附加费都按 subtotal 计，互不叠加
    flags = evaluate_surcharges(req.pickup_at, req.delivery_at, duration_days, is_holiday)
    pct = rates["surcharges"]
    fuel_surcharge = subtotal * pct["fuel"]
    peak_hour_surcharge = subtotal * pct["peak_hour"] if flags.peak_hour else _ZERO
    weekend_surcharge = subtotal * pct["weekend"] if flags.weekend else _ZERO
    holiday_surcharge = subtotal * pct["holiday"] if flags.holiday else _ZERO
    overtime_rate = subtotal * pct["overtime"] if flags.overtime else _ZERO

    extra = rates["additional_costs"]
    insurance_cost = subtotal * extra["insurance_rate"]
    toll_fees = rates["toll_rates"][req.route_type]
    parking_fees = extra["parking_fee_per_day"] * days

    estimated_cost = (
        subtotal
        + fuel_surcharge
        + peak_hour_surcharge
        + weekend_surcharge
        + holiday_surcharge
        + overtime_rate
        + insurance_cost
        + toll_fees
        + parking_fees
    )

    logger.debug(
        "[pricing] config=%s truck_tier=%s weight_tier=%s days=%s flags=%s subtotal=%s total=%s",
        config.id, truck_tier, weight_tier, duration_days, flags, subtotal, estimated_cost,
    )

    def r(val: Decimal) -> Decimal:
        return round_amount(val, places)

    return PricingBreakdown(
        base_rate=r(base_rate),
        distance_rate=r(distance_rate),
        weight_rate=r(weight_rate),
        special_handling_rate=r(special_handling_rate),
        fuel_surcharge=r(fuel_surcharge),
        peak_hour_surcharge=r(peak_hour_surcharge),
        weekend_surcharge=r(weekend_surcharge),
        holiday_surcharge=r(holiday_surcharge),
        overtime_rate=r(overtime_rate),
        insurance_cost=r(insurance_cost),
        toll_fees=r(toll_fees),
        parking_fees=r(parking_fees),
        estimated_cost=r(estimated_cost),
        subtotal=r(subtotal),
        duration_days=duration_days,
        truck_tier=truck_tier,
        weight_tier=weight_tier,
        currency_code=config.currency_code,
        currency_symbol=config.currency_symbol,
        decimal_places=places,
    )
