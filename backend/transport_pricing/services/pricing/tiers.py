# 车型档位 / 货重档位 分类

from __future__ import annotations
from decimal import Decimal
from typing import Dict

from transport_pricing.services.pricing.errors import InvalidRequestError
from transport_pricing.services.pricing.rounding import Number, to_decimal


# 车型：上界包含（<= bound）；1 吨以下按 small 处理，不报错
TRUCK_BRACKETS = (
    (Decimal("3"), "small"),
    (Decimal("8"), "medium"),
    (Decimal("15"), "large"),
)
TRUCK_TOP_TIER = "heavy"

# 货重（kg）：左闭右开，边界值归入更高一档
WEIGHT_BRACKETS = (
    (Decimal("500"), "light"),
    (Decimal("1000"), "medium"),
    (Decimal("2000"), "heavy"),
)
WEIGHT_TOP_TIER = "very_heavy"

# 换算到 kg；tons 按公吨
KG_PER_UNIT: Dict[str, Decimal] = {
    "kg": Decimal("1"),
    "kgs": Decimal("1"),
    "kilogram": Decimal("1"),
    "kilograms": Decimal("1"),
    "g": Decimal("0.001"),
    "t": Decimal("1000"),
    "ton": Decimal("1000"),
    "tons": Decimal("1000"),
    "tonne": Decimal("1000"),
    "tonnes": Decimal("1000"),
    "lb": Decimal("0.45359237"),
    "lbs": Decimal("0.45359237"),
}


def classify_truck_tier(capacity_tons: Number) -> str:
    cap = to_decimal(capacity_tons)
    for bound, tier in TRUCK_BRACKETS:
        if cap <= bound:
            return tier
    return TRUCK_TOP_TIER


def classify_weight_tier(weight_kg: Number) -> str:
    w = to_decimal(weight_kg)
    for bound, tier in WEIGHT_BRACKETS:
        if w < bound:
            return tier
    return WEIGHT_TOP_TIER


def normalize_weight_kg(weight: Number, unit: str) -> Decimal:
    key = (unit or "kg").strip().lower()
    factor = KG_PER_UNIT.get(key)
    if factor is None:
        raise InvalidRequestError("cargo_unit", f"unsupported unit {unit!r}")
    return to_decimal(weight) * factor
