# 报价引擎的输入 / 输出模型

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


# --------- 常量 ----------
TRUCK_TIERS = ("small", "medium", "large", "heavy")
WEIGHT_TIERS = ("light", "medium", "heavy", "very_heavy")
ROUTE_TYPES = ("local", "provincial", "intercity")
CONFIG_TYPES = ("default", "custom", "premium", "economy")

PER_DAY_HANDLING = ("refrigeration", "special_equipment", "escort")   # 按天计
ONE_TIME_HANDLING = ("urgent",)                                      # 一次性
SURCHARGE_KEYS = ("fuel", "peak_hour", "weekend", "holiday", "overtime")

# 每张费率表必须具备的 key；additional_costs 结构不同，单独列
REQUIRED_RATE_KEYS: Dict[str, Tuple[str, ...]] = {
    "base_rates": TRUCK_TIERS,
    "distance_rates": ROUTE_TYPES,
    "weight_rates": WEIGHT_TIERS,
    "special_handling_rates": PER_DAY_HANDLING + ONE_TIME_HANDLING,
    "surcharges": SURCHARGE_KEYS,
}
ADDITIONAL_COST_KEYS = ("insurance_rate", "parking_fee_per_day")
RATE_TABLES = tuple(REQUIRED_RATE_KEYS) + ("additional_costs",)

# 与表上的 check 约束一致（0..4）
MAX_DECIMAL_PLACES = 4


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    return value


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class PricingConfig:
    """
    一版费率表的只读快照。
    费率表在构造时被冻结（MappingProxyType），计算期间不可被修改；
    是否缺 key 在 calculate() 入口整体校验，这里不做兜底。
    """
    id: Optional[int]
    client_id: str
    name: str
    type: str = "custom"
    active: bool = False
    version: str = "1.0"
    currency_code: str = "PHP"
    currency_symbol: str = "₱"
    decimal_places: int = 2

    base_rates: Mapping[str, Any] = field(default_factory=dict)
    distance_rates: Mapping[str, Any] = field(default_factory=dict)
    weight_rates: Mapping[str, Any] = field(default_factory=dict)
    special_handling_rates: Mapping[str, Any] = field(default_factory=dict)
    surcharges: Mapping[str, Any] = field(default_factory=dict)
    additional_costs: Mapping[str, Any] = field(default_factory=dict)

    holidays: Tuple[date, ...] = ()
    description: Optional[str] = None

    def __post_init__(self) -> None:
        for name in RATE_TABLES:
            object.__setattr__(self, name, _freeze(getattr(self, name) or {}))
        object.__setattr__(self, "holidays", tuple(_parse_date(d) for d in (self.holidays or ())))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PricingConfig":
        """从 repo / API 的扁平字典构造（字段名与对外序列化一致）。"""
        return cls(
            id=data.get("id"),
            client_id=str(data.get("client_id", "")),
            name=str(data.get("name", "")),
            type=data.get("type") or "custom",
            active=bool(data.get("active", False)),
            version=str(data.get("version") or "1.0"),
            currency_code=data.get("currency_code") or "PHP",
            currency_symbol=data.get("currency_symbol") or "₱",
            decimal_places=data.get("decimal_places", 2),
            base_rates=data.get("base_rates") or {},
            distance_rates=data.get("distance_rates") or {},
            weight_rates=data.get("weight_rates") or {},
            special_handling_rates=data.get("special_handling_rates") or {},
            surcharges=data.get("surcharges") or {},
            additional_costs=data.get("additional_costs") or {},
            holidays=tuple(data.get("holidays") or ()),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "id": self.id,
            "client_id": self.client_id,
            "name": self.name,
            "type": self.type,
            "active": self.active,
            "version": self.version,
            "currency_code": self.currency_code,
            "currency_symbol": self.currency_symbol,
            "decimal_places": self.decimal_places,
            "description": self.description,
            "holidays": [d.isoformat() for d in self.holidays],
        }
        for name in RATE_TABLES:
            out[name] = _thaw(getattr(self, name))
        return out


@dataclass(frozen=True)
class ShipmentRequest:
    # 车辆 / 货物
    truck_capacity_tons: float
    cargo_weight: float
    cargo_unit: str = "kg"

    # 路线
    distance_km: float = 0.0
    route_type: str = "local"

    # 时间（可缺省：缺省时对应的附加费 / 天数不生效）
    pickup_at: Optional[datetime] = None
    delivery_at: Optional[datetime] = None

    # 特殊处理
    requires_refrigeration: bool = False
    requires_special_equipment: bool = False
    requires_escort: bool = False
    is_urgent_delivery: bool = False


@dataclass(frozen=True)
class PricingBreakdown:
    # 分项（各自按 decimal_places 独立取整）
    base_rate: Decimal
    distance_rate: Decimal
    weight_rate: Decimal
    special_handling_rate: Decimal
    fuel_surcharge: Decimal
    peak_hour_surcharge: Decimal
    weekend_surcharge: Decimal
    holiday_surcharge: Decimal
    overtime_rate: Decimal
    insurance_cost: Decimal
    toll_fees: Decimal
    parking_fees: Decimal

    # 总价 = 未取整分项之和，最后取整一次
    estimated_cost: Decimal

    # 展示辅助
    subtotal: Decimal
    duration_days: int
    truck_tier: str
    weight_tier: str
    currency_code: str
    currency_symbol: str
    decimal_places: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
