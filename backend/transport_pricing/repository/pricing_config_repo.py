from __future__ import annotations
from copy import deepcopy
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from transport_pricing.core.config import settings
from transport_pricing.db.model.pricing_config import TransportPricingConfig
from transport_pricing.services.pricing.errors import ConfigNotFoundError
from transport_pricing.services.pricing.models import CONFIG_TYPES, RATE_TABLES, PricingConfig


logger = logging.getLogger(__name__)


# 系统默认费率表；字段名与模型保持完全一致，防止写入丢字段
DEFAULTS: Dict[str, Any] = {
    "name": "System Default",
    "config_type": "default",
    "description": "Built-in rate schedule used when a client has no active config",
    "version": "1.0",

    # 车型日租（按天）
    "base_rates": {"small": 3000, "medium": 5000, "large": 8000, "heavy": 12000},
    # 每公里
    "distance_rates": {"local": 50, "provincial": 75, "intercity": 100},
    # 货重附加（一次性）
    "weight_rates": {"light": 0, "medium": 500, "heavy": 1000, "very_heavy": 2000},
    # 特殊处理：前三项按天，urgent 一次性
    "special_handling_rates": {"refrigeration": 2000, "special_equipment": 1500, "escort": 3000, "urgent": 5000},
    # 附加费（subtotal 的比例）
    "surcharges": {"fuel": 0.15, "peak_hour": 0.20, "weekend": 0.25, "holiday": 0.50, "overtime": 0.30},
    "additional_costs": {
        "insurance_rate": 0.02,
        "toll_rates": {"local": 0, "provincial": 50, "intercity": 100},
        "parking_fee_per_day": 200,
    },
    "holidays": [],

    "currency_code": "PHP",
    "currency_symbol": "₱",
    "decimal_places": 2,
}

# 没有指定 config_id 时，同一 client 多个 type 都 active 的挑选顺序
TYPE_PRIORITY = ("custom", "premium", "economy", "default")

# 允许写入的字段白名单
ALL_FIELDS = ("client_id", "active") + tuple(DEFAULTS.keys())


def to_pricing_config(row: TransportPricingConfig) -> PricingConfig:
    """ORM 行 -> 不可变的计算快照。"""
    return PricingConfig.from_dict(to_dict(row))


def to_dict(row: TransportPricingConfig) -> Dict[str, Any]:
    """
    将 ORM 行转为 dict；key 与对外序列化字段一致（type / active / currency_code ...）。
    """
    data: Dict[str, Any] = {
        "id": row.id,
        "client_id": row.client_id,
        "name": row.name,
        "type": row.config_type,
        "active": bool(row.active),
        "version": row.version,
        "description": row.description,
        "currency_code": row.currency_code,
        "currency_symbol": row.currency_symbol,
        "decimal_places": row.decimal_places,
        "holidays": list(row.holidays or []),
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    }
    for name in RATE_TABLES:
        data[name] = deepcopy(getattr(row, name) or {})
    return data


def _holiday_iso(value: Any) -> str:
    # 写入时就解析，坏日期不能进库，否则该 client 之后每次报价都会失败
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value).strip()).isoformat()
    except ValueError:
        raise ValueError(f"invalid holiday {value!r}, expected YYYY-MM-DD") from None


def _normalize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(payload)
    # 兼容对外字段名 type
    if "type" in data and "config_type" not in data:
        data["config_type"] = data.pop("type")
    if data.get("holidays"):
        data["holidays"] = [_holiday_iso(d) for d in data["holidays"]]
    if data.get("config_type") is not None and data["config_type"] not in CONFIG_TYPES:
        raise ValueError(f"unknown config type {data['config_type']!r}")
    return {k: v for k, v in data.items() if k in ALL_FIELDS}


# ------- 写入 -------
def create_config(db: Session, payload: Dict[str, Any]) -> TransportPricingConfig:
    """
    新建一版配置；未提供的费率表用 DEFAULTS 补齐。
    若 active=True，同 client + 同 type 的其它配置会被置为非激活。
    """
    data = deepcopy(DEFAULTS)
    data.update(_normalize_payload(payload))
    if not data.get("client_id"):
        raise ValueError("client_id is required")

    row = TransportPricingConfig(**data)
    db.add(row)
    db.flush()
    if row.active:
        _deactivate_siblings(db, row)
    db.commit()
    db.refresh(row)
    return row


def _deactivate_siblings(db: Session, row: TransportPricingConfig) -> None:
    db.execute(
        update(TransportPricingConfig)
        .where(
            TransportPricingConfig.client_id == row.client_id,
            TransportPricingConfig.config_type == row.config_type,
            TransportPricingConfig.id != row.id,
            TransportPricingConfig.active.is_(True),
        )
        .values(active=False)
        .execution_options(synchronize_session="fetch")
    )


def activate_config(db: Session, config_id: int) -> TransportPricingConfig:
    """激活一版配置，并保证同 client + 同 type 只有它一条 active。"""
    row = db.get(TransportPricingConfig, config_id)
    if row is None:
        raise ConfigNotFoundError(f"pricing config {config_id} not found")
    row.active = True
    db.flush()
    _deactivate_siblings(db, row)
    db.commit()
    db.refresh(row)
    logger.info("[pricing-config] activated id=%s client=%s type=%s", row.id, row.client_id, row.config_type)
    return row


def deactivate_config(db: Session, config_id: int) -> TransportPricingConfig:
    row = db.get(TransportPricingConfig, config_id)
    if row is None:
        raise ConfigNotFoundError(f"pricing config {config_id} not found")
    row.active = False
    db.commit()
    db.refresh(row)
    return row


# ------- 查询 -------
def get_config(db: Session, config_id: int) -> Optional[TransportPricingConfig]:
    return db.get(TransportPricingConfig, config_id)


def list_configs(db: Session, client_id: str) -> List[TransportPricingConfig]:
    stmt = (
        select(TransportPricingConfig)
        .where(TransportPricingConfig.client_id == client_id)
        .order_by(TransportPricingConfig.id.asc())
    )
    return list(db.scalars(stmt))


def get_active_config(db: Session, client_id: str) -> Optional[TransportPricingConfig]:
    stmt = select(TransportPricingConfig).where(
        TransportPricingConfig.client_id == client_id,
        TransportPricingConfig.active.is_(True),
    )
    rows = list(db.scalars(stmt))
    if not rows:
        return None
    # 先按 type 优先级，再取最新的一版
    return min(
        rows,
        key=lambda r: (
            TYPE_PRIORITY.index(r.config_type) if r.config_type in TYPE_PRIORITY else len(TYPE_PRIORITY),
            -r.id,
        ),
    )


def get_default_config(db: Session) -> Optional[TransportPricingConfig]:
    # 系统 client 下激活的 default 配置（只读）
    stmt = (
        select(TransportPricingConfig)
        .where(
            TransportPricingConfig.client_id == settings.PRICING_DEFAULT_CLIENT,
            TransportPricingConfig.config_type == "default",
            TransportPricingConfig.active.is_(True),
        )
        .order_by(TransportPricingConfig.id.asc())
    )
    return db.scalars(stmt).first()


def get_or_create_default_config(db: Session) -> TransportPricingConfig:
    # 只给 seed 脚本用；报价 / 查询路径不写库
    row = get_default_config(db)
    if row:
        return row

    logger.info("[pricing-config] no system default found, creating one from DEFAULTS")
    return create_config(db, {"client_id": settings.PRICING_DEFAULT_CLIENT, "active": True})


def builtin_default_config() -> PricingConfig:
    """库里还没 seed 系统默认时使用的内存快照（id 为 None）。"""
    data = deepcopy(DEFAULTS)
    data["type"] = data.pop("config_type")
    data.update(id=None, client_id=settings.PRICING_DEFAULT_CLIENT, active=True)
    return PricingConfig.from_dict(data)


"""
选出本次报价使用的唯一配置（只读，不会写库）：
    1) 指定 config_id：无论是否 active 都用它（只要属于该 client 或系统默认）
    2) 否则用该 client 的 active 配置
    3) 否则用系统默认配置；未 seed 时退回 DEFAULTS
"""
def resolve_config(db: Session, client_id: str, config_id: Optional[int] = None) -> PricingConfig:
    if config_id is not None:
        row = get_config(db, config_id)
        if row is None or row.client_id not in (client_id, settings.PRICING_DEFAULT_CLIENT):
            raise ConfigNotFoundError(f"pricing config {config_id} not found for client {client_id!r}")
        return to_pricing_config(row)

    row = get_active_config(db, client_id) or get_default_config(db)
    if row is None:
        logger.warning("[pricing-config] system default not seeded, using built-in DEFAULTS")
        return builtin_default_config()
    return to_pricing_config(row)
