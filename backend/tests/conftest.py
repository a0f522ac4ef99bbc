import os

# 测试一律走内存 SQLite；必须在导入 transport_pricing 之前设置
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["PRICING_TIMEZONE"] = "Asia/Manila"
os.environ["PRICING_HOLIDAYS"] = ""

from copy import deepcopy
from typing import Any, Callable, Dict

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from transport_pricing.db.base import Base
import transport_pricing.db.model  # noqa: F401  注册所有表
from transport_pricing.services.pricing.models import PricingConfig


# 端到端场景用的费率表：medium=5000, local=50/km, medium weight=500, 附加费全 0
E2E_CONFIG: Dict[str, Any] = {
    "id": 1,
    "client_id": "acme",
    "name": "Acme Standard",
    "type": "custom",
    "active": True,
    "version": "2.1",
    "base_rates": {"small": 3000, "medium": 5000, "large": 8000, "heavy": 12000},
    "distance_rates": {"local": 50, "provincial": 75, "intercity": 100},
    "weight_rates": {"light": 0, "medium": 500, "heavy": 1000, "very_heavy": 2000},
    "special_handling_rates": {"refrigeration": 2000, "special_equipment": 1500, "escort": 3000, "urgent": 5000},
    "surcharges": {"fuel": 0, "peak_hour": 0, "weekend": 0, "holiday": 0, "overtime": 0},
    "additional_costs": {
        "insurance_rate": 0.02,
        "toll_rates": {"local": 0, "provincial": 50, "intercity": 100},
        "parking_fee_per_day": 200,
    },
    "currency_code": "PHP",
    "currency_symbol": "₱",
    "decimal_places": 2,
}


@pytest.fixture()
def make_config() -> Callable[..., PricingConfig]:
    """
    构造 PricingConfig；关键字参数整体覆盖同名字段，
    surcharges 支持部分覆盖：make_config(surcharges={"fuel": 0.15})。
    """
    def _make(**overrides: Any) -> PricingConfig:
        data = {k: (dict(v) if isinstance(v, dict) else v) for k, v in E2E_CONFIG.items()}
        if "surcharges" in overrides:
            data["surcharges"] = {**data["surcharges"], **overrides.pop("surcharges")}
        data.update(overrides)
        return PricingConfig.from_dict(data)

    return _make


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture()
def db_session(engine) -> Session:
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    db = factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def config_payload() -> Dict[str, Any]:
    """repo.create_config 用的写入 payload（不含 id）。"""
    data = deepcopy(E2E_CONFIG)
    data.pop("id")
    return data
