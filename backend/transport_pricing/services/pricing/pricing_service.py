from __future__ import annotations
from typing import Optional, Tuple
import logging

from sqlalchemy.orm import Session

from transport_pricing.core.config import settings
from transport_pricing.repository.pricing_config_repo import resolve_config
from transport_pricing.services.pricing.calculator import calculate
from transport_pricing.services.pricing.errors import ConfigIncompleteError
from transport_pricing.services.pricing.holidays import (
    combine_holiday_predicates,
    holiday_calendar,
    memoize_per_date,
)
from transport_pricing.services.pricing.models import PricingBreakdown, PricingConfig, ShipmentRequest
from transport_pricing.services.pricing.surcharges import HolidayPredicate


logger = logging.getLogger(__name__)


def build_holiday_predicate(
    config: PricingConfig,
    is_holiday: Optional[HolidayPredicate] = None,
) -> HolidayPredicate:
    """全局节假日（settings）+ 配置里声明的节假日 + 调用方注入的日历，任一命中即算。"""
    return combine_holiday_predicates(
        holiday_calendar(settings.pricing_holidays),
        holiday_calendar(config.holidays),
        memoize_per_date(is_holiday) if is_holiday is not None else None,
    )


# ---------- 主流程：解析配置 -> 节假日判定 -> calculate ----------
"""
对一次报价请求：
    1) 按 client / config_id 选出唯一配置（ConfigNotFoundError 直接上抛）；
    2) 组装节假日判定；
    3) 纯函数计算，失败不产生任何部分结果。
    返回：(使用的配置, 报价明细)
"""
def quote_shipment(
    db: Session,
    client_id: str,
    request: ShipmentRequest,
    config_id: Optional[int] = None,
    is_holiday: Optional[HolidayPredicate] = None,
) -> Tuple[PricingConfig, PricingBreakdown]:

    config = resolve_config(db, client_id, config_id)

    try:
        breakdown = calculate(config, request, build_holiday_predicate(config, is_holiday))
    except ConfigIncompleteError as exc:
        logger.warning("[pricing] config id=%s client=%s incomplete: %s", config.id, client_id, ", ".join(exc.missing))
        raise

    logger.info(
        "[pricing] quoted client=%s config=%s v%s tier=%s/%s days=%s total=%s %s",
        client_id, config.id, config.version,
        breakdown.truck_tier, breakdown.weight_tier, breakdown.duration_days,
        breakdown.estimated_cost, breakdown.currency_code,
    )
    return config, breakdown
