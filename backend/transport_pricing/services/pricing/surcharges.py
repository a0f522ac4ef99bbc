# 时间类附加费判定：高峰 / 周末 / 节假日 / 超时（多日）

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Optional
import math

HolidayPredicate = Callable[[date], bool]

# 高峰时段（本地时间，左闭右开）；固定策略，不从配置读取
PEAK_WINDOWS = (
    (time(7, 0), time(9, 0)),
    (time(17, 0), time(19, 0)),
)
WEEKEND_DAYS = (5, 6)          # date.weekday(): 周六、周日
BILLABLE_DAY = timedelta(hours=24)


@dataclass(frozen=True)
class SurchargeFlags:
    peak_hour: bool = False
    weekend: bool = False
    holiday: bool = False
    overtime: bool = False


def to_local(ts: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    """naive 时间按本地时区解释；带时区的换算到本地。"""
    if ts is None:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=tz)
    return ts.astimezone(tz)


def to_utc(ts: datetime) -> datetime:
    """
    同一 ZoneInfo 下的两个时间相减 / 比较按墙钟算，跨夏令时切换会差 1 小时；
    时长与先后顺序一律换到 UTC 再算。naive 值原样返回。
    """
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc)


def compute_duration_days(pickup_at: Optional[datetime], delivery_at: Optional[datetime]) -> int:
    """
    计费天数 = max(1, ceil((delivery - pickup) / 24h))；任一时间缺失按 1 天。
    当天往返也算 1 个计费日，所以不会返回 0。
    """
    if pickup_at is None or delivery_at is None:
        return 1
    elapsed = to_utc(delivery_at) - to_utc(pickup_at)
    return max(1, math.ceil(elapsed / BILLABLE_DAY))


def is_peak_hour(ts: Optional[datetime]) -> bool:
    if ts is None:
        return False
    t = ts.timetz().replace(tzinfo=None)
    return any(start <= t < end for start, end in PEAK_WINDOWS)


def is_weekend(*stamps: Optional[datetime]) -> bool:
    return any(ts is not None and ts.weekday() in WEEKEND_DAYS for ts in stamps)


def is_holiday(predicate: Optional[HolidayPredicate], *stamps: Optional[datetime]) -> bool:
    if predicate is None:
        return False
    return any(ts is not None and predicate(ts.date()) for ts in stamps)


def evaluate_surcharges(
    pickup_at: Optional[datetime],
    delivery_at: Optional[datetime],
    duration_days: int,
    holiday_predicate: Optional[HolidayPredicate] = None,
) -> SurchargeFlags:
    """
    入参应已是本地时间（见 to_local）。
      - peak_hour: 仅看 pickup 时刻
      - weekend / holiday: pickup 或 delivery 任一命中
      - overtime: 多日单收一次，不按天叠加
    """
    return SurchargeFlags(
        peak_hour=is_peak_hour(pickup_at),
        weekend=is_weekend(pickup_at, delivery_at),
        holiday=is_holiday(holiday_predicate, pickup_at, delivery_at),
        overtime=duration_days > 1,
    )
