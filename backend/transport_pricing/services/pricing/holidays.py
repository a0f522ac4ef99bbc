from __future__ import annotations
from datetime import date, datetime
from functools import lru_cache
from typing import Iterable, Optional, Union

from transport_pricing.services.pricing.surcharges import HolidayPredicate


def _as_date(value: Union[date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def holiday_calendar(dates: Iterable[Union[date, str]]) -> HolidayPredicate:
    """把一组日期（date 或 ISO 字符串）变成 is_holiday(date) 判定函数。"""
    days = frozenset(_as_date(d) for d in dates if d)

    def _is_holiday(d: date) -> bool:
        return d in days

    return _is_holiday


def combine_holiday_predicates(*predicates: Optional[HolidayPredicate]) -> HolidayPredicate:
    active = tuple(p for p in predicates if p is not None)

    def _is_holiday(d: date) -> bool:
        return any(p(d) for p in active)

    return _is_holiday


def memoize_per_date(predicate: HolidayPredicate, maxsize: int = 366) -> HolidayPredicate:
    """外部日历可能是阻塞调用；同一日期只查一次。"""
    return lru_cache(maxsize=maxsize)(predicate)
