from __future__ import annotations
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional, Union

Number = Union[Decimal, float, int, str]


def to_decimal(val) -> Optional[Decimal]:
    """float 先转 str 再进 Decimal，避免 0.1 之类的二进制误差；无法解析返回 None。"""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, Decimal):
        return val
    try:
        return Decimal(str(val))
    except (InvalidOperation, ValueError, TypeError):
        return None


def quantum(decimal_places: int) -> Decimal:
    return Decimal(1).scaleb(-int(decimal_places))


def round_amount(amount: Number, decimal_places: int) -> Decimal:
    """
    按配置精度四舍五入（ROUND_HALF_UP）。
    货币符号、千分位等展示格式不在这里处理，只返回数值。
    """
    if decimal_places < 0:
        raise ValueError(f"decimal_places must be >= 0, got {decimal_places}")
    value = to_decimal(amount)
    if value is None:
        raise ValueError(f"not a number: {amount!r}")
    with localcontext() as ctx:
        # quantize 结果位数超过上下文精度会抛 InvalidOperation
        ctx.prec = max(ctx.prec, value.adjusted() + decimal_places + 2)
        return value.quantize(quantum(decimal_places), rounding=ROUND_HALF_UP)
