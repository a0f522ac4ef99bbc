"""
   报价引擎专用异常类型。
   配置缺项 / 请求非法 / 配置不存在 三类，与 HTTP 层解耦，由 API 层统一翻译。
"""

from __future__ import annotations
from typing import Iterable, Optional


class PricingError(Exception):
    """Base for all pricing engine errors."""


class ConfigIncompleteError(PricingError):
    """A required rate-table key is missing from the selected config."""

    def __init__(self, missing: Iterable[str], config_id: Optional[object] = None):
        self.missing = tuple(missing)
        self.config_id = config_id
        super().__init__(
            f"pricing config {config_id!r} is missing required keys: {', '.join(self.missing)}"
        )


class InvalidRequestError(PricingError):
    """Malformed shipment request (negative magnitude, inverted dates, unknown unit/route)."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class ConfigNotFoundError(PricingError):
    """No pricing config could be resolved for the client / config id."""
