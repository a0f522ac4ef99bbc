# 聚合导入所有模型，供 Alembic 发现

from .pricing_config import TransportPricingConfig

__all__ = [
    "TransportPricingConfig",
]
