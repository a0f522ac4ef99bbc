# 运输报价使用的费率配置表

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Index, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column
from transport_pricing.db.base import Base



"""
   一行 = 一个 client 的一版费率表
   - config_type: default / custom / premium / economy
   - 各费率表（base_rates / distance_rates / ...）是嵌套字典，存 JSON
   - active 的唯一性（同 client + 同 type 只能一条生效）由 repo.activate_config 维护
"""
class TransportPricingConfig(Base):

    __tablename__ = "transport_pricing_configs"

    id:                Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id:         Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name:              Mapped[str] = mapped_column(String(255), nullable=False)
    config_type:       Mapped[str] = mapped_column(String(32), nullable=False, default="custom")
    description:       Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    version:           Mapped[str] = mapped_column(String(32), nullable=False, default="1.0")
    active:            Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("false"))

    # 费率表（JSON）
    base_rates:             Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    distance_rates:         Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    weight_rates:           Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    special_handling_rates: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    surcharges:             Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    additional_costs:       Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    holidays:               Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)   # ISO 日期

    # 币种（仅透传给调用方展示，核心不做格式化）
    currency_code:   Mapped[str] = mapped_column(String(10), nullable=False, default="PHP")
    currency_symbol: Mapped[str] = mapped_column(String(10), nullable=False, default="₱")
    decimal_places:  Mapped[int] = mapped_column(Integer, nullable=False, default=2)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("decimal_places >= 0 AND decimal_places <= 4", name="decimal_places"),
        CheckConstraint("config_type IN ('default','custom','premium','economy')", name="config_type"),
        Index("ix_transport_pricing_configs_client_active", "client_id", "config_type", "active"),
    )
