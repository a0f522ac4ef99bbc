# 环境变量和配置
# pydantic‑settings 读取 .env = core/config.py

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# 本机直接跑 uvicorn 时（不走 Docker），才会用到 model_config.env_file=".env"：
# 此时它会读取 backend/.env

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # ========= project config =========
    PROJECT_NAME: str = "Transport Pricing Engine"
    ENVIRONMENT: str = "dev"
    API_PREFIX: str = "/api/v1"
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173"


    # ========= Database =========
    # - 容器内默认连 docker 网络里的 "db" 服务
    # - 本机工具（DBeaver/psql/脚本）可使用 DATABASE_URL_LOCAL（指向 localhost）
    DATABASE_URL: str = Field(
        default="postgresql+psycopg://tp_user:tp_pass@db:5432/transport_pricing",
        alias="DATABASE_URL"
    )
    DATABASE_URL_LOCAL: Optional[str] = Field(
        default=None,
        alias="DATABASE_URL_LOCAL",
        description="Optional local URL for tools (e.g., DBeaver/psql). Typically '...@localhost:5432/transport_pricing'"
    )


    # ========= pricing config =========
    # 高峰/周末/节假日按这个时区判断；naive 时间戳也按它解释
    PRICING_TIMEZONE: str = Field("Asia/Manila", alias="PRICING_TIMEZONE")
    # 系统默认配置归属的 client
    PRICING_DEFAULT_CLIENT: str = Field("system", alias="PRICING_DEFAULT_CLIENT")
    # 全局节假日，逗号分隔 ISO 日期：2025-12-25,2026-01-01
    PRICING_HOLIDAYS: str = Field("", alias="PRICING_HOLIDAYS")


    @property
    def pricing_holidays(self) -> list[str]:
        return [d.strip() for d in self.PRICING_HOLIDAYS.split(",") if d.strip()]


settings = Settings()  # 只从环境读取（含 .env）
