from fastapi import APIRouter

from .routes_health import router as health_router
from .pricing import router as pricing_router


# 登录鉴权由网关 / 上层服务负责，这里不挂 get_current_user
api_v1 = APIRouter()
api_v1.include_router(health_router)
api_v1.include_router(pricing_router)
