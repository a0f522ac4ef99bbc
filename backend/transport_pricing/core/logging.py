# 日志初始化：main.py / scripts 启动时调用一次

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 报价明细（calculator 的 DEBUG：档位、天数、附加费命中）单独控制，
# 排查个别报价时设 PRICING_LOG_LEVEL=DEBUG，不必把整个应用调到 DEBUG
PRICING_LOG_LEVEL = os.getenv("PRICING_LOG_LEVEL")

APP_LOGGER = "transport_pricing"
PRICING_LOGGER = "transport_pricing.services.pricing"


def configure_logging(level: Optional[str] = None, pricing_level: Optional[str] = None) -> logging.Logger:
    """
    Root logger gets a stdout handler unless uvicorn already installed one.
    The pricing logger falls back to the app level when no pricing level is set.
    """
    resolved_level = (level or DEFAULT_LEVEL).upper()
    root_logger = logging.getLogger()

    if not root_logger.handlers:
        logging.basicConfig(
            level=resolved_level,
            format=LOG_FORMAT,
            handlers=[logging.StreamHandler(sys.stdout)],
        )
    else:
        root_logger.setLevel(resolved_level)

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(resolved_level)

    pricing = pricing_level or PRICING_LOG_LEVEL
    logging.getLogger(PRICING_LOGGER).setLevel(pricing.upper() if pricing else logging.NOTSET)

    logging.captureWarnings(True)
    return app_logger
