from transport_pricing.core.logging import configure_logging
from transport_pricing.db.session import session_scope
from transport_pricing.repository.pricing_config_repo import get_or_create_default_config


# 在容器里运行一次：python -m scripts.seed_pricing_config
# （确保 PYTHONPATH 包含 backend 目录）

def main():
    logger = configure_logging()
    with session_scope() as db:
        row = get_or_create_default_config(db)
        logger.info("system default pricing config id=%s version=%s", row.id, row.version)


if __name__ == "__main__":
    main()
