from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy.orm import Session

from transport_pricing.core.config import settings
from transport_pricing.repository.pricing_config_repo import (
    DEFAULTS,
    activate_config,
    create_config,
    deactivate_config,
    get_active_config,
    get_or_create_default_config,
    list_configs,
    resolve_config,
    to_dict,
)
from transport_pricing.services.pricing.errors import ConfigNotFoundError


def test_create_config_fills_missing_tables_from_defaults(db_session: Session) -> None:
    row = create_config(db_session, {"client_id": "acme", "name": "Acme Lite", "type": "economy"})

    assert row.id is not None
    assert row.config_type == "economy"
    assert row.active is False
    assert row.base_rates == DEFAULTS["base_rates"]
    assert row.additional_costs["toll_rates"] == {"local": 0, "provincial": 50, "intercity": 100}
    assert row.created_at is not None


def test_create_config_validates_payload(db_session: Session) -> None:
    with pytest.raises(ValueError):
        create_config(db_session, {"name": "no client"})
    with pytest.raises(ValueError):
        create_config(db_session, {"client_id": "acme", "type": "platinum"})


def test_to_dict_uses_external_field_names(db_session: Session, config_payload) -> None:
    data = to_dict(create_config(db_session, config_payload))

    assert data["type"] == "custom"
    assert data["active"] is True
    assert data["client_id"] == "acme"
    assert data["currency_code"] == "PHP"
    assert "config_type" not in data


def test_activation_keeps_one_active_per_client_and_type(db_session: Session, config_payload) -> None:
    first = create_config(db_session, config_payload)
    second = create_config(db_session, {**config_payload, "version": "2.2"})

    db_session.refresh(first)
    assert first.active is False
    assert second.active is True

    activate_config(db_session, first.id)
    db_session.refresh(second)
    assert second.active is False
    assert get_active_config(db_session, "acme").id == first.id


def test_activation_does_not_touch_other_types(db_session: Session, config_payload) -> None:
    custom = create_config(db_session, config_payload)
    premium = create_config(db_session, {**config_payload, "type": "premium"})

    db_session.refresh(custom)
    assert custom.active is True
    assert premium.active is True
    # 多个 type 同时生效时 custom 优先
    assert get_active_config(db_session, "acme").id == custom.id


def test_activate_unknown_id_raises(db_session: Session) -> None:
    with pytest.raises(ConfigNotFoundError):
        activate_config(db_session, 12345)
    with pytest.raises(ConfigNotFoundError):
        deactivate_config(db_session, 12345)


def test_resolve_prefers_explicit_id_even_if_inactive(db_session: Session, config_payload) -> None:
    old = create_config(db_session, {**config_payload, "version": "1.0", "active": False})
    create_config(db_session, config_payload)

    config = resolve_config(db_session, "acme", config_id=old.id)

    assert config.id == old.id
    assert config.version == "1.0"
    assert config.active is False


def test_resolve_uses_active_then_system_default(db_session: Session, config_payload) -> None:
    row = create_config(db_session, config_payload)
    assert resolve_config(db_session, "acme").id == row.id

    deactivate_config(db_session, row.id)
    fallback = resolve_config(db_session, "acme")
    assert fallback.client_id == settings.PRICING_DEFAULT_CLIENT
    assert fallback.type == "default"


def test_resolve_rejects_other_clients_config(db_session: Session, config_payload) -> None:
    other = create_config(db_session, {**config_payload, "client_id": "globex"})
    with pytest.raises(ConfigNotFoundError):
        resolve_config(db_session, "acme", config_id=other.id)
    with pytest.raises(ConfigNotFoundError):
        resolve_config(db_session, "acme", config_id=999)


def test_system_default_is_created_once(db_session: Session) -> None:
    first = get_or_create_default_config(db_session)
    second = get_or_create_default_config(db_session)

    assert first.id == second.id
    assert first.client_id == settings.PRICING_DEFAULT_CLIENT
    assert len(list_configs(db_session, settings.PRICING_DEFAULT_CLIENT)) == 1


def test_resolved_snapshot_is_detached_from_row(db_session: Session, config_payload) -> None:
    row = create_config(db_session, config_payload)
    config = resolve_config(db_session, "acme")

    row.base_rates = {**row.base_rates, "medium": 1}
    db_session.commit()

    assert config.base_rates["medium"] == 5000
    with pytest.raises(TypeError):
        config.base_rates["medium"] = 1


def test_list_configs_filters_by_client(db_session: Session, config_payload) -> None:
    a = create_config(db_session, config_payload)
    b = create_config(db_session, {**config_payload, "active": False})
    create_config(db_session, {**config_payload, "client_id": "globex"})

    rows = list_configs(db_session, "acme")
    assert [r.id for r in rows] == [a.id, b.id]


def test_create_config_normalizes_holidays(db_session: Session, config_payload) -> None:
    payload = {**config_payload, "holidays": [date(2025, 12, 25), " 2026-01-01 ", datetime(2025, 11, 1, 9, 0)]}
    row = create_config(db_session, payload)
    assert row.holidays == ["2025-12-25", "2026-01-01", "2025-11-01"]


def test_create_config_rejects_unparseable_holidays(db_session: Session, config_payload) -> None:
    with pytest.raises(ValueError):
        create_config(db_session, {**config_payload, "holidays": ["christmas"]})
    assert list_configs(db_session, "acme") == []


def test_resolve_does_not_write_when_default_not_seeded(db_session: Session) -> None:
    config = resolve_config(db_session, "nobody")

    assert config.id is None
    assert config.type == "default"
    assert config.client_id == settings.PRICING_DEFAULT_CLIENT
    assert config.base_rates["heavy"] == DEFAULTS["base_rates"]["heavy"]
    assert list_configs(db_session, settings.PRICING_DEFAULT_CLIENT) == []


def test_resolve_prefers_seeded_system_default(db_session: Session) -> None:
    seeded = get_or_create_default_config(db_session)
    assert resolve_config(db_session, "nobody").id == seeded.id
