"""Tests for the configuration endpoint."""

from unittest.mock import AsyncMock

from fakes import BRUSSELS, GHENT
from starlette.testclient import TestClient

from nmbs_departures.adapters.web import create_app
from nmbs_departures.domain.models import ConfigurationUpdate


def test_healthz_returns_ok() -> None:
    """Given the app, when probing health, then Ok is returned."""
    client = TestClient(create_app(AsyncMock()))

    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.text == "Ok"


def test_config_post_is_forwarded() -> None:
    """Given a configuration page payload, when posted, then the update reaches the handler."""
    on_update = AsyncMock()
    client = TestClient(create_app(on_update))

    response = client.post(
        "/config",
        json={
            "favoriteStations": [GHENT, BRUSSELS],
            "smartSchedules": [],
            "language": "fr",
            "unknownField": True,
        },
    )

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    update = on_update.await_args.args[0]
    assert isinstance(update, ConfigurationUpdate)
    assert update.favorite_stations == [GHENT, BRUSSELS]
    assert update.smart_schedules == []
    assert update.language == "fr"


def test_invalid_body_is_rejected() -> None:
    """Given a body that is not valid configuration JSON, when posted, then 422 is returned."""
    on_update = AsyncMock()
    client = TestClient(create_app(on_update))

    response = client.post(
        "/config", content=b"not json", headers={"Content-Type": "application/json"}
    )
    wrong_shape = client.post("/config", json={"favoriteStations": "Gent"})

    assert response.status_code == 422
    assert wrong_shape.status_code == 422
    on_update.assert_not_awaited()
