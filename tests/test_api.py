"""Tests for the accessory REST surface."""

from fastapi.testclient import TestClient

from homeagent.core.agent import HomeAgent
from homeagent.core.config.models import AppConfig
from homeagent.main import create_app
from homeagent.services.gpio import HIGH, LOW


def make_client(gpio, recovery):
    config = AppConfig.model_validate(
        {
            "general": {"name": "Garage", "model": "RPi3"},
            "relays": {
                "enabled": True,
                "devices": [
                    {"id": 1, "type": 0, "name": "Lamp", "pin": 5},
                    {"id": 2, "type": 2, "name": "Cooler", "pin": 6, "invert": True},
                ],
            },
            "dht22": {"enabled": True, "update_interval": 3600, "autorecovery": False},
        }
    )

    class Driver:
        def read_retry(self, pin, retries):
            return 20.0, 50.0, 0

    agent = HomeAgent(config, gpio=gpio, recovery=recovery, dht_driver=Driver())
    return TestClient(create_app(config, agent))


def test_bridge_info(gpio, recovery):
    with make_client(gpio, recovery) as client:
        response = client.get("/api/bridge")

    assert response.status_code == 200
    assert response.json() == {"name": "Garage", "manufacturer": "EofNET", "model": "RPi3"}


def test_list_accessories(gpio, recovery):
    with make_client(gpio, recovery) as client:
        response = client.get("/api/accessories")

    assert response.status_code == 200
    names = [acc["name"] for acc in response.json()]
    assert names == ["Lamp", "Cooler", "Temperature"]


def test_turn_relays_on(gpio, recovery):
    with make_client(gpio, recovery) as client:
        lamp = client.put("/api/accessories/2/on", json={"on": True})
        assert gpio.writes[-1] == (5, LOW)
        cooler = client.put("/api/accessories/3/on", json={"on": True})
        assert gpio.writes[-1] == (6, HIGH)
        state = client.get("/api/accessories/2").json()

    assert lamp.status_code == 200
    assert lamp.json()["success"] is True
    assert cooler.json()["serial_number"] == "6"
    assert state["characteristics"]["on"] is True


def test_unknown_accessory(gpio, recovery):
    with make_client(gpio, recovery) as client:
        assert client.get("/api/accessories/42").status_code == 404
        assert client.put("/api/accessories/42/on", json={"on": True}).status_code == 404


def test_sensor_accessory_has_no_on_command(gpio, recovery):
    with make_client(gpio, recovery) as client:
        response = client.put("/api/accessories/4/on", json={"on": True})

    assert response.status_code == 400


def test_invalid_body(gpio, recovery):
    with make_client(gpio, recovery) as client:
        response = client.put("/api/accessories/2/on", json={"state": "on"})

    assert response.status_code == 422
