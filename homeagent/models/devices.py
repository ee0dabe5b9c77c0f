"""
Device data models.

This module defines the in-memory devices owned by the device registry.
Relays and smart switches are fixed after startup; sensor models carry the
last values written by their polling task.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from homeagent.core.config.models import RelayKind


class RelayDevice(BaseModel):
    """A relay channel on the GPIO header."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Unique identifier within the configuration")
    kind: RelayKind
    name: str
    pin: int = Field(..., description="Physical pin number")
    invert: bool = False

    @property
    def serial_number(self) -> str:
        return str(self.pin)

    @property
    def inverted(self) -> bool:
        """Inversion only has meaning for coolers."""
        return self.kind == RelayKind.COOLER and self.invert


class SmartSwitchDevice(BaseModel):
    """A LAN smart switch; its device id is learned on first contact."""
    network_id: str
    ip_address: str
    display_name: str
    device_id: Optional[str] = None

    @property
    def serial_number(self) -> str:
        return self.ip_address


class OneWireSensor(BaseModel):
    """A DS18B20 probe on the shared one-wire bus."""
    id: str = Field(..., description="Bus address, e.g. 28-000005e2fdc3")
    name: str
    last_temperature: Optional[float] = None
    present: bool = False
    active: bool = False


class DHTSensor(BaseModel):
    """The DHT22 sensor, if enabled."""
    name: str
    pin: int
    vcc_pin: int
    last_temperature: float = 0.0
    last_humidity: float = 0.0
    valid: bool = False
