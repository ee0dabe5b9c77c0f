from enum import IntEnum
from typing import Dict, List

from pydantic import BaseModel, Field, field_validator


class RelayKind(IntEnum):
    """Relay accessory type as written in the settings document."""
    LAMP = 0
    SWITCH = 1
    COOLER = 2


class GeneralConfig(BaseModel):
    """Bridge identity settings."""
    name: str = "IOT Home"
    model: str = "RPi"
    manufacturer: str = "EofNET"
    pin: str = "00102003"  # Pairing code handed to the bridge transport


class RelayConfig(BaseModel):
    """Relay definition."""
    id: int
    type: RelayKind = RelayKind.LAMP
    name: str
    pin: int = Field(..., gt=0, description="Physical (board) pin number")
    invert: bool = False


class RelaysConfig(BaseModel):
    """Relay board configuration."""
    enabled: bool = False
    devices: List[RelayConfig] = Field(default_factory=list)

    @field_validator("devices")
    @classmethod
    def _unique_ids(cls, devices: List[RelayConfig]) -> List[RelayConfig]:
        seen = set()
        for relay in devices:
            if relay.id in seen:
                raise ValueError(f"Duplicate relay id {relay.id}")
            seen.add(relay.id)
        return devices


class DHTConfig(BaseModel):
    """DHT22 temperature/humidity sensor."""
    enabled: bool = False
    name: str = "Temperature"
    pin: int = Field(4, description="BCM data pin")
    vcc_pin: int = Field(1, description="Physical pin feeding the sensor supply")
    autorecovery: bool = True
    update_interval: int = Field(60, gt=0)


class OneWireConfig(BaseModel):
    """DS18B20 one-wire temperature probes sharing one bus and supply rail."""
    enabled: bool = False
    ids: Dict[str, str] = Field(default_factory=dict)
    data_pin: int = 7
    vcc_pin: int = 1
    autorecovery: bool = True
    update_interval: int = Field(60, gt=0)


class SmartSwitchConfig(BaseModel):
    """LAN smart switches keyed by IP address."""
    enabled: bool = False
    devices: Dict[str, str] = Field(default_factory=dict)


class AppConfig(BaseModel):
    """Complete agent configuration model."""
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    relays: RelaysConfig = Field(default_factory=RelaysConfig)
    dht22: DHTConfig = Field(default_factory=DHTConfig)
    ds18b20: OneWireConfig = Field(default_factory=OneWireConfig)
    smart_switches: SmartSwitchConfig = Field(default_factory=SmartSwitchConfig)
    debug: bool = False
