"""
Accessory models.

Accessories are what the bridge exposes; their characteristic values mirror
device state but are stored separately by the bridge.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AccessoryKind(str, Enum):
    LIGHTBULB = "lightbulb"
    SWITCH = "switch"
    FAN = "fan"
    THERMOMETER = "thermometer"
    THERMOSTAT = "thermostat"


ON = "on"
CURRENT_TEMPERATURE = "current_temperature"
CURRENT_RELATIVE_HUMIDITY = "current_relative_humidity"


class BridgeInfo(BaseModel):
    name: str
    manufacturer: str
    model: str


class Accessory(BaseModel):
    """Externally visible accessory."""
    aid: Optional[int] = Field(None, description="Assigned by the bridge on registration")
    kind: AccessoryKind
    name: str
    manufacturer: str = "EofNET"
    serial_number: str = ""
    characteristics: Dict[str, Any] = Field(default_factory=dict)
