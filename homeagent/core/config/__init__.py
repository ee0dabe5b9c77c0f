from .manager import ConfigManager
from .models import (
    AppConfig,
    DHTConfig,
    GeneralConfig,
    OneWireConfig,
    RelayConfig,
    RelayKind,
    RelaysConfig,
    SmartSwitchConfig,
)

__all__ = [
    "AppConfig",
    "ConfigManager",
    "DHTConfig",
    "GeneralConfig",
    "OneWireConfig",
    "RelayConfig",
    "RelayKind",
    "RelaysConfig",
    "SmartSwitchConfig",
]
