import logging
from typing import Dict, List, Optional

from homeagent.core.config.models import AppConfig
from homeagent.models.devices import DHTSensor, OneWireSensor, RelayDevice, SmartSwitchDevice
from homeagent.services.relay_controller import PinRef, parse_pin

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """
    Devices declared by the configuration, built once at startup.

    Only subsystems enabled in the configuration contribute devices.
    """

    def __init__(
        self,
        relays: Optional[List[RelayDevice]] = None,
        smart_switches: Optional[List[SmartSwitchDevice]] = None,
        onewire_sensors: Optional[List[OneWireSensor]] = None,
        dht: Optional[DHTSensor] = None,
    ) -> None:
        self.relays: List[RelayDevice] = list(relays or [])
        self.smart_switches: List[SmartSwitchDevice] = list(smart_switches or [])
        self.onewire_sensors: List[OneWireSensor] = list(onewire_sensors or [])
        self.dht = dht
        self._relays_by_id: Dict[int, RelayDevice] = {relay.id: relay for relay in self.relays}
        self._relays_by_pin: Dict[int, RelayDevice] = {relay.pin: relay for relay in self.relays}
        self._switches_by_ip: Dict[str, SmartSwitchDevice] = {
            switch.ip_address: switch for switch in self.smart_switches
        }

    @classmethod
    def from_config(cls, config: AppConfig) -> "DeviceRegistry":
        relays: List[RelayDevice] = []
        if config.relays.enabled:
            logger.info("Loading relay support..")
            for relay in sorted(config.relays.devices, key=lambda r: r.id):
                device = RelayDevice(
                    id=relay.id, kind=relay.type, name=relay.name, pin=relay.pin, invert=relay.invert
                )
                logger.info(f"Found relay switch {device}")
                relays.append(device)

        switches: List[SmartSwitchDevice] = []
        if config.smart_switches.enabled:
            logger.info("Loading smart switch support..")
            for index, ip in enumerate(sorted(config.smart_switches.devices), start=1):
                name = config.smart_switches.devices[ip]
                logger.info(f"Found relay switch {ip} named {name}")
                switches.append(SmartSwitchDevice(network_id=f"switch_{index}", ip_address=ip, display_name=name))

        sensors: List[OneWireSensor] = []
        if config.ds18b20.enabled:
            logger.info("Loading Ds18b20 support...")
            sensors = [OneWireSensor(id=sensor_id, name=name) for sensor_id, name in config.ds18b20.ids.items()]

        dht = None
        if config.dht22.enabled:
            logger.info("Loading dht22 sensor support..")
            dht = DHTSensor(name=config.dht22.name, pin=config.dht22.pin, vcc_pin=config.dht22.vcc_pin)

        return cls(relays=relays, smart_switches=switches, onewire_sensors=sensors, dht=dht)

    def relay_by_id(self, relay_id: int) -> Optional[RelayDevice]:
        return self._relays_by_id.get(relay_id)

    def relay_by_pin(self, raw_pin: PinRef) -> Optional[RelayDevice]:
        pin = parse_pin(raw_pin)
        if pin is None:
            return None
        return self._relays_by_pin.get(pin)

    def switch_by_ip(self, ip: str) -> Optional[SmartSwitchDevice]:
        return self._switches_by_ip.get(ip)
