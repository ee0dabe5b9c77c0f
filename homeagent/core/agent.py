"""
Agent assembly.

Builds every component from one AppConfig, registers the accessories with
the bridge and runs the sensor polling tasks.
"""
import asyncio
import logging
from pathlib import Path
from typing import Dict, Optional

import aiohttp

from homeagent.core.config.models import AppConfig, RelayKind
from homeagent.core.env_settings import env
from homeagent.core.tasks import PollingScheduler
from homeagent.models.accessory import (
    CURRENT_RELATIVE_HUMIDITY,
    CURRENT_TEMPERATURE,
    ON,
    Accessory,
    AccessoryKind,
    BridgeInfo,
)
from homeagent.models.devices import RelayDevice, SmartSwitchDevice
from homeagent.services.bridge import AccessoryBridge
from homeagent.services.commands import CommandHandler
from homeagent.services.dht import AdafruitDHTDriver, DHTDriver, DHTReader
from homeagent.services.gpio import GPIOBackend, RPiGPIOBackend
from homeagent.services.onewire import OneWireManager
from homeagent.services.recovery import PinRecovery
from homeagent.services.registry import DeviceRegistry
from homeagent.services.relay_controller import RelayController
from homeagent.services.smart_switch import SmartSwitchClient

logger = logging.getLogger(__name__)

RELAY_ACCESSORY_KINDS = {
    RelayKind.LAMP: AccessoryKind.LIGHTBULB,
    RelayKind.SWITCH: AccessoryKind.SWITCH,
    RelayKind.COOLER: AccessoryKind.FAN,
}


class HomeAgent:
    def __init__(
        self,
        config: AppConfig,
        gpio: Optional[GPIOBackend] = None,
        dht_driver: Optional[DHTDriver] = None,
        recovery: Optional[PinRecovery] = None,
        session: Optional[aiohttp.ClientSession] = None,
        bus_root: Optional[Path] = None,
        smart_switch_port: Optional[int] = None,
    ) -> None:
        self.config = config
        self.gpio = gpio or RPiGPIOBackend()
        self.recovery = recovery or PinRecovery(self.gpio, dwell=env.RECOVERY_DWELL_SECONDS)
        self.registry = DeviceRegistry.from_config(config)
        self.relays = RelayController(self.gpio)
        self.bridge = AccessoryBridge(
            BridgeInfo(
                name=config.general.name,
                manufacturer=config.general.manufacturer,
                model=config.general.model,
            )
        )
        self.scheduler = PollingScheduler(self.bridge)

        self._session = session
        self._owns_session = session is None
        self._smart_switch_port = smart_switch_port or env.SMART_SWITCH_PORT
        self.switches: Optional[SmartSwitchClient] = None
        self.commands = CommandHandler(self.registry, self.relays)

        self.dht_reader: Optional[DHTReader] = None
        if self.registry.dht is not None:
            self.dht_reader = DHTReader(
                dht_driver or AdafruitDHTDriver(),
                self.recovery,
                vcc_pin=config.dht22.vcc_pin,
                autorecovery=config.dht22.autorecovery,
                retries=env.DHT_RETRIES,
            )

        self.onewire: Optional[OneWireManager] = None
        if config.ds18b20.enabled:
            self.onewire = OneWireManager(
                self.registry.onewire_sensors,
                self.recovery,
                vcc_pin=config.ds18b20.vcc_pin,
                bus_root=bus_root or env.w1_bus_root,
                autorecovery=config.ds18b20.autorecovery,
                discovery_attempts=env.ONEWIRE_DISCOVERY_ATTEMPTS,
            )
        self._started = False

    def _accessory(self, kind: AccessoryKind, name: str, serial_number: str = "", **characteristics) -> Accessory:
        return Accessory(
            kind=kind,
            name=name,
            manufacturer=self.config.general.manufacturer,
            serial_number=serial_number,
            characteristics=characteristics,
        )

    def _on_handler(self, serial_number: str):
        async def _handle(on: bool):
            return await self.commands.handle_command(serial_number, bool(on))
        return _handle

    async def _register_relay(self, relay: RelayDevice) -> None:
        initial = await asyncio.to_thread(self.relays.initial_external_state, relay)
        accessory = self.bridge.register(
            self._accessory(RELAY_ACCESSORY_KINDS[relay.kind], relay.name, relay.serial_number, **{ON: initial})
        )
        self.bridge.on_remote_update(accessory.aid, ON, self._on_handler(relay.serial_number))

    def _register_switch(self, switch: SmartSwitchDevice) -> None:
        accessory = self.bridge.register(
            self._accessory(AccessoryKind.LIGHTBULB, switch.display_name, switch.serial_number, **{ON: False})
        )
        self.bridge.on_remote_update(accessory.aid, ON, self._on_handler(switch.serial_number))

    async def start(self) -> None:
        if self._started:
            return
        self._started = True

        for relay in self.registry.relays:
            await self._register_relay(relay)

        if self.registry.smart_switches:
            if self._session is None:
                self._session = aiohttp.ClientSession()
            self.switches = SmartSwitchClient(self._session, port=self._smart_switch_port)
            self.commands.switches = self.switches
            for switch in self.registry.smart_switches:
                self._register_switch(switch)

        dht = self.registry.dht
        if dht is not None and self.dht_reader is not None:
            accessory = self.bridge.register(
                self._accessory(
                    AccessoryKind.THERMOSTAT,
                    dht.name,
                    **{CURRENT_TEMPERATURE: 0.0, CURRENT_RELATIVE_HUMIDITY: 0.0},
                )
            )
            self.scheduler.add_dht(dht, self.dht_reader, accessory.aid, self.config.dht22.update_interval)

        if self.onewire is not None:
            aids: Dict[str, int] = {}
            for sensor in await asyncio.to_thread(self.onewire.discover):
                accessory = self.bridge.register(
                    self._accessory(
                        AccessoryKind.THERMOMETER,
                        sensor.name,
                        sensor.id,
                        **{CURRENT_TEMPERATURE: sensor.last_temperature},
                    )
                )
                aids[sensor.id] = accessory.aid
            self.scheduler.add_onewire(self.onewire, aids, self.config.ds18b20.update_interval)

        self.scheduler.start()
        logger.info("All functions loaded!")

    async def stop(self) -> None:
        await self.scheduler.stop()
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None
        if self.dht_reader is not None and isinstance(self.dht_reader.driver, AdafruitDHTDriver):
            self.dht_reader.driver.close()
        await asyncio.to_thread(self.gpio.cleanup)
        self._started = False
        logger.info("Agent stopped")
