"""
DS18B20 one-wire temperature probes.

All probes share one bus and one supply rail, so recovering the rail
briefly takes every probe offline, not just the misbehaving one.
"""
import logging
from pathlib import Path
from typing import Dict, Iterable, List

from homeagent.core.exceptions import SensorReadError
from homeagent.models.devices import OneWireSensor
from homeagent.services.recovery import PinRecovery

logger = logging.getLogger(__name__)

DEFAULT_BUS_ROOT = Path("/sys/bus/w1")
DEFAULT_DISCOVERY_ATTEMPTS = 3
TEMPERATURE_MARKER = "t="


def parse_temperature(raw: str) -> float:
    """Extract degrees Celsius from w1_slave content ("... t=23562")."""
    index = raw.rfind(TEMPERATURE_MARKER)
    if index == -1:
        raise SensorReadError()
    try:
        millidegrees = int(raw[index + len(TEMPERATURE_MARKER):].strip())
    except ValueError:
        raise SensorReadError()
    return millidegrees / 1000.0


class OneWireManager:
    """
    Binds and polls the configured DS18B20 probes.

    With autorecovery disabled neither a missing probe at startup nor a
    failed read during polling power-cycles the shared rail; the probe is
    simply reported missing or keeps its last temperature. Earlier releases
    recovered on poll failures regardless of the flag.
    """

    def __init__(
        self,
        sensors: Iterable[OneWireSensor],
        recovery: PinRecovery,
        vcc_pin: int,
        bus_root: Path = DEFAULT_BUS_ROOT,
        autorecovery: bool = True,
        discovery_attempts: int = DEFAULT_DISCOVERY_ATTEMPTS,
    ) -> None:
        self.sensors: List[OneWireSensor] = sorted(sensors, key=lambda s: s.id)
        self.recovery = recovery
        self.vcc_pin = vcc_pin
        self.bus_root = Path(bus_root)
        self.autorecovery = autorecovery
        self.discovery_attempts = discovery_attempts

    @property
    def devices_dir(self) -> Path:
        return self.bus_root / "devices"

    @property
    def active(self) -> List[OneWireSensor]:
        return [sensor for sensor in self.sensors if sensor.active]

    def device_path(self, sensor_id: str) -> Path:
        return self.devices_dir / sensor_id / "w1_slave"

    def is_present(self, sensor_id: str) -> bool:
        return self.device_path(sensor_id).exists()

    def list_bus_sensors(self) -> List[str]:
        """Sensor ids the bus master reports; the trailing empty entry is dropped."""
        data = (self.devices_dir / "w1_bus_master1" / "w1_master_slaves").read_text()
        sensors = data.split("\n")
        if sensors:
            sensors = sensors[:-1]
        return sensors

    def read_temperature(self, sensor_id: str) -> float:
        try:
            raw = self.device_path(sensor_id).read_text()
        except OSError:
            raise SensorReadError()
        return parse_temperature(raw)

    def _recover(self) -> None:
        if self.autorecovery:
            self.recovery.recover(self.vcc_pin)

    def _wait_for_presence(self, sensor: OneWireSensor) -> bool:
        attempts = 0
        while not self.is_present(sensor.id):
            if not self.autorecovery or attempts >= self.discovery_attempts:
                logger.error(f"Tried {attempts} times to recover the sensor: {sensor.id} without any success")
                return False
            attempts += 1
            logger.warning(f"Recovering Ds18b20 sensors, because {sensor.id} was not found on the system")
            self.recovery.recover(self.vcc_pin)
        return True

    def discover(self) -> List[OneWireSensor]:
        """
        Bind configured probes at startup.

        Absent probes get up to discovery_attempts rail recoveries; a probe
        still missing stays inactive until the process restarts. Present
        probes must also produce a first reading to become active.
        """
        try:
            on_bus = self.list_bus_sensors()
            logger.debug(f"Bus master reports sensors: {on_bus}")
        except OSError as e:
            logger.debug(f"Unable to list one-wire bus sensors: {e}")

        for sensor in self.sensors:
            sensor.present = self._wait_for_presence(sensor)
            if not sensor.present:
                logger.error(
                    f"We were unable to recover the Ds18b20 sensor {sensor.name} ({sensor.id}), "
                    "try to recover manually and restart the program"
                )
                continue
            try:
                sensor.last_temperature = self.read_temperature(sensor.id)
            except SensorReadError as e:
                logger.error(f"Sensor {sensor.name} ({sensor.id}) is present but unreadable: {e}")
                continue
            sensor.active = True
            logger.info(f"Found sensor: {sensor.name} ({sensor.id}) temperature: {sensor.last_temperature:.2f}°C")
        return self.active

    def poll(self) -> Dict[str, float]:
        """
        Read every active probe once.

        Returns the fresh temperatures; a failing probe triggers a rail
        recovery and keeps its last known value.
        """
        readings: Dict[str, float] = {}
        for sensor in self.active:
            try:
                temperature = self.read_temperature(sensor.id)
            except SensorReadError:
                logger.warning(f"Unable to retrieve the Ds18b20 sensor {sensor.id} temperature, running recovery mode...")
                self._recover()
                continue
            sensor.last_temperature = temperature
            readings[sensor.id] = temperature
            logger.debug(f"Ds18b20 sensor: {sensor.name} ({sensor.id}) got temp {temperature:.2f}C")
        return readings
