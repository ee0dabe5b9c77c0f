"""
Sensor polling tasks.

Each enabled sensor class gets one periodic task. The blocking hardware
read runs in a worker thread so a read stuck in a recovery cycle only
delays its own task.
"""
import asyncio
import logging
from typing import Dict, Optional

from homeagent.core.tasks.common import PeriodicTask, TaskMetrics
from homeagent.models.accessory import CURRENT_RELATIVE_HUMIDITY, CURRENT_TEMPERATURE
from homeagent.models.devices import DHTSensor
from homeagent.services.bridge import AccessoryBridge
from homeagent.services.dht import DHTReader
from homeagent.services.onewire import OneWireManager

logger = logging.getLogger(__name__)


async def poll_dht(sensor: DHTSensor, reader: DHTReader, bridge: AccessoryBridge, aid: int) -> None:
    """Read the DHT sensor and publish both values, zeros included."""
    with TaskMetrics("poll_dht") as metrics:
        reading = await asyncio.to_thread(reader.read, sensor.pin)
        sensor.last_temperature = reading.temperature
        sensor.last_humidity = reading.humidity
        sensor.valid = reading.valid
        if not reading.valid:
            metrics.increment("errors")
        bridge.publish(aid, CURRENT_RELATIVE_HUMIDITY, reading.humidity)
        bridge.publish(aid, CURRENT_TEMPERATURE, reading.temperature)
        metrics.increment("processed")


async def poll_onewire(manager: OneWireManager, bridge: AccessoryBridge, aids: Dict[str, int]) -> None:
    """Read all active probes and publish the ones that answered."""
    with TaskMetrics("poll_onewire") as metrics:
        readings = await asyncio.to_thread(manager.poll)
        for sensor in manager.active:
            if sensor.id not in readings:
                metrics.increment("errors")
                continue
            aid = aids.get(sensor.id)
            if aid is None:
                continue
            bridge.publish(aid, CURRENT_TEMPERATURE, readings[sensor.id])
            metrics.increment("processed")


class PollingScheduler:
    """Owns the independent per-class polling tasks."""

    def __init__(self, bridge: AccessoryBridge) -> None:
        self.bridge = bridge
        self.dht_task: Optional[PeriodicTask] = None
        self.onewire_task: Optional[PeriodicTask] = None

    def add_dht(self, sensor: DHTSensor, reader: DHTReader, aid: int, interval: float) -> PeriodicTask:
        self.dht_task = PeriodicTask(
            "dht22", interval, lambda: poll_dht(sensor, reader, self.bridge, aid)
        )
        return self.dht_task

    def add_onewire(self, manager: OneWireManager, aids: Dict[str, int], interval: float) -> PeriodicTask:
        self.onewire_task = PeriodicTask(
            "ds18b20", interval, lambda: poll_onewire(manager, self.bridge, aids)
        )
        return self.onewire_task

    @property
    def tasks(self):
        return [task for task in (self.dht_task, self.onewire_task) if task is not None]

    def start(self) -> None:
        for task in self.tasks:
            task.start()

    async def stop(self) -> None:
        for task in self.tasks:
            await task.stop()
