"""
Periodic sensor polling.

- DHT22 temperature/humidity
- DS18B20 one-wire temperature probes
"""
from .common import PeriodicTask, TaskMetrics
from .sensor_tasks import PollingScheduler, poll_dht, poll_onewire

__all__ = ["PeriodicTask", "PollingScheduler", "TaskMetrics", "poll_dht", "poll_onewire"]
