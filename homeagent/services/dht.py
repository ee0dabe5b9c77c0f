import logging
import time
from typing import Callable, Optional, Protocol, Tuple

from pydantic import BaseModel

from homeagent.core.exceptions import SensorReadError
from homeagent.services.recovery import PinRecovery

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 10
RETRY_DELAY = 2.0  # DHT22 needs ~2 s between conversions


class DHTReading(BaseModel):
    temperature: float = 0.0
    humidity: float = 0.0
    valid: bool = False


class DHTDriver(Protocol):
    def read_retry(self, pin: int, retries: int) -> Tuple[float, float, int]:
        """Return (temperature, humidity, retried) or raise SensorReadError."""
        ...


class AdafruitDHTDriver:
    """
    DHT22 driver on adafruit-circuitpython-dht; pin is the BCM number.

    Blinka selects BCM numbering on RPi.GPIO when it loads, which is the mode
    RPiGPIOBackend shares.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep) -> None:
        self._devices = {}
        self._sleep = sleep

    def _device(self, pin: int):
        device = self._devices.get(pin)
        if device is None:
            import adafruit_dht  # type: ignore
            import board  # type: ignore

            device = adafruit_dht.DHT22(getattr(board, f"D{pin}"), use_pulseio=False)
            self._devices[pin] = device
        return device

    def read_retry(self, pin: int, retries: int) -> Tuple[float, float, int]:
        last_error: Optional[Exception] = None
        for attempt in range(retries):
            try:
                device = self._device(pin)
                temperature = device.temperature
                humidity = device.humidity
                if temperature is not None and humidity is not None:
                    return float(temperature), float(humidity), attempt
                last_error = RuntimeError("sensor returned no data")
            except RuntimeError as e:
                # Checksum and timing errors are routine for DHT sensors
                last_error = e
            except Exception as e:
                raise SensorReadError(f"DHT22 on pin {pin} unavailable: {e}") from e
            if attempt + 1 < retries:
                self._sleep(RETRY_DELAY)
        raise SensorReadError(f"DHT22 on pin {pin} failed after {retries} attempts: {last_error}")

    def close(self) -> None:
        for device in self._devices.values():
            try:
                device.exit()
            except Exception as e:
                logger.debug(f"Error releasing DHT device: {e}")
        self._devices.clear()


class DHTReader:
    """
    Reads temperature and humidity with bounded retry.

    On failure the supply pin is power-cycled once (if auto-recovery is on)
    and a zero reading is returned with valid=False. Any driver error,
    not only SensorReadError, takes the same path. Callers that only look
    at the values cannot tell it from a real 0 °C / 0 % reading.
    """

    def __init__(
        self,
        driver: DHTDriver,
        recovery: PinRecovery,
        vcc_pin: int,
        autorecovery: bool = True,
        retries: int = DEFAULT_RETRIES,
    ) -> None:
        self.driver = driver
        self.recovery = recovery
        self.vcc_pin = vcc_pin
        self.autorecovery = autorecovery
        self.retries = retries

    def read(self, pin: int) -> DHTReading:
        try:
            temperature, humidity, retried = self.driver.read_retry(pin, self.retries)
        except Exception as e:
            logger.warning(f"Failed to read temperature from the dht22 sensor on pin: {pin}, maybe the pin is wrong? {e}")
            if self.autorecovery:
                self.recovery.recover(self.vcc_pin)
            return DHTReading()
        logger.debug(f"Temperature = {temperature}*C, Humidity = {humidity}% (retried {retried} times)")
        return DHTReading(temperature=temperature, humidity=humidity, valid=True)
