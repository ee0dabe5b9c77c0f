import logging
import time
from typing import Callable

from homeagent.services.gpio import GPIOBackend, HIGH, LOW

logger = logging.getLogger(__name__)

DEFAULT_DWELL_SECONDS = 10.0


class PinRecovery:
    """
    Power-cycles a sensor supply pin: OFF, wait, ON, wait.

    recover() blocks its caller for twice the dwell time. Anything fed by the
    pin is unavailable for that window.
    """

    def __init__(
        self,
        gpio: GPIOBackend,
        dwell: float = DEFAULT_DWELL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.gpio = gpio
        self.dwell = dwell
        self._sleep = sleep
        self.cycles = 0

    def recover(self, pin: int) -> None:
        self.cycles += 1
        logger.warning(f"Powering off pin {pin}")
        self._drive(pin, LOW)
        logger.info(f"Waiting {self.dwell:g} seconds...")
        self._sleep(self.dwell)
        self._drive(pin, HIGH)
        logger.warning(f"Powering on pin {pin}")
        self._sleep(self.dwell)

    def _drive(self, pin: int, level: int) -> None:
        try:
            self.gpio.setup_output(pin)
            self.gpio.write(pin, level)
        except Exception as e:
            logger.error(f"Failed to drive recovery pin {pin} {'HIGH' if level else 'LOW'}: {e}")
