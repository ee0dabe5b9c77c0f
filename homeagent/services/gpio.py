import logging
import threading
from typing import Dict, Protocol

logger = logging.getLogger(__name__)

LOW = 0
HIGH = 1

# 40-pin header: physical pin -> BCM channel (power and ground pins omitted)
PHYSICAL_TO_BCM: Dict[int, int] = {
    3: 2, 5: 3, 7: 4, 8: 14, 10: 15, 11: 17, 12: 18, 13: 27,
    15: 22, 16: 23, 18: 24, 19: 10, 21: 9, 22: 25, 23: 11, 24: 8,
    26: 7, 27: 0, 28: 1, 29: 5, 31: 6, 32: 12, 33: 13, 35: 19,
    36: 16, 37: 26, 38: 20, 40: 21,
}


class GPIOBackend(Protocol):
    """Pin primitives the controllers rely on. Pins are physical board numbers."""

    def setup_output(self, pin: int) -> None: ...

    def write(self, pin: int, level: int) -> None: ...

    def read(self, pin: int) -> int: ...

    def cleanup(self) -> None: ...


def physical_to_bcm(pin: int) -> int:
    try:
        return PHYSICAL_TO_BCM[pin]
    except KeyError:
        raise ValueError(f"Physical pin {pin} is not a GPIO pin")


class RPiGPIOBackend:
    """
    GPIO backend on RPi.GPIO. Callers pass physical pin numbers.

    RPi.GPIO allows a single numbering mode per process and the DHT driver
    (Blinka) sets BCM when it loads, so the backend joins whatever mode is
    already active and otherwise selects BCM itself. Physical pins are
    translated when the active mode is BCM.

    The RPi.GPIO module is imported on first use so the agent can be
    configured and tested off the Pi.
    """

    def __init__(self) -> None:
        self._gpio = None
        self._physical = False
        self._init_lock = threading.Lock()

    def _module(self):
        with self._init_lock:
            if self._gpio is None:
                import RPi.GPIO as GPIO  # type: ignore

                GPIO.setwarnings(False)
                mode = GPIO.getmode()
                if mode is None:
                    GPIO.setmode(GPIO.BCM)
                    mode = GPIO.BCM
                self._physical = mode == GPIO.BOARD
                self._gpio = GPIO
                logger.info(f"Initialized RPi.GPIO in {'BOARD' if self._physical else 'BCM'} mode")
            return self._gpio

    def _channel(self, pin: int) -> int:
        return pin if self._physical else physical_to_bcm(pin)

    def setup_output(self, pin: int) -> None:
        GPIO = self._module()
        GPIO.setup(self._channel(pin), GPIO.OUT)

    def write(self, pin: int, level: int) -> None:
        GPIO = self._module()
        GPIO.output(self._channel(pin), GPIO.HIGH if level else GPIO.LOW)

    def read(self, pin: int) -> int:
        GPIO = self._module()
        return HIGH if GPIO.input(self._channel(pin)) else LOW

    def cleanup(self) -> None:
        if self._gpio is None:
            return
        try:
            self._gpio.cleanup()
            logger.info("GPIO cleanup completed.")
        except Exception as e:
            logger.error(f"Failed to clean up GPIO: {e}")
