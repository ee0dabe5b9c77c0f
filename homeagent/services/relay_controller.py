import asyncio
import logging
import threading
from typing import Dict, Optional, Union

from homeagent.models.devices import RelayDevice
from homeagent.services.gpio import GPIOBackend, HIGH, LOW

logger = logging.getLogger(__name__)

PinRef = Union[int, str]


def parse_pin(raw: PinRef) -> Optional[int]:
    """Return the pin as an int, or None if it is not a pin number."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


class RelayController:
    """
    RelayController drives an active-low relay board: LOW energises the relay.

    Pins may be given as ints or as the numeric strings used for accessory
    serial numbers. Malformed pins are ignored and only logged at debug level.
    """

    def __init__(self, gpio: GPIOBackend) -> None:
        self.gpio = gpio
        self._locks: Dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, pin: int) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(pin, threading.Lock())

    def read_state(self, raw_pin: PinRef) -> bool:
        """True when the pin reads LOW (relay energised)."""
        pin = parse_pin(raw_pin)
        if pin is None:
            logger.debug(f"Ignoring state read for malformed pin {raw_pin!r}")
            return False
        with self._lock_for(pin):
            logger.debug(f"Reading state for the pin {pin}")
            try:
                self.gpio.setup_output(pin)
                value = self.gpio.read(pin)
            except Exception as e:
                logger.error(f"[GPIO] Failed to read pin {pin}: {e}")
                return False
        logger.debug(f"Read value was {value}")
        return value == LOW

    def turn_on(self, raw_pin: PinRef) -> None:
        self._write(raw_pin, LOW)

    def turn_off(self, raw_pin: PinRef) -> None:
        self._write(raw_pin, HIGH)

    def _write(self, raw_pin: PinRef, level: int) -> None:
        pin = parse_pin(raw_pin)
        if pin is None:
            logger.debug(f"Ignoring write to malformed pin {raw_pin!r}")
            return
        with self._lock_for(pin):
            logger.debug(f"Turning power {'on' if level == LOW else 'off'} for switch {pin}")
            try:
                self.gpio.setup_output(pin)
                self.gpio.write(pin, level)
            except Exception as e:
                logger.error(f"[GPIO] Failed to write pin {pin}: {e}")

    def set_external_state(self, relay: RelayDevice, on: bool) -> None:
        """Apply an accessory on/off request, honouring cooler inversion."""
        physical_on = not on if relay.inverted else on
        logger.info(f"Relay {relay.id} ({relay.name}) set to {'ON' if on else 'OFF'}")
        if physical_on:
            self.turn_on(relay.pin)
        else:
            self.turn_off(relay.pin)

    def initial_external_state(self, relay: RelayDevice) -> bool:
        """State the accessory should report at startup."""
        physical_on = self.read_state(relay.pin)
        if relay.inverted:
            return not physical_on
        return physical_on

    async def async_read_state(self, raw_pin: PinRef) -> bool:
        """Asynchronously reads the relay state."""
        return await asyncio.to_thread(self.read_state, raw_pin)

    async def async_turn_on(self, raw_pin: PinRef) -> None:
        """Asynchronously turns the relay on."""
        await asyncio.to_thread(self.turn_on, raw_pin)

    async def async_turn_off(self, raw_pin: PinRef) -> None:
        """Asynchronously turns the relay off."""
        await asyncio.to_thread(self.turn_off, raw_pin)

    async def async_set_external_state(self, relay: RelayDevice, on: bool) -> None:
        await asyncio.to_thread(self.set_external_state, relay, on)
