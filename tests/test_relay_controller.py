"""Tests for the active-low relay controller."""

import asyncio

from homeagent.core.config.models import RelayKind
from homeagent.models.devices import RelayDevice
from homeagent.services.gpio import HIGH, LOW
from homeagent.services.relay_controller import RelayController, parse_pin


def test_turn_on_drives_low_and_reads_on(gpio):
    controller = RelayController(gpio)

    controller.turn_on(5)

    assert gpio.writes == [(5, LOW)]
    assert 5 in gpio.outputs
    assert controller.read_state(5) is True


def test_turn_off_drives_high_and_reads_off(gpio):
    controller = RelayController(gpio)

    controller.turn_on(5)
    controller.turn_off(5)

    assert gpio.writes[-1] == (5, HIGH)
    assert controller.read_state(5) is False


def test_serial_number_strings_are_accepted(gpio):
    controller = RelayController(gpio)

    controller.turn_on("7")

    assert gpio.writes == [(7, LOW)]
    assert controller.read_state("7") is True


def test_malformed_pin_is_ignored(gpio):
    controller = RelayController(gpio)

    controller.turn_on("lamp")
    controller.turn_off("")

    assert gpio.writes == []
    assert controller.read_state("x1") is False


def test_parse_pin():
    assert parse_pin(3) == 3
    assert parse_pin(" 12 ") == 12
    assert parse_pin("12a") is None
    assert parse_pin(True) is None


def test_inverted_cooler_swaps_commands(gpio):
    controller = RelayController(gpio)
    fan = RelayDevice(id=2, kind=RelayKind.COOLER, name="Fan", pin=6, invert=True)

    controller.set_external_state(fan, True)
    assert gpio.writes[-1] == (6, HIGH)

    controller.set_external_state(fan, False)
    assert gpio.writes[-1] == (6, LOW)


def test_invert_flag_only_applies_to_coolers(gpio):
    controller = RelayController(gpio)
    lamp = RelayDevice(id=1, kind=RelayKind.LAMP, name="Lamp", pin=5, invert=True)

    controller.set_external_state(lamp, True)

    assert gpio.writes[-1] == (5, LOW)


def test_initial_external_state(gpio):
    controller = RelayController(gpio)
    lamp = RelayDevice(id=1, kind=RelayKind.LAMP, name="Lamp", pin=5)
    fan = RelayDevice(id=2, kind=RelayKind.COOLER, name="Fan", pin=6, invert=True)

    # Idle pins read HIGH: relay off
    assert controller.initial_external_state(lamp) is False
    assert controller.initial_external_state(fan) is True

    gpio.levels[5] = LOW
    gpio.levels[6] = LOW
    assert controller.initial_external_state(lamp) is True
    assert controller.initial_external_state(fan) is False


def test_async_wrappers(gpio):
    controller = RelayController(gpio)

    async def scenario():
        await controller.async_turn_on(8)
        on = await controller.async_read_state(8)
        await controller.async_turn_off(8)
        off = await controller.async_read_state(8)
        return on, off

    assert asyncio.run(scenario()) == (True, False)
