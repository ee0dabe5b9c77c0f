"""Tests for supply pin recovery."""

from homeagent.services.gpio import HIGH, LOW
from homeagent.services.recovery import PinRecovery


def test_recover_power_cycles_pin(gpio):
    sleeps = []
    recovery = PinRecovery(gpio, dwell=10, sleep=sleeps.append)

    recovery.recover(11)

    assert gpio.writes == [(11, LOW), (11, HIGH)]
    assert gpio.outputs == [11, 11]
    assert sleeps == [10, 10]
    assert recovery.cycles == 1


def test_recover_ignores_write_failures():
    class BrokenGPIO:
        def setup_output(self, pin):
            raise RuntimeError("no such pin")

        def write(self, pin, level):
            raise AssertionError("not reached")

    sleeps = []
    recovery = PinRecovery(BrokenGPIO(), dwell=1, sleep=sleeps.append)

    recovery.recover(99)

    assert sleeps == [1, 1]
    assert recovery.cycles == 1
