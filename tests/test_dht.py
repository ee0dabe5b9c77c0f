"""Tests for the DHT22 reader and driver."""

import pytest

from homeagent.core.exceptions import SensorReadError
from homeagent.services.dht import AdafruitDHTDriver, DHTReader

VCC_PIN = 15


class FailingDriver:
    def __init__(self):
        self.calls = []

    def read_retry(self, pin, retries):
        self.calls.append((pin, retries))
        raise SensorReadError("timeout")


class WorkingDriver:
    def read_retry(self, pin, retries):
        return 21.4, 55.0, 1


def test_failed_read_without_autorecovery_returns_zero(recovery):
    driver = FailingDriver()
    reader = DHTReader(driver, recovery, vcc_pin=VCC_PIN, autorecovery=False)

    reading = reader.read(4)

    assert (reading.temperature, reading.humidity) == (0, 0)
    assert reading.valid is False
    assert recovery.cycles == 0
    assert driver.calls == [(4, 10)]


def test_failed_read_with_autorecovery_runs_one_cycle(recovery, gpio):
    reader = DHTReader(FailingDriver(), recovery, vcc_pin=VCC_PIN, autorecovery=True)

    reading = reader.read(4)
    assert (reading.temperature, reading.humidity) == (0, 0)
    assert recovery.cycles == 1
    assert {pin for pin, _ in gpio.writes} == {VCC_PIN}

    reader.read(4)
    assert recovery.cycles == 2


def test_successful_read(recovery):
    reader = DHTReader(WorkingDriver(), recovery, vcc_pin=VCC_PIN)

    reading = reader.read(4)

    assert reading.temperature == pytest.approx(21.4)
    assert reading.humidity == pytest.approx(55.0)
    assert reading.valid is True
    assert recovery.cycles == 0


class FlakyDevice:
    def __init__(self, failures):
        self.failures = failures

    @property
    def temperature(self):
        if self.failures:
            self.failures -= 1
            raise RuntimeError("Checksum did not validate. Try again.")
        return 23.1

    @property
    def humidity(self):
        return 40.2


def test_adafruit_driver_retries_runtime_errors():
    sleeps = []
    driver = AdafruitDHTDriver(sleep=sleeps.append)
    driver._devices[4] = FlakyDevice(failures=2)

    temperature, humidity, retried = driver.read_retry(4, retries=10)

    assert (temperature, humidity, retried) == (23.1, 40.2, 2)
    assert len(sleeps) == 2


def test_adafruit_driver_gives_up_after_retries():
    sleeps = []
    driver = AdafruitDHTDriver(sleep=sleeps.append)
    driver._devices[4] = FlakyDevice(failures=100)

    with pytest.raises(SensorReadError):
        driver.read_retry(4, retries=10)
    assert len(sleeps) == 9


class BrokenDriver:
    def read_retry(self, pin, retries):
        raise ValueError("A different mode has already been set!")


def test_unexpected_driver_error_returns_zero_and_recovers(recovery):
    reader = DHTReader(BrokenDriver(), recovery, vcc_pin=VCC_PIN, autorecovery=True)

    reading = reader.read(4)

    assert (reading.temperature, reading.humidity) == (0, 0)
    assert reading.valid is False
    assert recovery.cycles == 1


class MisconfiguredDevice:
    @property
    def temperature(self):
        raise ValueError("A different mode has already been set!")


def test_adafruit_driver_wraps_unexpected_errors():
    sleeps = []
    driver = AdafruitDHTDriver(sleep=sleeps.append)
    driver._devices[4] = MisconfiguredDevice()

    with pytest.raises(SensorReadError):
        driver.read_retry(4, retries=10)
    assert sleeps == []
