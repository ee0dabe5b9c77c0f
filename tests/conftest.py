from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from homeagent.services.gpio import HIGH
from homeagent.services.recovery import PinRecovery


class FakeGPIO:
    """Records pin traffic; unwritten pins read HIGH like an idle relay board."""

    def __init__(self) -> None:
        self.levels: Dict[int, int] = {}
        self.outputs: List[int] = []
        self.writes: List[Tuple[int, int]] = []
        self.cleaned = False

    def setup_output(self, pin: int) -> None:
        self.outputs.append(pin)

    def write(self, pin: int, level: int) -> None:
        self.levels[pin] = level
        self.writes.append((pin, level))

    def read(self, pin: int) -> int:
        return self.levels.get(pin, HIGH)

    def cleanup(self) -> None:
        self.cleaned = True


class OneWireBus:
    """Temporary stand-in for /sys/bus/w1."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.devices = root / "devices"
        self.devices.mkdir(parents=True)

    def add(self, sensor_id: str, millidegrees: int = 21500) -> Path:
        return self.write(
            sensor_id,
            f"72 01 4b 46 7f ff 0e 10 57 : crc=57 YES\n72 01 4b 46 7f ff 0e 10 57 t={millidegrees}\n",
        )

    def write(self, sensor_id: str, content: str) -> Path:
        path = self.devices / sensor_id / "w1_slave"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def remove(self, sensor_id: str) -> None:
        (self.devices / sensor_id / "w1_slave").unlink()

    def set_master_slaves(self, ids: List[str]) -> None:
        master = self.devices / "w1_bus_master1"
        master.mkdir(parents=True, exist_ok=True)
        (master / "w1_master_slaves").write_text("".join(f"{sensor_id}\n" for sensor_id in ids))


@pytest.fixture
def gpio() -> FakeGPIO:
    return FakeGPIO()


@pytest.fixture
def recovery(gpio: FakeGPIO) -> PinRecovery:
    return PinRecovery(gpio, dwell=0, sleep=lambda seconds: None)


@pytest.fixture
def bus(tmp_path: Path) -> OneWireBus:
    return OneWireBus(tmp_path / "w1")
