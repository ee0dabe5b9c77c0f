"""
In-memory accessory bridge.

Holds the accessories and characteristic values exposed to remote
controllers. Values are written by polling tasks and by command callbacks,
so the store is guarded by a lock.
"""
import logging
import threading
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from homeagent.models.accessory import Accessory, BridgeInfo

logger = logging.getLogger(__name__)

RemoteUpdateCallback = Callable[[Any], Awaitable[Any]]


class UnknownAccessoryError(KeyError):
    pass


class AccessoryBridge:
    def __init__(self, info: BridgeInfo) -> None:
        self.info = info
        self._accessories: Dict[int, Accessory] = {}
        self._callbacks: Dict[Tuple[int, str], RemoteUpdateCallback] = {}
        self._lock = threading.RLock()
        self._next_aid = 2  # aid 1 is the bridge itself

    @property
    def accessories(self) -> List[Accessory]:
        with self._lock:
            return [acc.model_copy(deep=True) for acc in self._accessories.values()]

    def register(self, accessory: Accessory) -> Accessory:
        with self._lock:
            accessory.aid = self._next_aid
            self._next_aid += 1
            self._accessories[accessory.aid] = accessory
        logger.info(f"Registered accessory {accessory.aid}: {accessory.name} ({accessory.kind.value})")
        return accessory

    def get(self, aid: int) -> Accessory:
        with self._lock:
            accessory = self._accessories.get(aid)
            if accessory is None:
                raise UnknownAccessoryError(aid)
            return accessory.model_copy(deep=True)

    def find_by_serial(self, serial_number: str) -> Optional[Accessory]:
        with self._lock:
            for accessory in self._accessories.values():
                if accessory.serial_number == serial_number:
                    return accessory.model_copy(deep=True)
        return None

    def value(self, aid: int, characteristic: str) -> Any:
        with self._lock:
            return self.get(aid).characteristics.get(characteristic)

    def publish(self, aid: int, characteristic: str, value: Any) -> None:
        """Expose a new characteristic value to remote observers."""
        with self._lock:
            accessory = self._accessories.get(aid)
            if accessory is None:
                raise UnknownAccessoryError(aid)
            accessory.characteristics[characteristic] = value
        logger.debug(f"Accessory {aid} {characteristic} = {value}")

    def on_remote_update(self, aid: int, characteristic: str, callback: RemoteUpdateCallback) -> None:
        with self._lock:
            if aid not in self._accessories:
                raise UnknownAccessoryError(aid)
            self._callbacks[(aid, characteristic)] = callback

    def has_remote_update(self, aid: int, characteristic: str) -> bool:
        with self._lock:
            return (aid, characteristic) in self._callbacks

    async def remote_update(self, aid: int, characteristic: str, value: Any) -> Any:
        """Deliver a remote write: store the value, then run the registered callback."""
        with self._lock:
            callback = self._callbacks.get((aid, characteristic))
        if callback is None:
            raise UnknownAccessoryError((aid, characteristic))
        self.publish(aid, characteristic, value)
        return await callback(value)
