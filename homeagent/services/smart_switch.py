"""
Client for LAN smart switches speaking the local "zeroconf" JSON API.

Every control request has to echo the device's own id, so each command
first asks the device for its info.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8081
INFO_PATH = "/zeroconf/info"
SWITCH_PATH = "/zeroconf/switch"
SWITCH_STATES = ("on", "off")


class SmartSwitchClient:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        port: int = DEFAULT_PORT,
        timeout: Optional[aiohttp.ClientTimeout] = None,
    ):
        self._session = session
        self._port = port
        self._timeout = timeout
        self.identities: Dict[str, str] = {}

    def _url(self, ip: str, path: str) -> str:
        return f"http://{ip}:{self._port}{path}"

    @staticmethod
    def _payload(device_id: str = "", switch: Optional[str] = None) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if switch is not None:
            data["switch"] = switch
        return {"deviceid": device_id, "data": data}

    async def _post(self, ip: str, path: str, payload: Dict[str, Any]) -> aiohttp.ClientResponse:
        kwargs: Dict[str, Any] = {"json": payload, "headers": {"Content-Type": "application/json"}}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        return await self._session.post(self._url(ip, path), **kwargs)

    async def _info(self, ip: str, device_id: str = "") -> Optional[Dict[str, Any]]:
        """POST an info query and return the decoded "data" object, or None."""
        try:
            async with await self._post(ip, INFO_PATH, self._payload(device_id)) as resp:
                body = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Smart switch {ip} info request failed: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Problems in unmarshalling the smart switch {ip} info output: {e}")
            return None
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            logger.warning(f"Smart switch {ip} returned info without a data object")
            return None
        return data

    async def fetch_identity(self, ip: str) -> str:
        """Return the device id reported by the switch, or "" on any failure."""
        data = await self._info(ip)
        device_id = data.get("deviceid", "") if data else ""
        if not isinstance(device_id, str):
            device_id = ""
        if device_id:
            self.identities[ip] = device_id
        return device_id

    async def set_state(self, ip: str, state: str) -> bool:
        """
        Switch the device "on" or "off".

        True only if the switch request completed without a transport error;
        the response body is not examined.
        """
        if state not in SWITCH_STATES:
            raise ValueError(f"Switch state must be one of {SWITCH_STATES}, got {state!r}")
        device_id = await self.fetch_identity(ip)
        if not device_id:
            logger.warning(f"Smart switch {ip} did not report its device id, dropping '{state}' command")
            return False
        try:
            async with await self._post(ip, SWITCH_PATH, self._payload(device_id, state)):
                pass
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Smart switch {ip} switch '{state}' failed: {e}")
            return False
        logger.info(f"Smart switch {ip} ({device_id}) switched {state}")
        return True

    async def turn_on(self, ip: str) -> bool:
        return await self.set_state(ip, "on")

    async def turn_off(self, ip: str) -> bool:
        return await self.set_state(ip, "off")

    async def get_state(self, ip: str) -> bool:
        """True iff the device reports switch "on"; any failure reads as off."""
        device_id = await self.fetch_identity(ip)
        if not device_id:
            return False
        data = await self._info(ip, device_id)
        if data is None:
            return False
        return data.get("switch") == "on"
