import logging
from typing import Optional

from homeagent.models.command import CommandResult
from homeagent.services.registry import DeviceRegistry
from homeagent.services.relay_controller import RelayController
from homeagent.services.smart_switch import SmartSwitchClient

logger = logging.getLogger(__name__)


class CommandHandler:
    """
    Applies remote on/off commands addressed by accessory serial number.

    A serial number is either a relay's physical pin or a smart switch's IP.
    Failures are reported in the result, never raised.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        relays: RelayController,
        switches: Optional[SmartSwitchClient] = None,
    ) -> None:
        self.registry = registry
        self.relays = relays
        self.switches = switches

    async def handle_command(self, serial_number: str, desired: bool) -> CommandResult:
        relay = self.registry.relay_by_pin(serial_number)
        if relay is not None:
            await self.relays.async_set_external_state(relay, desired)
            return CommandResult(
                serial_number=serial_number, requested=desired, success=True, device=f"relay:{relay.id}"
            )

        switch = self.registry.switch_by_ip(serial_number)
        if switch is not None:
            if self.switches is None:
                return CommandResult(
                    serial_number=serial_number,
                    requested=desired,
                    success=False,
                    device=switch.network_id,
                    message="Smart switch client not running",
                )
            success = await self.switches.set_state(switch.ip_address, "on" if desired else "off")
            device_id = self.switches.identities.get(switch.ip_address)
            if device_id:
                switch.device_id = device_id
            return CommandResult(
                serial_number=serial_number,
                requested=desired,
                success=success,
                device=switch.network_id,
                message=None if success else "Command dropped by smart switch",
            )

        logger.warning(f"No device with serial number {serial_number!r}")
        return CommandResult(
            serial_number=serial_number, requested=desired, success=False, message="Unknown device"
        )
