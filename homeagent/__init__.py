"""Home agent: relays, sensors and LAN smart switches exposed as bridge accessories."""

__version__ = "2.0.0"
