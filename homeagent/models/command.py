"""
Command request/response models.
"""
from typing import Optional

from pydantic import BaseModel, Field


class OnCommand(BaseModel):
    """Body of a remote on/off request."""
    on: bool = Field(..., description="Requested externally visible state")


class CommandResult(BaseModel):
    """Outcome of a remote on/off command."""
    serial_number: str
    requested: bool
    success: bool
    device: Optional[str] = None
    message: Optional[str] = None
