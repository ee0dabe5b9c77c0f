import logging
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Request, status

from homeagent.models.accessory import ON, Accessory, BridgeInfo
from homeagent.models.command import CommandResult, OnCommand
from homeagent.services.bridge import AccessoryBridge, UnknownAccessoryError

router = APIRouter(tags=["Accessory Bridge API"])
logger = logging.getLogger(__name__)


def get_bridge(request: Request) -> AccessoryBridge:
    return request.app.state.agent.bridge


@router.get("/bridge", response_model=BridgeInfo)
async def get_bridge_info(request: Request) -> BridgeInfo:
    return get_bridge(request).info


@router.get("/accessories", response_model=List[Accessory])
async def list_accessories(request: Request) -> List[Accessory]:
    logger.info("Received request to list accessories")
    return get_bridge(request).accessories


@router.get("/accessories/{aid}", response_model=Accessory)
async def get_accessory(aid: int, request: Request) -> Accessory:
    try:
        return get_bridge(request).get(aid)
    except UnknownAccessoryError:
        logger.warning(f"Accessory not found: {aid}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Accessory not found")


@router.put("/accessories/{aid}/on", response_model=CommandResult)
async def set_accessory_on(aid: int, command: OnCommand, request: Request) -> Dict[str, Any]:
    logger.info(f"Received request to turn {'on' if command.on else 'off'} accessory {aid}")
    bridge = get_bridge(request)
    try:
        bridge.get(aid)
    except UnknownAccessoryError:
        logger.warning(f"Accessory not found: {aid}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Accessory not found")
    if not bridge.has_remote_update(aid, ON):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Accessory has no on/off characteristic"
        )
    result: CommandResult = await bridge.remote_update(aid, ON, command.on)
    return result.model_dump()
