from fastapi import APIRouter

from homeagent.api.accessories import router as accessories_router

api_router = APIRouter()

# Include all the routers
api_router.include_router(accessories_router)
