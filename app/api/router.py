from fastapi import APIRouter

from api.routes.localization import router as localization_router
from api.routes.system import router as system_router

api_router = APIRouter()

api_router.include_router(system_router)
api_router.include_router(localization_router, prefix="/api/v1")
