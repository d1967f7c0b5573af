from fastapi import APIRouter

from credkit.presentation.routers.v1.credentials import router as credentials_router
from credkit.presentation.routers.v1.verification import router as verification_router
from credkit.presentation.routes.health import router as health_router


def build_api(*routers: APIRouter) -> APIRouter:
    api = APIRouter()
    api.include_router(health_router)
    for router in routers:
        api.include_router(router, prefix="/v1")
    return api


verification_api = build_api(verification_router)
cipher_api = build_api(credentials_router)
