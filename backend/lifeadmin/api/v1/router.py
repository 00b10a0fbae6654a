from fastapi import APIRouter

from lifeadmin.api.v1 import (
    health,
    people,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(people.router, prefix="/people", tags=["people"])
