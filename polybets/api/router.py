from fastapi import APIRouter

from .routes import health, polymarket

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(polymarket.router)
