"""API v1 router aggregation."""

from fastapi import APIRouter

from src.api.v1 import health, saved_prompts

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(saved_prompts.router, prefix="/saved_prompts", tags=["Saved Prompts"])
