"""Main API router — combines all endpoint routers."""

from fastapi import APIRouter

from formkit.api.health import router as health_router
from formkit.api.forms import router as forms_router

api_router = APIRouter()

# Health check
api_router.include_router(health_router, tags=["Health"])

# Forms and answers
api_router.include_router(forms_router, tags=["Forms"])
