"""
Top‑level router for version 1 of the API.

Aggregates the domain routers under a unified prefix.  Add new
domains here.
"""

from fastapi import APIRouter

from .endpoints import tags

router = APIRouter()

router.include_router(tags.router, prefix="/tags", tags=["tags"])
