"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (auth, users, products,
dashboard) under a unified prefix.  When new domains are introduced,
include their routers here.
"""

from fastapi import APIRouter

from .endpoints import auth, dashboard, health, products, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(products.router, prefix="/products", tags=["products"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(health.router, prefix="/health", tags=["health"])
