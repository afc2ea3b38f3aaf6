"""
FastAPI dependency providers.

The stores and the settings are created once for the application and
kept on ``app.state``.  Route handlers obtain them, or the services
built on them, through these providers, so tests can build an app over
a temporary data directory without patching globals.
"""

from fastapi import Request

from .core.config import Settings
from .services.product_service import ProductService
from .services.statistics_service import StatisticsService
from .services.user_service import UserService
from .stores import AccountStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_account_store(request: Request) -> AccountStore:
    return request.app.state.stores.accounts


def get_user_service(request: Request) -> UserService:
    return UserService(request.app.state.stores.accounts)


def get_product_service(request: Request) -> ProductService:
    return ProductService(request.app.state.stores.products, request.app.state.settings.upload_path)


def get_statistics_service(request: Request) -> StatisticsService:
    return StatisticsService(request.app.state.stores)
