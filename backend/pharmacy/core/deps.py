"""Dependency injection: everything routes need hangs off `app.state`, set up by `create_app`."""

from fastapi import Request

from pharmacy.core.config import Settings
from pharmacy.services.dashboard import DashboardService
from pharmacy.services.sales import SaleProcessor
from pharmacy.storage.base import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_sale_processor(request: Request) -> SaleProcessor:
    return request.app.state.sale_processor


def get_dashboard(request: Request) -> DashboardService:
    return request.app.state.dashboard


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
