from fastapi import APIRouter

from .categories import router as categories_router
from .customers import router as customers_router
from .dashboard import router as dashboard_router
from .products import router as products_router
from .suppliers import router as suppliers_router
from .transactions import items_router as transaction_items_router
from .transactions import router as transactions_router
from .users import router as users_router

api_router = APIRouter(prefix="/api")
api_router.include_router(dashboard_router)
api_router.include_router(products_router)
api_router.include_router(categories_router)
api_router.include_router(suppliers_router)
api_router.include_router(customers_router)
api_router.include_router(transactions_router)
api_router.include_router(transaction_items_router)
api_router.include_router(users_router)
