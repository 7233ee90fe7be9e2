"""Product CRUD plus the inventory alert listings."""

from fastapi import APIRouter, Depends, HTTPException, status

from pharmacy.core.deps import get_dashboard, get_storage
from pharmacy.schemas import LowStockProduct, Product, ProductCreate, ProductUpdate
from pharmacy.services.dashboard import DashboardService
from pharmacy.storage.base import Storage

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[Product])
async def list_products(storage: Storage = Depends(get_storage)):
    """List all products."""
    return await storage.products.list_all()


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductCreate, storage: Storage = Depends(get_storage)):
    """Create a product. SKUs must be unique."""
    return await storage.products.create(body)


@router.get("/low-stock", response_model=list[LowStockProduct])
async def get_low_stock_products(dashboard: DashboardService = Depends(get_dashboard)):
    """Low-stock products with supplier summary and days until stockout."""
    return await dashboard.low_stock_detail()


@router.get("/expired", response_model=list[Product])
async def get_expired_products(storage: Storage = Depends(get_storage)):
    """Products whose expiry date has passed."""
    return await storage.products.list_expired()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: int, storage: Storage = Depends(get_storage)):
    """Get a product by id."""
    product = await storage.products.get(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.put("/{product_id}", response_model=Product)
async def update_product(product_id: int, body: ProductUpdate, storage: Storage = Depends(get_storage)):
    """Update product fields that are present in the body."""
    product = await storage.products.update(product_id, body.model_dump(exclude_unset=True))
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, storage: Storage = Depends(get_storage)):
    """Delete a product. Past transaction items keep its id."""
    if not await storage.products.delete(product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
