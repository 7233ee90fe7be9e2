"""Supplier CRUD."""

from fastapi import APIRouter, Depends, HTTPException, status

from pharmacy.core.deps import get_storage
from pharmacy.schemas import Supplier, SupplierCreate, SupplierUpdate
from pharmacy.storage.base import Storage

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


@router.get("", response_model=list[Supplier])
async def list_suppliers(storage: Storage = Depends(get_storage)):
    """List all suppliers."""
    return await storage.suppliers.list_all()


@router.post("", response_model=Supplier, status_code=status.HTTP_201_CREATED)
async def create_supplier(body: SupplierCreate, storage: Storage = Depends(get_storage)):
    """Create a supplier record."""
    return await storage.suppliers.create(body)


@router.get("/{supplier_id}", response_model=Supplier)
async def get_supplier(supplier_id: int, storage: Storage = Depends(get_storage)):
    """Get a supplier by id."""
    supplier = await storage.suppliers.get(supplier_id)
    if supplier is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
    return supplier


@router.put("/{supplier_id}", response_model=Supplier)
async def update_supplier(supplier_id: int, body: SupplierUpdate, storage: Storage = Depends(get_storage)):
    """Update supplier fields that are present in the body."""
    supplier = await storage.suppliers.update(supplier_id, body.model_dump(exclude_unset=True))
    if supplier is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
    return supplier


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(supplier_id: int, storage: Storage = Depends(get_storage)):
    """Delete a supplier."""
    if not await storage.suppliers.delete(supplier_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supplier not found")
