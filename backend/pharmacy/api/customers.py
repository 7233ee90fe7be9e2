"""Customer CRUD."""

from fastapi import APIRouter, Depends, HTTPException, status

from pharmacy.core.deps import get_storage
from pharmacy.schemas import Customer, CustomerCreate, CustomerUpdate
from pharmacy.storage.base import Storage

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[Customer])
async def list_customers(storage: Storage = Depends(get_storage)):
    """List all customers."""
    return await storage.customers.list_all()


@router.post("", response_model=Customer, status_code=status.HTTP_201_CREATED)
async def create_customer(body: CustomerCreate, storage: Storage = Depends(get_storage)):
    """Create a customer record."""
    return await storage.customers.create(body)


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(customer_id: int, storage: Storage = Depends(get_storage)):
    """Get a customer by id."""
    customer = await storage.customers.get(customer_id)
    if customer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.put("/{customer_id}", response_model=Customer)
async def update_customer(customer_id: int, body: CustomerUpdate, storage: Storage = Depends(get_storage)):
    """Update customer fields that are present in the body."""
    customer = await storage.customers.update(customer_id, body.model_dump(exclude_unset=True))
    if customer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: int, storage: Storage = Depends(get_storage)):
    """Delete a customer."""
    if not await storage.customers.delete(customer_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
