"""Checkout and transaction lookup."""

from fastapi import APIRouter, Depends, HTTPException, status

from pharmacy.core.deps import get_sale_processor, get_storage
from pharmacy.schemas import (
    SaleCreate, Transaction, TransactionDetail, TransactionItem, TransactionItemCreate,
)
from pharmacy.services.sales import SaleProcessor
from pharmacy.storage.base import Storage

router = APIRouter(prefix="/transactions", tags=["transactions"])
items_router = APIRouter(prefix="/transaction-items", tags=["transactions"])


@router.get("", response_model=list[Transaction])
async def list_transactions(storage: Storage = Depends(get_storage)):
    """List all transactions without their items."""
    return await storage.transactions.list_all()


@router.post("", response_model=TransactionDetail, status_code=status.HTTP_201_CREATED)
async def create_transaction(body: SaleCreate, processor: SaleProcessor = Depends(get_sale_processor)):
    """Check out a cart: validates the total and stock, then stores the sale and decrements stock."""
    return await processor.create_transaction(body)


@router.get("/{transaction_id}", response_model=TransactionDetail)
async def get_transaction(transaction_id: int, storage: Storage = Depends(get_storage)):
    """Get a transaction with its line items."""
    transaction = await storage.transactions.get(transaction_id)
    if transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    items = await storage.transaction_items.list_for_transaction(transaction_id)
    return TransactionDetail(**transaction.model_dump(), items=items)


@items_router.post("", response_model=TransactionItem, status_code=status.HTTP_201_CREATED)
async def create_transaction_item(body: TransactionItemCreate, storage: Storage = Depends(get_storage)):
    """Attach a raw line item to an existing transaction. Does not touch stock."""
    if await storage.transactions.get(body.transaction_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    if await storage.products.get(body.product_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return await storage.transaction_items.create(body)
