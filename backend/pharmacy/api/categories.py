"""Category CRUD. Names are unique; products reference categories by name only."""

from fastapi import APIRouter, Depends, HTTPException, status

from pharmacy.core.deps import get_storage
from pharmacy.schemas import Category, CategoryCreate, CategoryUpdate
from pharmacy.storage.base import Storage

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[Category])
async def list_categories(storage: Storage = Depends(get_storage)):
    """List all categories."""
    return await storage.categories.list_all()


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, storage: Storage = Depends(get_storage)):
    """Create a category. Names must be unique."""
    return await storage.categories.create(body)


@router.get("/{category_id}", response_model=Category)
async def get_category(category_id: int, storage: Storage = Depends(get_storage)):
    """Get a category by id."""
    category = await storage.categories.get(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.put("/{category_id}", response_model=Category)
async def update_category(category_id: int, body: CategoryUpdate, storage: Storage = Depends(get_storage)):
    """Update category fields that are present in the body."""
    category = await storage.categories.update(category_id, body.model_dump(exclude_unset=True))
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, storage: Storage = Depends(get_storage)):
    """Delete a category. Products keep their category label."""
    if not await storage.categories.delete(category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
