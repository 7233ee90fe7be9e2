from typing import Optional

from pydantic import ConfigDict, Field

from pharmacy.schemas.base import CamelModel, PartialUpdate


class CategoryBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(PartialUpdate):
    non_nullable = ("name",)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class Category(CategoryBase):
    model_config = ConfigDict(frozen=True)

    id: int
