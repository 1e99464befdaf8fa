# File: app/schemas/product.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

MAX_PRICE = Decimal("999999.99")


class ProductBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class ProductCreate(ProductBase):
    price: Decimal = Field(ge=0, le=MAX_PRICE)
    stock: int = Field(ge=0)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, le=MAX_PRICE)
    stock: Optional[int] = Field(default=None, ge=0)
    clear_image: bool = False


class ProductRead(ProductBase):
    id: int
    price: float
    stock: int
    image: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        # Pydantic v2 equivalent of orm_mode=True
        from_attributes = True
