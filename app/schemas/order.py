import random
from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
from app.schemas.catalog import CartItem

def new_order_id() -> str:
    """Номер заказа PED-NNNNN со случайным пятизначным суффиксом"""
    return f"PED-{random.randint(10000, 99999)}"

class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSED = "Processed"
    SHIPPED = "Shipped"
    CANCELLED = "Cancelled"

# Тело POST /orders
class OrderCreate(BaseModel):
    id: str = Field(default_factory=new_order_id)
    customer_id: str = Field(..., min_length=1, alias="customerId")
    customer_name: str = Field("", alias="customerName")
    items: List[CartItem] = Field(..., min_length=1)
    total: float = Field(..., ge=0)

    @validator("total")
    def total_matches_items(cls, v, values, **kwargs):
        if "items" in values:
            expected = sum(item.price * item.quantity for item in values["items"])
            if abs(v - expected) > 0.01:
                raise ValueError(f"Total {v} does not match items sum {expected}")
        return v

    class Config:
        populate_by_name = True

class Order(BaseModel):
    id: str
    date: datetime
    customer_id: str = Field(..., alias="customerId")
    customer_name: str = Field("", alias="customerName")
    items: List[CartItem] = []
    total: float = 0
    status: Optional[OrderStatus] = None

    class Config:
        from_attributes = True
        populate_by_name = True
