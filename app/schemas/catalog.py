from pydantic import BaseModel, Field
from typing import Optional

# Товар в том виде, в каком его отдает relay
class ProductRecord(BaseModel):
    id: str
    code: str
    name: str
    price: float = Field(0, ge=0)
    stock: int = Field(0, ge=0)

    class Config:
        from_attributes = True

# Товар в каталоге витрины
class Product(ProductRecord):
    description: str = ""
    category: str = ""
    image: str = ""

    @property
    def available(self) -> bool:
        """Товар с нулевым остатком виден, но не заказывается"""
        return self.stock > 0

class Customer(BaseModel):
    id: str
    name: str
    tax_id: Optional[str] = Field(None, alias="taxId")
    address: Optional[str] = None
    credit_limit: Optional[float] = Field(None, alias="creditLimit")

    class Config:
        from_attributes = True
        populate_by_name = True

class CartItem(Product):
    quantity: int = Field(1, ge=1)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity
