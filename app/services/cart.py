from typing import List, Optional
from app.schemas.catalog import Product, CartItem

class OutOfStockError(ValueError):
    """Товар без остатка нельзя добавить в корзину"""
    pass

class Cart:
    """Корзина витрины. Живет только на клиенте до оформления заказа."""

    def __init__(self):
        self._items: List[CartItem] = []

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total(self) -> float:
        return sum(item.price * item.quantity for item in self._items)

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def _find(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self._items if item.id == product_id), None)

    def add(self, product: Product) -> CartItem:
        """Добавить товар; повторное добавление увеличивает количество"""
        if product.stock <= 0:
            raise OutOfStockError(f"Product {product.id} is out of stock")

        existing = self._find(product.id)
        if existing:
            existing.quantity += 1
            return existing

        item = CartItem(**product.model_dump(), quantity=1)
        self._items.append(item)
        return item

    def update_quantity(self, product_id: str, quantity: int) -> Optional[CartItem]:
        item = self._find(product_id)
        if item:
            item.quantity = max(1, quantity)
        return item

    def remove(self, product_id: str):
        self._items = [item for item in self._items if item.id != product_id]

    def clear(self):
        self._items = []
