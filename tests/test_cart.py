import pytest
from app.schemas.catalog import Product
from app.services.cart import Cart, OutOfStockError

LAPTOP = Product(id="M1", code="MOCK-01", name="Laptop", price=999, stock=10)
MOUSE = Product(id="M2", code="MOCK-02", name="Mouse", price=25.5, stock=3)
SOLD_OUT = Product(id="M3", code="MOCK-03", name="Monitor", price=300, stock=0)

def test_same_product_increments_quantity():
    cart = Cart()
    cart.add(LAPTOP)
    cart.add(LAPTOP)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2
    assert cart.count == 2

def test_out_of_stock_product_is_rejected():
    cart = Cart()
    assert SOLD_OUT.available is False

    with pytest.raises(OutOfStockError):
        cart.add(SOLD_OUT)
    assert cart.is_empty

def test_total_recomputed_after_every_change():
    cart = Cart()
    cart.add(LAPTOP)
    cart.add(MOUSE)
    assert cart.total == 999 + 25.5

    cart.update_quantity("M2", 4)
    assert cart.total == 999 + 25.5 * 4

    cart.remove("M1")
    assert cart.total == 25.5 * 4

    cart.clear()
    assert cart.total == 0

def test_quantity_never_below_one():
    cart = Cart()
    cart.add(MOUSE)

    item = cart.update_quantity("M2", 0)
    assert item.quantity == 1
    assert cart.update_quantity("missing", 3) is None
