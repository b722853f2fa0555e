from decimal import Decimal
from app.core.config import settings
from app.services.normalizer import (
    PRODUCT_FIELDS, CUSTOMER_FIELDS, pick, to_number,
    normalize_product, normalize_customer, normalize_order
)

def test_alias_tables_are_explicit():
    assert PRODUCT_FIELDS["price"] == ("price", "Precio1")
    assert PRODUCT_FIELDS["stock"] == ("stock", "Existen")
    assert CUSTOMER_FIELDS["id"] == ("id", "CodClie")

def test_canonical_name_wins_over_legacy():
    product = normalize_product({"id": "A1", "CodProd": "LEGACY", "price": 10, "Precio1": 99})
    assert product["id"] == "A1"
    assert product["price"] == 10

def test_legacy_names_are_accepted():
    product = normalize_product({"CodProd": "X1", "Descrip": "Tornillo", "Precio1": "12.5", "Existen": Decimal("3.000")})

    assert product["id"] == "X1"
    assert product["code"] == "X1"
    assert product["name"] == "Tornillo"
    assert product["description"] == "Tornillo"
    assert product["price"] == 12.5
    assert product["stock"] == 3
    assert product["image"] == settings.PLACEHOLDER_IMAGE

def test_empty_canonical_value_falls_back():
    assert pick({"name": "  ", "Descrip": "Real"}, ("name", "Descrip")) == "Real"
    assert pick({"name": None}, ("name", "Descrip"), "x") == "x"

def test_numeric_coercion_defaults_to_zero():
    assert to_number("12,5") == 12.5
    assert to_number("abc") == 0
    assert to_number(None) == 0
    assert to_number(float("nan")) == 0

    product = normalize_product({"id": "B", "price": "n/a", "stock": "-4"})
    assert product["price"] == 0
    assert product["stock"] == 0

def test_never_raises_on_garbage():
    assert normalize_product(None)["id"] == ""
    assert normalize_customer("not a row")["name"] == ""
    assert normalize_order(42)["items"] == []

def test_customer_optional_fields():
    customer = normalize_customer({"CodClie": "C9", "Descrip": "Nadie", "Id3": "J-1"})

    assert customer["id"] == "C9"
    assert customer["taxId"] == "J-1"
    assert customer["address"] == ""
    assert customer["creditLimit"] is None

def test_order_status_stays_implicit():
    order = normalize_order({
        "NumeroD": "PED-11111",
        "CodClie": "C1",
        "MtoTotal": "25.5",
        "items": [{"id": "M1", "price": 25.5, "quantity": 0}],
    })

    assert order["id"] == "PED-11111"
    assert order["customerId"] == "C1"
    assert order["total"] == 25.5
    assert order["status"] is None
    assert order["items"][0]["quantity"] == 1
