"""
Приведение строк удаленной базы к каноническому виду.

Схема ERP может переименовывать поля независимо от витрины, поэтому для
каждого канонического поля задан список допустимых исходных имен.
Первое присутствующее непустое значение побеждает. Функции нормализации
никогда не бросают исключений: отсутствующий текст становится "",
отсутствующее число становится 0.
"""
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from app.core.config import settings

FieldAliases = Dict[str, Tuple[str, ...]]

PRODUCT_FIELDS: FieldAliases = {
    "id": ("id", "CodProd"),
    "code": ("code", "CodProd"),
    "name": ("name", "Descrip"),
    "price": ("price", "Precio1"),
    "stock": ("stock", "Existen"),
    "description": ("description", "Descrip"),
    "category": ("category", "CodInst"),
    "image": ("image", "Imagen"),
}

CUSTOMER_FIELDS: FieldAliases = {
    "id": ("id", "CodClie"),
    "name": ("name", "Descrip"),
    "taxId": ("taxId", "tax_id", "ID3", "Id3"),
    "address": ("address", "Direc1"),
    "creditLimit": ("creditLimit", "credit_limit", "LimiteCred"),
}

ORDER_FIELDS: FieldAliases = {
    "id": ("id", "NumeroD"),
    "date": ("date", "FechaE"),
    "customerId": ("customerId", "customer_id", "CodClie"),
    "customerName": ("customerName", "customer_name", "Descrip"),
    "total": ("total", "MtoTotal"),
    "status": ("status", "Status"),
    "items": ("items",),
}

def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())

def pick(row: Mapping[str, Any], aliases: Sequence[str], default: Any = None) -> Any:
    """Первое непустое значение среди допустимых имен поля"""
    for name in aliases:
        value = row.get(name)
        if not _is_empty(value):
            return value
    return default

def to_number(value: Any) -> float:
    """Строка или число в float, 0 при ошибке разбора"""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip().replace(",", "."))
        except (TypeError, ValueError):
            return 0.0
    # NaN и бесконечность не считаются числами
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return number

def to_int(value: Any) -> int:
    return int(to_number(value))

def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()

def normalize_product(row: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(row, Mapping):
        row = {}
    f = PRODUCT_FIELDS
    return {
        "id": _text(pick(row, f["id"], "")),
        "code": _text(pick(row, f["code"], "")),
        "name": _text(pick(row, f["name"], "")),
        "price": max(to_number(pick(row, f["price"], 0)), 0.0),
        "stock": max(to_int(pick(row, f["stock"], 0)), 0),
        "description": _text(pick(row, f["description"], "")),
        "category": _text(pick(row, f["category"], "")),
        "image": _text(pick(row, f["image"], settings.PLACEHOLDER_IMAGE)),
    }

def normalize_customer(row: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(row, Mapping):
        row = {}
    f = CUSTOMER_FIELDS
    credit_limit = pick(row, f["creditLimit"])
    return {
        "id": _text(pick(row, f["id"], "")),
        "name": _text(pick(row, f["name"], "")),
        "taxId": _text(pick(row, f["taxId"], "")),
        "address": _text(pick(row, f["address"], "")),
        "creditLimit": None if credit_limit is None else to_number(credit_limit),
    }

def normalize_order(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Запись заказа от relay; статус остается None, если его нет"""
    if not isinstance(row, Mapping):
        row = {}
    f = ORDER_FIELDS
    items = pick(row, f["items"], [])
    status: Optional[Any] = pick(row, f["status"])
    return {
        "id": _text(pick(row, f["id"], "")),
        "date": pick(row, f["date"]),
        "customerId": _text(pick(row, f["customerId"], "")),
        "customerName": _text(pick(row, f["customerName"], "")),
        "items": [
            {**normalize_product(item), "quantity": max(to_int(item.get("quantity", 1)), 1)}
            for item in items
            if isinstance(item, Mapping)
        ] if isinstance(items, list) else [],
        "total": to_number(pick(row, f["total"], 0)),
        "status": _text(status) if status is not None else None,
    }
