import httpx
import logging
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from app.core.config import settings
from app.schemas.bridge import QueryType, QueryLogEntry
from app.schemas.catalog import Product, Customer, CartItem
from app.schemas.order import Order, OrderStatus, new_order_id
from app.services.normalizer import normalize_product, normalize_customer, normalize_order
from app.services.query_log import QueryLog

logger = logging.getLogger(__name__)

# Данные-заглушки, пока relay не настроен
MOCK_PRODUCTS: List[Product] = [
    Product(
        id="M1",
        code="MOCK-01",
        name="Laptop de Ejemplo",
        description="Demo data (relay disconnected)",
        price=999,
        stock=10,
        category="Demo",
        image=settings.PLACEHOLDER_IMAGE
    ),
]

MOCK_CUSTOMERS: List[Customer] = [
    Customer(id="C1", name="Cliente de Prueba", taxId="000", address="Calle 123", creditLimit=1000),
]

class BridgeApiError(Exception):
    """Базовое исключение для ошибок relay"""
    pass

class BridgeConnectionError(BridgeApiError):
    """Relay не отвечает: процесс не запущен, DNS, таймаут"""
    pass

class BridgeResponseError(BridgeApiError):
    """Relay ответил ошибкой"""
    def __init__(self, message: str, status_code: int, response: Optional[dict] = None):
        self.status_code = status_code
        self.response = response
        super().__init__(message)

class BridgeClient:
    """Клиент relay для витрины"""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: int = 30,
        log_capacity: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or "").rstrip('/')
        self.timeout = timeout
        self.transport = transport

        self._client: Optional[httpx.AsyncClient] = None
        self._log = QueryLog(log_capacity)

    @property
    def offline(self) -> bool:
        """Без адреса relay клиент работает на заглушках"""
        return not self.base_url

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    async def connect(self):
        """Создание HTTP сессии"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                headers={
                    "User-Agent": "ERP-Bridge-Storefront/1.0",
                    "Accept": "application/json",
                }
            )
            logger.debug(f"HTTP session opened for relay at {self.base_url or '<offline>'}")

    async def disconnect(self):
        """Закрытие HTTP сессии"""
        if self._client:
            await self._client.aclose()
            self._client = None

    def logs(self) -> List[QueryLogEntry]:
        return self._log.entries()

    def log_error(self, message: str):
        self._log.record(QueryType.ERROR, message)

    async def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        """
        Один HTTP запрос к relay, без повторов.

        Сетевые ошибки превращаются в BridgeConnectionError, ответы
        не-2xx в BridgeResponseError с сообщением из тела ответа.
        """
        if self._client is None:
            await self.connect()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        logger.debug(f"Request to relay: {method} {url}")

        try:
            response = await self._client.request(method=method, url=url, **kwargs)
        except httpx.TransportError as e:
            logger.warning(f"Relay at {self.base_url} is unreachable: {e}")
            raise BridgeConnectionError(f"Failed to fetch {url}: {e}") from e

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = None
            message = None
            if isinstance(error_data, dict):
                message = error_data.get("message") or error_data.get("error")
            if not message:
                message = f"Relay error: {response.status_code} - {response.text[:200]}"
            raise BridgeResponseError(str(message), response.status_code, error_data)

        try:
            return response.json()
        except ValueError as e:
            raise BridgeResponseError(f"Invalid JSON from relay: {e}", response.status_code) from e

    async def health(self) -> Dict[str, Any]:
        """Проверка relay и удаленной базы"""
        if self.offline:
            raise BridgeConnectionError("Relay URL is not configured")
        data = await self._request("GET", "/health")
        if not isinstance(data, dict):
            raise BridgeResponseError("Unexpected health payload", 200, data)
        return data

    async def get_products(self) -> List[Product]:
        """Каталог товаров"""
        if self.offline:
            return [product.model_copy() for product in MOCK_PRODUCTS]

        self._log.record(QueryType.SELECT, "SQL: SELECT TOP 100 CodProd... FROM dbo.saprod")
        try:
            data = await self._request("GET", "/products")
            if not isinstance(data, list):
                raise BridgeResponseError("Unexpected products payload", 200, data)
        except BridgeApiError as e:
            self.log_error(str(e))
            raise

        products = [Product.model_validate(normalize_product(row)) for row in data]
        logger.info(f"Retrieved {len(products)} products from relay")
        return products

    async def get_customers(self) -> List[Customer]:
        """Список клиентов"""
        if self.offline:
            return [customer.model_copy() for customer in MOCK_CUSTOMERS]

        self._log.record(QueryType.SELECT, "SQL: SELECT TOP 200 CodClie... FROM dbo.sacli")
        try:
            data = await self._request("GET", "/customers")
            if not isinstance(data, list):
                raise BridgeResponseError("Unexpected customers payload", 200, data)
        except BridgeApiError as e:
            self.log_error(f"Error loading customers: {e}")
            raise

        customers = [Customer.model_validate(normalize_customer(row)) for row in data]
        logger.info(f"Retrieved {len(customers)} customers from relay")
        return customers

    async def create_order(self, customer: Customer, items: List[CartItem], total: float) -> Order:
        """
        Отправка заказа в relay.

        Номер генерируется при каждом вызове, поэтому вызывающий код
        не должен повторять запрос после ошибки.
        """
        order_id = new_order_id()
        payload = {
            "id": order_id,
            "customerId": customer.id,
            "customerName": customer.name,
            "items": [item.model_dump(by_alias=True) for item in items],
            "total": total,
        }

        if self.offline:
            return Order.model_validate({
                **payload,
                "date": datetime.now(timezone.utc),
                "status": OrderStatus.PROCESSED,
            })

        self._log.record(QueryType.INSERT, f"SQL: INSERT INTO dbo.safact VALUES ('{order_id}', ...)")
        try:
            data = await self._request("POST", "/orders", json=payload)
        except BridgeApiError as e:
            self.log_error(str(e))
            logger.error(f"Error creating order {order_id}: {e}")
            raise

        record = normalize_order(data if isinstance(data, dict) else {})
        record["id"] = record["id"] or order_id
        record["customerId"] = record["customerId"] or customer.id
        record["customerName"] = record["customerName"] or customer.name
        record["date"] = record["date"] or datetime.now(timezone.utc)
        if not record["items"]:
            record["items"] = payload["items"]
        if not record["total"]:
            record["total"] = total
        if record["status"] not in {status.value for status in OrderStatus}:
            record["status"] = None

        logger.info(f"Order {record['id']} synced through relay")
        return Order.model_validate(record)
