import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Optional, List
from app.core.config import settings
from app.schemas.bridge import BridgeConfig, ConnectionStatus, ConnectionProblem, QueryLogEntry
from app.schemas.catalog import Product, Customer, CartItem
from app.schemas.order import Order
from app.services.bridge_client import (
    BridgeClient, BridgeApiError, BridgeConnectionError, MOCK_PRODUCTS, MOCK_CUSTOMERS
)
from app.services.cart import Cart
from app.services.config_store import BridgeConfigStore

logger = logging.getLogger(__name__)

UNREACHABLE_TITLE = "Relay unreachable"
UNREACHABLE_MESSAGE = "The local relay is not responding. Is the local relay running? Start it with 'python -m app.main'."
REJECTED_TITLE = "Remote database connection failed"
REJECTED_MESSAGE = "The remote database rejected the connection."

class CheckoutValidationError(ValueError):
    """Заказ отклонен на клиенте, до обращения к relay"""
    pass

class SyncOrchestrator:
    """
    Состояние витрины и синхронизация с relay.

    Статус подключения: disconnected -> checking -> connected | disconnected.
    После успешной проверки здоровья товары и клиенты загружаются
    параллельно. Ошибка загрузки не меняет статус подключения, а оставляет
    прежние данные (или заглушки, если данных еще не было).
    """

    def __init__(self, config_store: BridgeConfigStore, client: Optional[BridgeClient] = None):
        self.config_store = config_store
        self.config: BridgeConfig = config_store.load()
        self.client = client or BridgeClient(
            self.config.base_url,
            timeout=settings.BRIDGE_TIMEOUT,
            log_capacity=settings.QUERY_LOG_CAPACITY
        )

        self.latency: Optional[str] = None
        self.error: Optional[ConnectionProblem] = None
        self.products: List[Product] = []
        self.customers: List[Customer] = []
        self.selected_customer: Optional[Customer] = None
        self.cart = Cart()
        self.orders: List[Order] = []

        self.loading = False
        self.is_processing = False

    @property
    def status(self) -> ConnectionStatus:
        return self.config.status

    @property
    def latency_ms(self) -> Optional[int]:
        if not self.latency:
            return None
        match = re.match(r"\s*(\d+)", self.latency)
        return int(match.group(1)) if match else None

    def _set_status(self, status: ConnectionStatus):
        self.config.status = status
        self.config_store.save(self.config)

    def set_base_url(self, base_url: str):
        """Пользователь сменил адрес relay"""
        base_url = base_url.strip()
        self.config.base_url = base_url
        self.client.base_url = base_url.rstrip('/')
        self._set_status(ConnectionStatus.DISCONNECTED)

    async def startup(self) -> ConnectionStatus:
        """При старте всегда перепроверяем relay, прошлый статус не учитывается"""
        if not self.config.base_url:
            logger.info("No relay URL configured, staying offline")
            return self.status
        return await self.connect()

    async def connect(self) -> ConnectionStatus:
        """Проверка здоровья relay и загрузка каталога"""
        if self.loading:
            logger.debug("Health probe already in progress")
            return self.status

        self.loading = True
        try:
            self.error = None
            self.latency = None
            self._set_status(ConnectionStatus.CHECKING)

            try:
                health = await self.client.health()
                latency = str(health.get("latency") or "") or None
            except BridgeConnectionError as e:
                logger.warning(f"Relay unreachable: {e}")
                return self._probe_failed(UNREACHABLE_TITLE, UNREACHABLE_MESSAGE)
            except BridgeApiError as e:
                logger.warning(f"Relay rejected health check: {e}")
                return self._probe_failed(REJECTED_TITLE, str(e) or REJECTED_MESSAGE)
            except Exception as e:
                logger.exception(f"Unexpected error during health check: {e}")
                return self._probe_failed(REJECTED_TITLE, str(e) or REJECTED_MESSAGE)

            self.latency = latency
            self.config.last_ping = datetime.now(timezone.utc)
            self._set_status(ConnectionStatus.CONNECTED)
            logger.info(f"Connected to relay {self.config.base_url} (latency {self.latency})")

            # Оба запроса уходят до завершения любого из них
            self.products, self.customers = await asyncio.gather(
                self._load_products(),
                self._load_customers()
            )
        finally:
            self.loading = False

        return self.status

    def _probe_failed(self, title: str, message: str) -> ConnectionStatus:
        self.error = ConnectionProblem(title=title, message=message)
        self._set_status(ConnectionStatus.DISCONNECTED)
        return self.status

    async def _load_products(self) -> List[Product]:
        try:
            return await self.client.get_products()
        except BridgeApiError as e:
            logger.error(f"Error loading products, keeping cached catalog: {e}")
            return self.products or [product.model_copy() for product in MOCK_PRODUCTS]

    async def _load_customers(self) -> List[Customer]:
        try:
            return await self.client.get_customers()
        except BridgeApiError as e:
            logger.error(f"Error loading customers, keeping cached list: {e}")
            return self.customers or [customer.model_copy() for customer in MOCK_CUSTOMERS]

    def search_products(self, term: str) -> List[Product]:
        term = term.strip().lower()
        if not term:
            return list(self.products)
        return [
            product for product in self.products
            if term in product.name.lower() or term in product.code.lower()
        ]

    def select_customer(self, customer_id: Optional[str]) -> Optional[Customer]:
        if customer_id is None:
            self.selected_customer = None
            return None
        customer = next((c for c in self.customers if c.id == customer_id), None)
        if customer is None:
            raise KeyError(f"Unknown customer {customer_id}")
        self.selected_customer = customer
        return customer

    def add_to_cart(self, product: Product) -> CartItem:
        return self.cart.add(product)

    def update_quantity(self, product_id: str, quantity: int) -> Optional[CartItem]:
        return self.cart.update_quantity(product_id, quantity)

    def remove_from_cart(self, product_id: str):
        self.cart.remove(product_id)

    @property
    def cart_total(self) -> float:
        return self.cart.total

    async def checkout(self) -> Order:
        """
        Оформление заказа.

        Без клиента или с пустой корзиной запрос в relay не отправляется.
        При ошибке корзина, выбор клиента и статус подключения не меняются,
        ошибка пробрасывается вызывающему коду без повторов.
        """
        if self.selected_customer is None:
            raise CheckoutValidationError("Select a customer to continue")
        if self.cart.is_empty:
            raise CheckoutValidationError("The cart is empty")
        if self.is_processing:
            raise CheckoutValidationError("An order is already being submitted")

        self.is_processing = True
        try:
            order = await self.client.create_order(
                self.selected_customer,
                self.cart.items,
                self.cart.total
            )
        finally:
            self.is_processing = False

        self.orders.insert(0, order)
        self.cart.clear()
        logger.info(f"Order {order.id} placed for {order.customer_name}, total {order.total}")
        return order

    def logs(self) -> List[QueryLogEntry]:
        return self.client.logs()
