import time
import logging
from datetime import datetime, timezone
from typing import Dict, Any, List
from sqlalchemy import select, insert, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from app.database import RemotePool, ConnectionFailure, driver_message, pool as relay_pool
from app.models.product import SaProd
from app.models.customer import SaCli
from app.models.order import SaFact, SaItemFac
from app.schemas.bridge import QueryType, QueryLogEntry
from app.schemas.order import OrderCreate, OrderStatus
from app.services.normalizer import normalize_product, normalize_customer
from app.services.query_log import QueryLog
from app.core.config import settings

logger = logging.getLogger(__name__)

class GatewayError(Exception):
    """Базовое исключение шлюза запросов"""
    pass

class UpstreamUnavailable(GatewayError):
    """Удаленная база недоступна"""
    pass

class QueryFailure(GatewayError):
    """Запрос к удаленной базе завершился ошибкой"""
    pass

class QueryGateway:
    """Фиксированный набор запросов к удаленной базе ERP"""

    def __init__(
        self,
        pool: RemotePool,
        products_limit: int = 100,
        customers_limit: int = 200,
        log_capacity: int = 30
    ):
        self.pool = pool
        self.products_limit = products_limit
        self.customers_limit = customers_limit
        self._log = QueryLog(log_capacity)

    def logs(self) -> List[QueryLogEntry]:
        return self._log.entries()

    def health(self) -> Dict[str, Any]:
        """Проверка подключения с замером задержки: SELECT 1 на живом соединении"""
        start = time.perf_counter()
        try:
            engine = self.pool.acquire()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except ConnectionFailure as e:
            self._log.record(QueryType.ERROR, f"Health check failed: {e}")
            raise UpstreamUnavailable(str(e)) from e
        except SQLAlchemyError as e:
            # Движок открыт, но база пропала: следующий acquire() переподключится
            self.pool.invalidate()
            message = driver_message(e)
            logger.error(f"Health check failed: {message}")
            self._log.record(QueryType.ERROR, f"Health check failed: {message}")
            raise UpstreamUnavailable(message) from e

        latency_ms = int(round((time.perf_counter() - start) * 1000))
        return {
            "status": "OK",
            "db": f"{self.pool.database_name or self.pool.server_identity} online",
            "latency": f"{latency_ms}ms",
            "latency_ms": latency_ms,
            "server": self.pool.server_identity,
        }

    def _fail(self, exc: Exception, what: str) -> QueryFailure:
        """Записать ошибку в журнал и вернуть QueryFailure для raise"""
        if isinstance(exc, DBAPIError) and exc.connection_invalidated:
            self.pool.invalidate()
        message = driver_message(exc)
        logger.error(f"Error {what}: {message}")
        self._log.record(QueryType.ERROR, message)
        return QueryFailure(message)

    def list_products(self) -> List[Dict[str, Any]]:
        stmt = (
            select(
                SaProd.CodProd.label("id"),
                SaProd.CodProd.label("code"),
                SaProd.Descrip.label("name"),
                SaProd.Precio1.label("price"),
                SaProd.Existen.label("stock"),
                SaProd.CodInst.label("category"),
            )
            .where(SaProd.Existen > 0)
            .order_by(SaProd.Descrip.asc())
            .limit(self.products_limit)
        )
        self._log.record(
            QueryType.SELECT,
            f"SELECT TOP {self.products_limit} CodProd, Descrip, Precio1, Existen FROM saprod WHERE Existen > 0"
        )
        try:
            engine = self.pool.acquire()
            with engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except (ConnectionFailure, SQLAlchemyError) as e:
            raise self._fail(e, "listing products") from e

        products = [normalize_product(row) for row in rows]
        logger.info(f"Retrieved {len(products)} products from ERP")
        return products

    def list_customers(self) -> List[Dict[str, Any]]:
        stmt = (
            select(
                SaCli.CodClie.label("id"),
                SaCli.Descrip.label("name"),
                SaCli.ID3.label("taxId"),
                SaCli.Direc1.label("address"),
                SaCli.LimiteCred.label("creditLimit"),
            )
            .order_by(SaCli.Descrip.asc())
            .limit(self.customers_limit)
        )
        self._log.record(
            QueryType.SELECT,
            f"SELECT TOP {self.customers_limit} CodClie, Descrip FROM sacli"
        )
        try:
            engine = self.pool.acquire()
            with engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except (ConnectionFailure, SQLAlchemyError) as e:
            raise self._fail(e, "listing customers") from e

        customers = [normalize_customer(row) for row in rows]
        logger.info(f"Retrieved {len(customers)} customers from ERP")
        return customers

    def create_order(self, order: OrderCreate) -> Dict[str, Any]:
        """
        Запись заказа в safact/saitemfac одной транзакцией.

        Номер заказа приходит от клиента и не выводится из содержимого,
        поэтому повтор после ошибки может создать дубликат.
        """
        created_at = datetime.now(timezone.utc)
        header = {
            "NumeroD": order.id,
            "CodClie": order.customer_id,
            "Descrip": order.customer_name,
            "FechaE": created_at,
            "MtoTotal": order.total,
            "Status": OrderStatus.PROCESSED.value,
        }
        lines = [
            {
                "NumeroD": order.id,
                "NroLinea": number,
                "CodItem": item.id,
                "Descrip1": item.name,
                "Cantidad": item.quantity,
                "Precio": item.price,
                "TotalItem": item.price * item.quantity,
            }
            for number, item in enumerate(order.items, start=1)
        ]

        self._log.record(QueryType.INSERT, f"INSERT INTO safact VALUES ('{order.id}', ...)")
        try:
            engine = self.pool.acquire()
            with engine.begin() as conn:
                conn.execute(insert(SaFact), [header])
                conn.execute(insert(SaItemFac), lines)
        except (ConnectionFailure, SQLAlchemyError) as e:
            raise self._fail(e, f"creating order {order.id}") from e

        logger.info(f"Order {order.id} created in ERP for customer {order.customer_id}")
        return {
            "id": order.id,
            "date": created_at,
            "customerId": order.customer_id,
            "customerName": order.customer_name,
            "items": [item.model_dump(by_alias=True) for item in order.items],
            "total": order.total,
            "status": OrderStatus.PROCESSED.value,
        }

# Шлюз relay-процесса
gateway = QueryGateway(
    relay_pool,
    products_limit=settings.PRODUCTS_LIMIT,
    customers_limit=settings.CUSTOMERS_LIMIT,
    log_capacity=settings.QUERY_LOG_CAPACITY
)
