# mock_erp/demo_db.py
"""
Демо-база ERP для локальной разработки relay без SQL Server.

    python -m mock_erp.demo_db sqlite:///erp_demo.db

После этого relay запускается с ERP_DATABASE_URL=sqlite:///erp_demo.db
и ERP_SCHEMA="".
"""
import random
import sys
import logging
from decimal import Decimal
from sqlalchemy import create_engine, insert
from sqlalchemy.engine import Engine
from app.core.logging import setup_logging
from app.database import Base
from app.models.product import SaProd
from app.models.customer import SaCli
from app.models import order  # noqa: F401  (регистрация safact/saitemfac)

logger = logging.getLogger(__name__)

CATEGORIES = ["Electronica", "Oficina", "Hogar", "Repuestos", "Servicios"]
STREETS = ["Av. Bolivar", "Calle Sucre", "Av. Libertador", "Calle Miranda"]

def create_schema(engine: Engine):
    """Создать таблицы saprod, sacli, safact, saitemfac"""
    Base.metadata.create_all(bind=engine)

def init_test_data(engine: Engine, products: int = 100, customers: int = 20, seed: int = None) -> dict:
    """
    Заполнить базу случайными товарами и клиентами.

    Примерно каждый десятый товар создается с нулевым остатком.
    """
    rng = random.Random(seed)
    create_schema(engine)

    product_rows = []
    for i in range(1, products + 1):
        product_rows.append({
            "CodProd": f"P{i:05d}",
            "Descrip": f"Producto {i}",
            "Precio1": Decimal(str(round(rng.uniform(1, 2000), 2))),
            "Existen": Decimal(0 if rng.random() < 0.1 else rng.randint(1, 500)),
            "CodInst": rng.choice(CATEGORIES),
        })

    customer_rows = []
    for i in range(1, customers + 1):
        customer_rows.append({
            "CodClie": f"C{i:04d}",
            "Descrip": f"Cliente {i}",
            "ID3": f"J-{rng.randint(10000000, 99999999)}",
            "Direc1": f"{rng.choice(STREETS)} {rng.randint(1, 300)}",
            "LimiteCred": Decimal(rng.choice([0, 500, 1000, 5000])),
        })

    with engine.begin() as conn:
        if product_rows:
            conn.execute(insert(SaProd), product_rows)
        if customer_rows:
            conn.execute(insert(SaCli), customer_rows)

    logger.info(f"Demo ERP database filled with {len(product_rows)} products and {len(customer_rows)} customers")
    return {"products": len(product_rows), "customers": len(customer_rows)}

if __name__ == "__main__":
    setup_logging()
    url = sys.argv[1] if len(sys.argv) > 1 else "sqlite:///erp_demo.db"
    init_test_data(create_engine(url))
