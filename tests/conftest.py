import pytest
from decimal import Decimal
from sqlalchemy import create_engine, insert
from app.database import Base, RemotePool
from app.models.product import SaProd
from app.models.customer import SaCli
from app.models import order  # noqa: F401
from app.services.gateway import QueryGateway

PRODUCT_ROWS = [
    {"CodProd": "M1", "Descrip": "Laptop de Ejemplo", "Precio1": Decimal("999"), "Existen": Decimal("10"), "CodInst": "Demo"},
    {"CodProd": "P2", "Descrip": "Agotado", "Precio1": Decimal("50"), "Existen": Decimal("0"), "CodInst": "Demo"},
    {"CodProd": "P3", "Descrip": "Arroz 1kg", "Precio1": Decimal("2.50"), "Existen": Decimal("100"), "CodInst": "Alimentos"},
]

CUSTOMER_ROWS = [
    {"CodClie": "C1", "Descrip": "Cliente de Prueba", "ID3": "000", "Direc1": "Calle 123", "LimiteCred": Decimal("1000")},
    {"CodClie": "C2", "Descrip": "Ana Perez", "ID3": "V-123", "Direc1": None, "LimiteCred": None},
]

@pytest.fixture
def erp_url(tmp_path):
    """URL файла SQLite вместо удаленного SQL Server"""
    return f"sqlite:///{tmp_path / 'erp.db'}"

@pytest.fixture
def seeded_url(erp_url):
    engine = create_engine(erp_url)
    Base.metadata.create_all(bind=engine)
    with engine.begin() as conn:
        conn.execute(insert(SaProd), PRODUCT_ROWS)
        conn.execute(insert(SaCli), CUSTOMER_ROWS)
    engine.dispose()
    return erp_url

@pytest.fixture
def pool(seeded_url):
    remote_pool = RemotePool(seeded_url, connect_timeout=5)
    yield remote_pool
    remote_pool.dispose()

@pytest.fixture
def gateway(pool):
    return QueryGateway(pool)

@pytest.fixture
def broken_pool(tmp_path):
    """Пул, который никогда не подключится"""
    remote_pool = RemotePool(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'erp.db'}", connect_timeout=1)
    yield remote_pool
    remote_pool.dispose()
