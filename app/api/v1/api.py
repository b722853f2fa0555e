from fastapi import APIRouter
from app.api.v1.endpoints import health, products, customers, orders, logs

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(logs.router, prefix="/logs", tags=["diagnostics"])
