# app/main.py
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api.v1.api import api_router
from app.core.config import settings
from app.core.logging import setup_logging
from app.database import pool
from app.services.gateway import UpstreamUnavailable, QueryFailure

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
logger = logging.getLogger(__name__)

# Создаем app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Relay between the storefront and the remote ERP database",
    version=settings.VERSION
)

# CORS: витрина открывается с любого origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router)

@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    return JSONResponse(status_code=500, content={"status": "ERROR", "message": str(exc)})

@app.exception_handler(QueryFailure)
async def query_failure_handler(request: Request, exc: QueryFailure):
    return JSONResponse(status_code=500, content={"error": str(exc)})

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=422, content={"error": messages or "Invalid request"})

@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} v{settings.VERSION}", "server": pool.server_identity}

@app.on_event("startup")
async def startup_event():
    logger.info(f"Bridge relay listening on port {settings.BRIDGE_PORT}")
    logger.info(f"Remote database: {pool.server_identity}/{pool.database_name}")

@app.on_event("shutdown")
async def shutdown_event():
    pool.dispose()

if __name__ == "__main__":
    uvicorn.run(app, host=settings.BRIDGE_HOST, port=settings.BRIDGE_PORT)
