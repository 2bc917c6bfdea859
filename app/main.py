import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from app import dependencies
from app.errors import domain_error_handler, generic_error_handler, request_validation_error_handler
from app.routers import customers, orders, products
from domain.errors import DomainError
from infrastructure import db
from infrastructure.logging import get_logger
from infrastructure.metrics import metrics

logger = get_logger()


def get_service_name() -> str:
    return os.getenv("APP__SERVICE_NAME", "order-management")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the database engine and schema, dispose of it on shutdown."""
    dependencies.engine = db.get_engine()

    async with dependencies.engine.begin() as conn:
        await conn.run_sync(db.metadata.create_all)

    logger.info("Service started", service=get_service_name())

    yield

    if dependencies.engine:
        await dependencies.engine.dispose()
        dependencies.engine = None


app = FastAPI(title="Order Management", version="0.1.0", lifespan=lifespan)

# Register error handlers
app.add_exception_handler(DomainError, domain_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, generic_error_handler)

app.include_router(orders.router)
app.include_router(customers.router)
app.include_router(products.router)


@app.get("/health")
async def health() -> dict:
    return {"service": get_service_name(), "status": "ok"}


@app.get("/metrics", response_class=PlainTextResponse)
async def get_metrics() -> str:
    return metrics.get_prometheus_text()
