"""
FastAPI Application Entry Point

Delivery Orders API - records food delivery orders and numbers them
with a short per-day sequence.

Endpoints:
    - POST /v1/delivery: Create an order, answers with its short id
    - GET /v1/deliveries: List every stored order
    - PUT /v1/delivery/{id}: Replace an order's delivery, address and payment
    - DELETE /v1/delivery/{id}: Remove an order
    - GET /health: System health check

Run with ``delivery-api`` (or ``python -m delivery_api``); DATABASE_URL
must be set or the process exits before the port is bound.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from delivery_api.core.config import Settings, get_settings, setup_logging
from delivery_api.core.exceptions import (
    ConfigurationError,
    DailyLimitExceeded,
    InvalidId,
    NotFound,
    ValidationError,
)
from delivery_api.database import create_engine, create_session_maker, get_db, init_db
from delivery_api.middleware import ALLOWED_HEADERS, ALLOWED_METHODS, PreflightCORSMiddleware
from delivery_api.schemas import (
    DeliveryDocument,
    DeliveryPayload,
    ErrorResponse,
    HealthResponse,
    IdResponse,
)
from delivery_api.services import (
    CounterService,
    OrderRepository,
    get_counter_service,
    get_order_repository,
    get_today,
)

logger = logging.getLogger(__name__)

# Client-facing messages
DAILY_LIMIT_MESSAGE = "Limite diário de pedidos atingido"
SAVE_ERROR_MESSAGE = "Erro ao salvar o pedido"
LIST_ERROR_MESSAGE = "Erro ao buscar os pedidos"
UPDATE_ERROR_MESSAGE = "Erro ao atualizar o pedido"
DELETE_ERROR_MESSAGE = "Erro ao deletar o pedido"
NOT_FOUND_MESSAGE = "Pedido não encontrado"
INVALID_PAYLOAD_MESSAGE = "Dados do pedido inválidos"
INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

router = APIRouter(prefix="/v1", tags=["Deliveries"])


@router.post(
    "/delivery",
    status_code=201,
    response_model=IdResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Create Order",
)
async def create_delivery(
    payload: DeliveryPayload,
    counters: CounterService = Depends(get_counter_service),
    orders: OrderRepository = Depends(get_order_repository),
    today: str = Depends(get_today),
) -> Any:
    """
    Mint the next short id for today and store the order under it.

    The counter is committed before the order is written; if the write
    fails, that short id is not handed out again.
    """
    try:
        short_id = await counters.next_short_id(today)
        await orders.create(payload.delivery, payload.address, payload.payment, short_id)
    except DailyLimitExceeded as e:
        logger.warning(e.message)
        return error_response(400, DAILY_LIMIT_MESSAGE)
    except Exception as e:
        logger.exception(f"{SAVE_ERROR_MESSAGE}: {e}")
        return error_response(500, SAVE_ERROR_MESSAGE)

    return IdResponse(id=short_id)


@router.get(
    "/deliveries",
    response_model=list[DeliveryDocument],
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
    summary="List Orders",
)
async def list_deliveries(
    orders: OrderRepository = Depends(get_order_repository),
) -> Any:
    """Every stored order, oldest first."""
    try:
        rows = await orders.list_all()
    except Exception as e:
        logger.exception(f"{LIST_ERROR_MESSAGE}: {e}")
        return error_response(500, LIST_ERROR_MESSAGE)

    return [DeliveryDocument.from_row(row) for row in rows]


@router.put(
    "/delivery/{order_id}",
    response_model=IdResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Update Order",
)
async def update_delivery(
    order_id: str,
    payload: DeliveryPayload,
    orders: OrderRepository = Depends(get_order_repository),
) -> Any:
    """
    Replace the order's delivery, address and payment; short id and
    creation time are kept.

    The id in the answer is the stored canonical form (lowercase,
    hyphenated), which may differ in spelling from the path id.
    """
    try:
        order = await orders.update_by_id(
            order_id, payload.delivery, payload.address, payload.payment
        )
    except NotFound:
        return error_response(404, NOT_FOUND_MESSAGE)
    except InvalidId as e:
        logger.error(f"{UPDATE_ERROR_MESSAGE}: {e.message}")
        return error_response(500, UPDATE_ERROR_MESSAGE)
    except Exception as e:
        logger.exception(f"{UPDATE_ERROR_MESSAGE}: {e}")
        return error_response(500, UPDATE_ERROR_MESSAGE)

    return IdResponse(id=order.id)


@router.delete(
    "/delivery/{order_id}",
    response_model=IdResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Delete Order",
)
async def delete_delivery(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
) -> Any:
    """Remove the order; answers with its canonical stored id."""
    try:
        deleted_id = await orders.delete_by_id(order_id)
    except NotFound:
        return error_response(404, NOT_FOUND_MESSAGE)
    except InvalidId as e:
        logger.error(f"{DELETE_ERROR_MESSAGE}: {e.message}")
        return error_response(500, DELETE_ERROR_MESSAGE)
    except Exception as e:
        logger.exception(f"{DELETE_ERROR_MESSAGE}: {e}")
        return error_response(500, DELETE_ERROR_MESSAGE)

    return IdResponse(id=deleted_id)


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the cached environment settings
    """
    settings = settings or get_settings()
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Open the store connection pool on startup, dispose it on shutdown.
        """
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {settings.app_name}")
        logger.info(f"   Version: {settings.app_version}")
        logger.info(f"   Environment: {settings.env_mode.value}")
        logger.info(f"   Debug: {settings.debug}")
        logger.info("=" * 60)

        try:
            database_url = settings.require_database_url()
        except ConfigurationError as e:
            logger.error(e.message)
            raise

        engine = create_engine(database_url, settings)
        app.state.engine = engine
        app.state.session_maker = create_session_maker(engine)
        await init_db(engine)
        logger.info("✅ Connected to database")

        yield  # Application runs

        logger.info("Shutting down...")
        await engine.dispose()
        logger.info("✅ Cleanup complete")

    app = FastAPI(
        title=settings.app_name,
        description="Delivery order intake with per-day sequential order numbers.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )

    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
    )

    app.include_router(router)

    # =========================================================================
    # ROOT & HEALTH ENDPOINTS
    # =========================================================================

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """API root with navigation links."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.env_mode.value,
            "deliveries": "/v1/deliveries",
            "health": "/health",
        }

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="System Health Check",
    )
    async def health_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
        """Verify the database answers."""
        db_status = "healthy"
        try:
            await db.execute(text("SELECT 1"))
        except Exception as e:
            db_status = f"unhealthy: {str(e)}"
            logger.error(f"Database health check failed: {e}")

        return HealthResponse(
            status="operational" if db_status == "healthy" else "degraded",
            database=db_status,
            timestamp=datetime.now(timezone.utc),
        )

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Missing or mistyped fields are rejected before anything is written."""
        error = ValidationError(errors=jsonable_encoder(exc.errors()))
        logger.warning(f"{request.method} {request.url.path}: {error.message} ({len(error.errors)} problems)")
        return JSONResponse(
            status_code=400,
            content={"error": INVALID_PAYLOAD_MESSAGE, "detail": error.errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler; the body keeps the usual error shape."""
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
        return error_response(500, INTERNAL_ERROR_MESSAGE)

    return app


app = create_app()


def run() -> None:
    """
    Console entry point.

    Refuses to start without DATABASE_URL; the error is logged and the
    process exits with status 1 before uvicorn binds the port.
    """
    settings = get_settings()
    setup_logging()

    try:
        settings.require_database_url()
    except ConfigurationError as e:
        logger.error(e.message)
        sys.exit(1)

    uvicorn.run(
        "delivery_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )
