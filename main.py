#main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.providers.validate import validate_payout_startup
from middleware import RequestContextMiddleware
from routes.auth import router as auth_router
from routes.employees import router as employees_router
from routes.health import router as health_router
from routes.metrics import router as metrics_router
from routes.payouts import router as payouts_router
from services.observability import configure_logging
from services.uploads import upload_dir
from settings import settings

logger = logging.getLogger("hrdesk")


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)
    validate_payout_startup()

    app = FastAPI(title="HR Desk API", version="1.0.0")

    app.add_middleware(RequestContextMiddleware)

    # -----------------------------
    # ROUTERS
    # -----------------------------

    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(auth_router)
    app.include_router(employees_router)
    app.include_router(payouts_router)

    app.mount("/uploads", StaticFiles(directory=str(upload_dir())), name="uploads")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled error request_id=%s path=%s",
            getattr(request.state, "request_id", None),
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_app()
