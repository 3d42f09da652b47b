import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi.middleware import SlowAPIMiddleware

from shared.config.database import create_tables
from shared.config.settings import APP_ENV, CORS_ORIGINS, SEED_DEMO_DATA
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from shared.security import limiter

from services.auth_service.router import router as auth_router
from services.cart_service.router import router as cart_router
from services.order_service.router import router as order_router
from services.product_service.router import admin_router as product_admin_router
from services.product_service.router import router as product_router

logger = structlog.get_logger(__name__)

STARTED_AT = time.monotonic()

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    if SEED_DEMO_DATA:
        from seed import seed_demo_data

        await seed_demo_data()
    logger.info("storefront_started", environment=APP_ENV)
    yield


app = FastAPI(
    title="Storefront API",
    version="1.0.0",
    description="Users, catalog, per-user carts and orders.",
    lifespan=lifespan,
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, "storefront")

# --- SECURITY SETUP ---
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
register_exception_handlers(app)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


app.include_router(auth_router)
app.include_router(product_router)
app.include_router(product_admin_router)
app.include_router(cart_router)
app.include_router(order_router)


@app.get("/health", include_in_schema=False)
@limiter.exempt
async def health_check():
    return {
        "service": "storefront",
        "status": "running",
        "environment": APP_ENV,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    }


if __name__ == "__main__":
    import os

    import uvicorn

    port = int(os.getenv("PORT", 5800))
    uvicorn.run(app, host="0.0.0.0", port=port)
