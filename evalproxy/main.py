# Serve with the factory flag, apps are only built on demand:
#   uvicorn evalproxy.main:create_numbers_app --factory --port 9876
#   uvicorn evalproxy.main:create_analytics_app --factory --port 9877
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from evalproxy.api.analytics import router as analytics_router
from evalproxy.api.numbers import router as numbers_router
from evalproxy.clients.evaluation_client import EvaluationClient
from evalproxy.config.settings import Settings, settings as default_settings
from evalproxy.services.analytics_service import AnalyticsService
from evalproxy.services.cache_store import CacheStore
from evalproxy.services.number_service import NumberService
from evalproxy.services.window_store import WindowStore
from evalproxy.utils.log import app_logger


def create_numbers_app(
    client: Optional[EvaluationClient] = None,
    store: Optional[WindowStore] = None,
    settings: Settings = default_settings,
) -> FastAPI:
    client = client or EvaluationClient(timeout=settings.NUMBERS_TIMEOUT)
    store = store or WindowStore(capacity=settings.WINDOW_SIZE)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_logger.info("numbers.startup", window_size=store.capacity)
        yield
        client.close()

    app = FastAPI(title="Average Calculator", lifespan=lifespan)
    app.state.number_service = NumberService(client, store)
    app.include_router(numbers_router)
    return app


def create_analytics_app(
    client: Optional[EvaluationClient] = None,
    cache: Optional[CacheStore] = None,
    settings: Settings = default_settings,
) -> FastAPI:
    client = client or EvaluationClient(timeout=settings.ANALYTICS_TIMEOUT)
    cache = cache or CacheStore(ttl_seconds=settings.CACHE_TTL_SECONDS)
    service = AnalyticsService(
        client,
        cache,
        executor=ThreadPoolExecutor(max_workers=settings.ANALYTICS_MAX_WORKERS),
        top_users_limit=settings.TOP_USERS_LIMIT,
        latest_posts_limit=settings.LATEST_POSTS_LIMIT,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_logger.info("analytics.startup", ttl=cache.ttl)
        yield
        service.close()
        client.close()

    app = FastAPI(title="Social Media Analytics", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.analytics_service = service
    app.include_router(analytics_router)
    return app

