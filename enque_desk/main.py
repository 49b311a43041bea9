from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from enque_desk.api.router import api_router
from enque_desk.cache.query_cache import QueryCache
from enque_desk.cache.ticket_preloader import PreloaderRegistry, PreloadOptions
from enque_desk.clients.api_client import EnqueApiClient
from enque_desk.core.config import get_settings
from enque_desk.core.errors import register_exception_handlers
from enque_desk.core.logging import bind_request_context, get_logger, new_correlation_id, setup_logging
from enque_desk.core.tenancy import TenancyMiddleware

settings = get_settings()
setup_logging(
    debug=settings.app_debug,
    json_output=settings.log_json,
    buffer_size=settings.log_buffer_size,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Enque Desk started", environment=settings.app_env, api_url=settings.api_url)
    yield
    app.state.preloader_registry.shutdown()
    app.state.api_client.close()
    logger.info("Enque Desk stopped")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    debug=settings.app_debug,
    lifespan=lifespan,
)

app.state.api_client = EnqueApiClient.from_settings(settings)
app.state.query_cache = QueryCache()
app.state.preloader_registry = PreloaderRegistry(
    app.state.query_cache,
    options=PreloadOptions(
        max_concurrent=settings.preload_max_concurrent,
        delay_between=settings.preload_delay_ms / 1000,
        priority_threshold=settings.preload_priority_threshold,
        enabled=settings.preload_enabled,
    ),
    stale_time=settings.ticket_html_stale,
    gc_time=settings.ticket_html_gc,
    idle_timeout=settings.preload_idle_timeout,
)

app.add_middleware(TenancyMiddleware, settings=settings)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    request_id = request.headers.get("x-request-id") or new_correlation_id()
    bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Enque Desk backend is running"}
