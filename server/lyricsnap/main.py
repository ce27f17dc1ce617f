import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lyricsnap.api import auth, deps, lyrics
from lyricsnap.config import settings
from lyricsnap.exceptions import AuthExpired, ConfigurationError, UpstreamFailure

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    yield
    # Release pooled connections held by the provider clients
    await deps.spotify_catalog.close()
    await deps.lrclib_service.close()


app = FastAPI(
    title="LyricSnap API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every failure leaves the proxy as {"error": "..."}
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(UpstreamFailure)
async def upstream_error_handler(_request: Request, exc: UpstreamFailure) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(AuthExpired)
async def auth_error_handler(_request: Request, exc: AuthExpired) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=401)


@app.exception_handler(ConfigurationError)
async def config_error_handler(_request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("Configuration error: %s", exc.message)
    return JSONResponse({"error": exc.message}, status_code=503)


# API routes
app.include_router(lyrics.router, prefix="/lyrics", tags=["lyrics"])
app.include_router(lyrics.router, prefix="/api/lyrics", tags=["lyrics"])
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])


@app.get("/api/health")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}
