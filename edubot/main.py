from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from edubot.api.chatbot import router as chatbot_router
from edubot.api.health import router as health_router
from edubot.api.recommend import router as recommend_router
from edubot.api.schools import router as schools_router
from edubot.api.upload import router as upload_router
from edubot.config import get_settings
from edubot.db.base import UpstreamFetchError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Prepare local storage and announce the API routes on startup."""
    settings = get_settings()
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    if settings.DB_BACKEND.lower() == "sqlite":
        from edubot.db.sqlite_repo import SQLiteSchoolRepository

        Path(settings.SQLITE_PATH).parent.mkdir(parents=True, exist_ok=True)
        repo = SQLiteSchoolRepository(settings.SQLITE_PATH)
        await repo.init_db()
        await repo.engine.dispose()

    logger.info("School store backend: %s", settings.DB_BACKEND)
    logger.info("Schools API: /api/schools")
    logger.info("Recommend API: /api/recommend")
    logger.info("Chatbot API: /api/chatbot/ask")
    yield


app = FastAPI(
    title="EduBot API",
    description="School recommendations and an admission assistant chatbot",
    version="0.1.0",
    lifespan=lifespan,
)

_settings = get_settings()
_cors_origins = [o.strip() for o in _settings.CORS_ORIGINS.split(",") if o.strip()] if _settings.CORS_ORIGINS else []
if _cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(health_router)
app.include_router(schools_router)
app.include_router(recommend_router)
app.include_router(chatbot_router)
app.include_router(upload_router)


@app.exception_handler(UpstreamFetchError)
async def upstream_fetch_error_handler(request: Request, exc: UpstreamFetchError) -> JSONResponse:
    logger.error("School store unavailable during %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Failed to fetch schools"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error during %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Serve the bundled front-end when present: main.html at / and its assets
# alongside.  API routes are registered first so they always take precedence.
STATIC_DIR = Path(_settings.STATIC_DIR).resolve()
if (STATIC_DIR / "main.html").is_file():

    @app.get("/", include_in_schema=False)
    async def serve_home() -> FileResponse:
        """Serve the single-page front-end."""
        return FileResponse(STATIC_DIR / "main.html")

    app.mount("/", StaticFiles(directory=str(STATIC_DIR)), name="static")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Server running at http://localhost:%d", _settings.PORT)
    uvicorn.run("edubot.main:app", host="0.0.0.0", port=_settings.PORT)
