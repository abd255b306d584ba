import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import text

from coinhub.core.config import settings
from coinhub.api.v1.router import api_router
from coinhub.api.errors import install_error_handlers
from coinhub.core.db import AsyncSessionLocal

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

install_error_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/api/docs", include_in_schema=False)
async def docs_alias():
    return RedirectResponse(url="/docs")


@app.get("/api/openapi.json", include_in_schema=False)
async def openapi_alias():
    return JSONResponse(app.openapi())


@app.get("/health")
async def health():
    db_ok = False
    try:
        async with AsyncSessionLocal() as s:
            await s.execute(text("SELECT 1"))
        db_ok = True
    except Exception as e:
        logger.warning("health check db failed err=%s", str(e)[:220])
    return {"status": "ok" if db_ok else "degraded", "db_ok": db_ok}
