from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reelpulse import __version__
from reelpulse.api.router import api_router
from reelpulse.core.config import get_settings
from reelpulse.core.logging import configure_logging
from reelpulse.services.monitoring import configure_metrics

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.metrics = configure_metrics(settings)
    logger.info(
        "ReelPulse API starting | env=%s llm_provider=%s aws=%s transcripts=%s",
        settings.env,
        settings.llm_provider if settings.llm_api_key else "disabled",
        "enabled" if settings.aws_configured else "disabled",
        "enabled" if settings.scrapecreators_api_key else "disabled",
    )
    yield


app = FastAPI(title="ReelPulse API", version=__version__, openapi_url="/openapi.json", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=f"/api/{settings.api_version}")


@app.get("/healthz", tags=["health"], include_in_schema=False)
def healthz() -> dict[str, str]:
    return {"status": "ok"}
