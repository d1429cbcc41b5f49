"""
AusPost Rates
FastAPI application entry point
"""
import logging
import os

from fastapi import FastAPI

from auspost_rates import __version__
from auspost_rates.api.routes import shipping
from auspost_rates.core.config import Settings, settings as app_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings = app_settings) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    app = FastAPI(title=settings.APP_NAME, version=__version__, debug=settings.DEBUG)
    app.include_router(shipping.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    if not settings.AUSPOST_API_KEY:
        logger.warning("AUSPOST_API_KEY is not set; rate requests will be refused")

    return app


app = create_app()


def _read_port() -> int:
    """Fetch and validate the PORT environment variable."""
    value = os.environ.get("PORT", "8000")
    try:
        return int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid PORT '{value}': {exc}") from exc


def run() -> None:
    import uvicorn

    uvicorn.run("auspost_rates.main:app", host="0.0.0.0", port=_read_port())
