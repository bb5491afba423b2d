"""FastAPI application entrypoint and health reporting.

Invariants:
- Health output never exposes credentials embedded in the backend URL.
"""

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.router import api_router
from storefront.core.config import settings
from storefront.db.session import init_models
from storefront.forms.session import form_registry
from storefront.utils.redaction import redact_secrets

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"

logger = logging.getLogger("storefront")


def configure_logging() -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, force=True)


app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)


@app.on_event("startup")
async def _startup() -> None:
    """Configure logging and make sure the favorites table exists."""
    configure_logging()
    await init_models()
    logger.info("Storefront admin ready; backend at %s", redact_secrets(settings.api_base_url))


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health() -> dict[str, Any]:
    """Return service status with the number of open form sessions."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "backend": redact_secrets(settings.api_base_url),
        "open_forms": len(form_registry),
    }
