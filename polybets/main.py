import logging

from fastapi import FastAPI

from .api.router import api_router
from .core.logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Read-only Polymarket predictions for crypto assets. "
    "Markets are matched by asset name, symbol and chains and ranked by 24h volume."
)

app = FastAPI(
    title="polybets - Polymarket predictions for crypto assets",
    description=DESCRIPTION,
)
app.include_router(api_router)
