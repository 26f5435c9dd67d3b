"""
Drywall Quantity Estimator API v2.0
FastAPI backend for wall, ceiling and trim box material takeoffs.
"""
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from tablayeso import __version__, config
from tablayeso.api.calculation_routes import router as calculation_router
from tablayeso.services.logging_config import setup_logging
from tablayeso.services.middleware import RequestTimingMiddleware

setup_logging(level=config.LOG_LEVEL, json_output=config.LOG_FORMAT != "text")
logger = logging.getLogger("tablayeso-api")

app = FastAPI(
    title="Tablayeso Quantity Estimator API",
    version=__version__,
    description="Material quantities for drywall walls, suspended ceilings and trim boxes",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With", "X-Request-ID"],
)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)

app.include_router(calculation_router)


@app.get("/health")
async def health_check():
    return {
        "status": "active",
        "version": __version__,
    }
