"""
Flight Graph - FastAPI Backend

Main application entry point and configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flightgraph.api.graphs import router as graphs_router
from flightgraph.services.graph import DEFAULT_MODE, DEFAULT_UNITS
from flightgraph.services.repository import get_repository


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Flight Graph Backend")
    logger.info(f"Default display: {DEFAULT_MODE.value} ({DEFAULT_UNITS.value})")

    yield

    logger.info(f"Shutting down Flight Graph Backend ({len(get_repository())} graphs open)")


app = FastAPI(
    title="Flight Graph",
    description="""
    Backend API for graphing GPS-logged flights.

    ## Features
    - Load FlySight-style record tables (velocity derived when not logged)
    - Build smoothed horizontal speed, vertical speed, glide ratio and altitude series
    - Zoom, pan and rubber-band selection with clamped viewports
    - Pixel/data conversion, hover readouts and grid lines for rendering

    ## Data Flow
    1. Create a graph via POST /graphs
    2. Load records via PUT /graphs/{id}/records
    3. Switch mode or units via PUT /graphs/{id}/mode
    4. Get the curve via GET /graphs/{id}/polyline and /graphs/{id}/grid
    """,
    version="0.1.0",
    lifespan=lifespan,
)


# CORS middleware (allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(graphs_router)


@app.get("/")
async def root():
    """Root endpoint - basic health check."""
    return {
        "name": "Flight Graph",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "graph_count": len(get_repository()),
        "default_mode": DEFAULT_MODE.value,
        "default_units": DEFAULT_UNITS.value,
    }
