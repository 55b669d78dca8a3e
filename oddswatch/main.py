"""FastAPI application entry point for oddswatch."""

import logging

from fastapi import FastAPI

from oddswatch.api import analysis
from oddswatch.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="oddswatch",
    description="Heuristic alerts for horse-race odds snapshots",
    version="0.1.0",
    debug=settings.debug,
)

app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "data_dir": str(settings.data_dir)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("oddswatch.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
