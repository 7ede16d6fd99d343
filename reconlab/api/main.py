"""
FastAPI application for reconlab
"""

import os

from fastapi import FastAPI

from reconlab import __version__
from reconlab.api.routes import recon_routes
from reconlab.core.logging_setup import configure_logging

# Setup logging
logger = configure_logging(log_file=os.getenv("RECONLAB_LOG_FILE"))

# Create FastAPI app
app = FastAPI(
    title="reconlab API",
    description="Bounded-concurrency reconnaissance probes for authorized testing",
    version=__version__,
)

# Include routers
app.include_router(recon_routes.router)


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "name": "reconlab API",
        "version": __version__,
        "endpoints": [
            "/recon/* - Reconnaissance tools",
            "/docs - API documentation",
            "/health - Health check",
        ],
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "reconlab"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=os.getenv("RECONLAB_API_HOST", "127.0.0.1"), port=int(os.getenv("RECONLAB_API_PORT", "8000")))
