import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from .config import CORS_ORIGINS, LOG_LEVEL
from .routers import gridref

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="NRFA Grid Reference API",
    description="Conversion of OS grid references to British National Grid and WGS84 coordinates.",
    version="1.0.0",
)

app.state.limiter = gridref.limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(gridref.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    """Health check endpoint: runs a known conversion end to end."""
    from .geodesy import grid_reference_to_wgs84

    result = grid_reference_to_wgs84(["SN853872"])[0]
    engine_status = "ok" if result.ok else f"error: {result.error}"
    return {
        "status": "ok" if engine_status == "ok" else "degraded",
        "version": app.version,
        "engine": engine_status,
    }


@app.get("/")
def root():
    return {
        "message": "NRFA Grid Reference API",
        "docs": "/docs",
    }
