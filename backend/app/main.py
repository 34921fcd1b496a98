"""
FastAPI Main Application

Read-only preview service for liquidity migration plans.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime

from liquidity_launcher.errors import LaunchError

from app.config import settings
from app.api.v1 import health, plan

# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(plan.router, prefix="/api/v1", tags=["Migration Plan"])
app.include_router(health.router, prefix="/api/v1", tags=["Health"])


@app.exception_handler(LaunchError)
async def launch_error_handler(request: Request, exc: LaunchError):
    """Map engine errors (configuration, numeric, planning) to 400"""
    return JSONResponse(
        status_code=400,
        content={"status": "error", "error": type(exc).__name__, "detail": str(exc)}
    )


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "name": settings.API_TITLE,
        "version": settings.API_VERSION,
        "description": settings.API_DESCRIPTION,
        "docs": "/docs",
        "health": "/api/v1/health",
        "timestamp": datetime.utcnow().isoformat()
    }


@app.on_event("startup")
async def startup_event():
    """Actions to perform on application startup"""
    print(f"🚀 Starting {settings.API_TITLE} v{settings.API_VERSION}")


@app.on_event("shutdown")
async def shutdown_event():
    """Actions to perform on application shutdown"""
    print("👋 Shutting down Liquidity Launcher API")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
