import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.routers import analyze
from hookscope import __version__
from hookscope.config import HookScopeConfig
from hookscope.utils.logging_config import log_manager

config = HookScopeConfig()
log_manager.configure(config.logging)

app = FastAPI(
    title="HookScope API",
    description="Analyzes short-form videos into a structured creative brief",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True
)

app.include_router(analyze.router)


@app.get("/", tags=["root"])
async def root():
    """Root endpoint providing API information."""
    return {
        "message": "HookScope API",
        "version": __version__,
        "docs_url": "/docs",
    }


@app.get("/health", tags=["health"])
async def health_check():
    return {"status": "healthy", "service": "hookscope"}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
