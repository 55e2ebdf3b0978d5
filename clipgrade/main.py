"""
clipgrade FastAPI application.

API Structure (v1):
- /v1/health - Health check
- /v1/evaluations/parse - Parse model output into an evaluation
- /v1/policy/* - Language policy inspection
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clipgrade.api.routes import router
from clipgrade.core.config import settings
from clipgrade.core.logging import get_logger
from clipgrade.parser.response_parser import get_parser

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    logger.info("Starting clipgrade service")
    parser = get_parser()
    logger.info(f"Language policy loaded with {len(parser.policy.rules)} rules")
    if settings.lexicon_path:
        logger.info(f"Lexicon: {settings.lexicon_path}")

    yield

    logger.info("Shutting down clipgrade service")


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Parses model video evaluations and enforces the English-only policy",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.version,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
