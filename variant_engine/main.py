"""
FastAPI Application - Variant Engine
Optional HTTP boundary around the variant engine operations
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from variant_engine.api import variants
from variant_engine.core.config import config
from variant_engine.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
)
from variant_engine.core.logger import logger
from variant_engine.middlewares import CorrelationIdMiddleware

app = FastAPI(
    title="Variant Engine",
    description="Variant matrix generation, attribute reconciliation and SKU assignment",
    version=config.service_version,
)

# Configure error handlers
app.add_exception_handler(ErrorResponse, error_response_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, lambda request, exc: JSONResponse(
    status_code=422,
    # ctx may hold exception objects, which are not JSON serializable
    content={
        "error": "Validation error",
        "details": [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()],
    }
))

app.add_middleware(CorrelationIdMiddleware)

app.include_router(variants.router, prefix="/api/variants", tags=["variants"])


@app.get("/health")
def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.service_version,
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port
        }
    )

    uvicorn.run(
        "variant_engine.main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development"
    )
