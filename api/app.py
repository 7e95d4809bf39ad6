"""
Module 08 - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.deps import init_runtime_config
from api.errors import APIError, api_error_handler, generic_error_handler, validation_error_handler
from api.routes import capabilities, health, verify


_config = init_runtime_config()

logging.basicConfig(
    level=getattr(logging, _config.api.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="DIP Proof Verifier API",
        description="""
HTTP API for verifying decentralized identity (DIP) Merkle proofs.

## Endpoints

- **POST /verify** - Verify a proof document against its identity commitment
- **GET /capabilities** - Supported hashers, layouts and configured bounds
- **GET /health** - Health check

## Verification Outcomes

A rejected proof is a normal `200` response with `ok=false` and a stable
numeric `error_code`:
- `0` - invalid Merkle proof
- `1` - too many revealed keys
- `2` - too many revealed linked accounts
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(capabilities.router)
    app.include_router(verify.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=_config.api.host, port=_config.api.port)
