"""
Module 08 - Minimal API (FastAPI)

HTTP API for the DIP proof verifier:
- POST /verify - Verify a proof document
- GET /capabilities - Supported hashers, layouts and bounds
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
