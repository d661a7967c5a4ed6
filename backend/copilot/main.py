"""
SP Research Copilot — FastAPI Application Factory

App creation, middleware (CORS, request ID logging), router registration,
and the Gradio research page mounted at "/".
Run with: uvicorn copilot.main:app --reload
"""

import gradio as gr
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from copilot.api import research
from copilot.config import log, settings
from copilot.page import build_page

VERSION = "0.1.0"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Log the X-Request-Id header from every incoming request.

    Lets REST errors be correlated with backend logs.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-Id", "none")
        log(
            "INFO",
            "request received",
            method=request.method,
            path=request.url.path,
            request_id=request_id,
        )
        response = await call_next(request)
        return response


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Steps:
        1. Create FastAPI instance with title, version, description
        2. Add CORS middleware (origins from settings.cors_origins)
        3. Add request ID logging middleware
        4. Map body validation errors to { "error": "Input is required" }
        5. Register the research router and health check
        6. Mount the Gradio research page at "/"
    """
    app = FastAPI(
        title="SP Research Copilot API",
        version=VERSION,
        description="Internal tool for BDMs to research businesses.",
    )

    # CORS
    origins = [origin.strip() for origin in settings.cors_origins.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID logging
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(RequestValidationError, research.validation_error_handler)

    # Routers
    app.include_router(research.router)

    @app.get("/api/health")
    async def health_check():
        """
        GET /api/health

        Returns: { "status": "ok", "version": "0.1.0" }
        """
        return {"status": "ok", "version": VERSION}

    # Page last so it never shadows /api routes
    return gr.mount_gradio_app(app, build_page(), path="/")


app = create_app()
