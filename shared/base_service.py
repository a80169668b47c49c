"""
Base service class for Portal services.
"""

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, List, Optional
import time
import os

from shared.config import get_config
from shared.errors import PortalException, ErrorResponse
from shared.logging import (
    configure_logging,
    get_logger,
    request_id_var,
    sanitize_body,
    sanitize_headers,
    set_request_id,
)
from shared.metrics import get_metrics_collector


REQUEST_ID_HEADER = "X-Request-ID"


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, service_name: str):
        self.service_name = service_name
        self.config = get_config()
        self.logger = get_logger(service_name)
        self.metrics = get_metrics_collector(service_name)
        self._start_time = time.time()

        configure_logging(service_name, self.config.log_level)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_routes()
        self._setup_exception_handlers()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""
        return FastAPI(
            title=f"{self.service_name.title()} API",
            description="Backend for the Portal card application",
            version="1.0.0",
            docs_url="/api",
            redoc_url=None,
        )

    def _setup_middleware(self):
        """Set up middleware."""

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.app.middleware("http")
        async def add_request_context(request: Request, call_next):
            request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
            request.state.request_id = request_id
            start_time = time.time()

            self.logger.info(
                "HTTP request started",
                method=request.method,
                path=request.url.path,
                client_ip=request.client.host if request.client else "unknown",
            )

            response = await call_next(request)

            duration = time.time() - start_time
            self.metrics.record_http_request(
                method=request.method,
                endpoint=request.url.path,
                status_code=response.status_code,
                duration=duration
            )
            self.logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2)
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/health", tags=["health"])
        async def health_check():
            """Health check endpoint."""
            try:
                dependencies = await self._check_dependencies()
                self.metrics.record_health_check("ok")
                return {
                    "service": self.service_name,
                    "status": "ok",
                    "uptime_seconds": self._get_uptime(),
                    "dependencies": dependencies,
                    "version": "1.0.0",
                    "commit": os.getenv("GIT_COMMIT", "unknown")
                }
            except Exception as e:
                self.logger.error("Health check failed", error=str(e))
                self.metrics.record_health_check("error")
                return JSONResponse(
                    status_code=503,
                    content={
                        "service": self.service_name,
                        "status": "error",
                        "error": str(e)
                    }
                )

        @self.app.get("/metrics", include_in_schema=False)
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
            return Response(
                content=generate_latest(),
                media_type=CONTENT_TYPE_LATEST
            )

    def _setup_exception_handlers(self):
        """Render every failure with the shared error body."""

        @self.app.exception_handler(PortalException)
        async def portal_exception_handler(request: Request, exc: PortalException):
            return await self._error_response(request, exc.status_code, exc.message, exc.error, exc)

        @self.app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            details = self._format_validation_errors(exc.errors())
            self.logger.info("Validation errors", path=request.url.path, errors=details, body=sanitize_body(exc.body))
            return await self._error_response(request, 400, "Validation failed", details, exc)

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            message = exc.detail if isinstance(exc.detail, str) else "Request failed"
            return await self._error_response(request, exc.status_code, message, exc.detail, exc)

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            return await self._error_response(request, 500, "Internal server error", "Internal server error", exc)

    async def _error_response(
        self,
        request: Request,
        status_code: int,
        message: str,
        error: Any,
        exc: Exception,
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", None) or request_id_var.get()
        body = ErrorResponse(
            statusCode=status_code,
            path=request.url.path,
            method=request.method,
            message=message,
            error=error,
            requestId=request_id or "unknown",
        )

        log = self.logger.error if status_code >= 500 else self.logger.warning
        log(
            "Request failed",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            message=message,
        )
        self.metrics.record_error(type(exc).__name__)
        await self._record_error(request, status_code, message)

        return JSONResponse(status_code=status_code, content=body.model_dump())

    async def _record_error(self, request: Request, status_code: int, message: str) -> None:
        """Persist the error for later inspection.

        The error log table is not provisioned yet, so this only notes that the
        write was skipped.
        """
        self.logger.warning(
            "Error logging to database disabled",
            status_code=status_code,
            endpoint=request.url.path,
            headers=sanitize_headers(request.headers),
        )

    @staticmethod
    def _format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
        formatted = []
        for error in errors:
            location = [str(part) for part in error.get("loc", ()) if part != "body"]
            formatted.append({
                "field": ".".join(location),
                "message": error.get("msg", "Invalid value"),
            })
        return formatted

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check service dependencies. Override in subclasses."""
        return {}

    def _get_uptime(self) -> float:
        """Get service uptime in seconds."""
        return time.time() - self._start_time

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=host or self.config.host,
            port=port or self.config.port,
            log_level=self.config.log_level.lower()
        )
