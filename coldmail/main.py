import re
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes.emails import router as email_router
from .config import Settings
from .errors import EmailServiceError, MalformedResponseError
from .logging_utils import format_access_line, utc_now_iso
from .models import HealthResponse
from .services.email_service import EmailService
from .services.openai_client import OpenAIResponsesClient
from .services.rate_limit import FixedWindowRateLimiter

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


def origin_prefix_regex(origins: tuple[str, ...]) -> str:
    # An allowed origin also admits anything it prefixes.
    return "|".join(f"{re.escape(origin)}.*" for origin in origins)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location or 'body'}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid request body"


def create_app(
    settings: Settings | None = None,
    client: OpenAIResponsesClient | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    client = client or OpenAIResponsesClient(
        api_key=settings.openai_api_key,
        api_url=settings.openai_api_url,
        model_name=settings.model_name,
        timeout_seconds=settings.openai_timeout_seconds,
    )

    app = FastAPI(title="Cold Email Generator")
    app.state.settings = settings
    app.state.email_service = EmailService(
        client,
        model_name=settings.model_name,
        log_path=settings.log_path,
        prompt_debug=settings.prompt_debug,
    )
    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    @app.middleware("http")
    async def limit_api_requests(request: Request, call_next):
        if not request.url.path.startswith("/api/"):
            return await call_next(request)

        content_length = request.headers.get("content-length", "")
        if content_length.isdigit():
            too_large = int(content_length) > settings.max_body_bytes
        else:
            # Chunked bodies carry no length; measure what was sent.
            too_large = len(await request.body()) > settings.max_body_bytes
        if too_large:
            return JSONResponse(status_code=413, content={"error": "Request body too large"})

        caller = request.client.host if request.client else "unknown"
        decision = request.app.state.rate_limiter.hit(caller)
        headers = {
            "RateLimit-Limit": str(decision.limit),
            "RateLimit-Remaining": str(decision.remaining),
            "RateLimit-Reset": str(decision.reset_after_seconds),
        }
        if not decision.allowed:
            headers["Retry-After"] = str(decision.reset_after_seconds)
            return JSONResponse(
                status_code=429, content={"error": RATE_LIMIT_MESSAGE}, headers=headers
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response

    if not settings.is_production:

        @app.middleware("http")
        async def log_api_requests(request: Request, call_next):
            start = time.perf_counter()
            response = await call_next(request)
            if request.url.path.startswith("/api"):
                duration_ms = int((time.perf_counter() - start) * 1000)
                print(
                    format_access_line(
                        request.method, request.url.path, response.status_code, duration_ms
                    )
                )
            return response

    # Added last so it wraps the limiter and answers preflight requests first.
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=origin_prefix_regex(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EmailServiceError)
    async def handle_email_service_error(request: Request, exc: EmailServiceError):
        body = {"error": exc.public_message, "type": type(exc).__name__}
        if exc.status_code < 500:
            body["details"] = exc.detail
        elif not settings.is_production and not isinstance(exc, MalformedResponseError):
            body["details"] = exc.detail
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request",
                "type": "ValidationError",
                "details": _describe_validation_errors(exc),
            },
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            timestamp=utc_now_iso(),
            environment=settings.environment,
        )

    @app.get("/")
    async def root() -> dict[str, object]:
        return {
            "name": "Cold Email Generator",
            "health": "/health",
            "endpoints": ["/api/generate-email", "/api/analyze-email"],
        }

    app.include_router(email_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
