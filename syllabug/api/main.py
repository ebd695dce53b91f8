import logging
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from syllabug.api.errors import register_error_handlers
from syllabug.api.models import HealthResponse
from syllabug.api.routes.assignments import router as assignments_router
from syllabug.api.routes.documents import router as documents_router
from syllabug.api.routes.export import router as export_router
from syllabug.config import settings
from syllabug.logging_config import configure_logging

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Syllabug API",
    description="Extract assignments and due dates from syllabus documents",
    version=settings.version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

register_error_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:  # type: ignore[no-untyped-def]
    started = time.monotonic()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d (%.0fms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.monotonic() - started) * 1000,
    )
    return response


app.include_router(documents_router)
app.include_router(assignments_router)
app.include_router(export_router)


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=settings.version)
