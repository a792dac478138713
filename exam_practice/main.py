"""FastAPI entrypoint for the Exam Practice API."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from exam_practice import errors
from exam_practice.config import get_settings
from exam_practice.database import create_db_and_tables
from exam_practice.logging_config import configure_logging
from exam_practice.routers import grading as grading_router_module
from exam_practice.routers import results as results_router_module
from exam_practice.routers import tests as tests_router_module

logger = logging.getLogger(__name__)

app = FastAPI(title="Exam Practice API")


@app.exception_handler(errors.PracticeError)
async def practice_error_handler(request: Request, exc: errors.PracticeError):
    """Map service errors to ``{"error": message}`` with their status code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with a readable message."""
    messages = []
    for error in exc.errors():
        # Drop the leading "body"/"query" location segment
        field_path = [str(part) for part in error.get("loc", [])[1:]]
        if field_path:
            messages.append(f"{'.'.join(field_path)}: {error.get('msg', 'Invalid input')}")
        else:
            messages.append("Request body must be a JSON object")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(messages) or "Invalid request"},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(grading_router_module.router, tags=["grading"])
app.include_router(tests_router_module.router, prefix="/tests", tags=["tests"])
app.include_router(results_router_module.router, prefix="/results", tags=["results"])


@app.get("/")
def root():
    return {"message": "Exam Practice API is running"}


@app.on_event("startup")
def on_startup():
    """Configure logging and initialize the database schema."""
    configure_logging(get_settings().LOG_LEVEL)
    create_db_and_tables()
