import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.config import settings
from app.core.logging_config import configure_logging
from app.core.exceptions import (
    SchoolRecordsException,
    UnauthorizedException,
    NotFoundException,
    ForbiddenException,
    ValidationException,
    ConflictException,
    ProtectedRoleException,
)
from app.routes import school_routes, team_routes

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,  # Disable in production
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
cors_origins = settings.cors_origins_list
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )


def error_response(status_code: int, message: str, code: str, headers: dict | None = None):
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "code": code},
        headers=headers,
    )


# Exception handlers
@app.exception_handler(UnauthorizedException)
async def unauthorized_exception_handler(request: Request, exc: UnauthorizedException):
    return error_response(
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        exc.code,
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request: Request, exc: NotFoundException):
    return error_response(status.HTTP_404_NOT_FOUND, str(exc), exc.code)


@app.exception_handler(ForbiddenException)
async def forbidden_exception_handler(request: Request, exc: ForbiddenException):
    return error_response(status.HTTP_403_FORBIDDEN, str(exc), exc.code)


@app.exception_handler(ValidationException)
@app.exception_handler(ConflictException)
@app.exception_handler(ProtectedRoleException)
async def bad_request_exception_handler(request: Request, exc: SchoolRecordsException):
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc), exc.code)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "; ".join(details) or "Invalid request",
        ValidationException.code,
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Constraint violation on %s: %s", request.url.path, exc.orig)
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc.orig), "constraint_violation")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database failure on %s", request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error", "store_failure")


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "School Records API",
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
    }


# Include routers
app.include_router(school_routes.router, prefix="/api/schools", tags=["Schools"])
app.include_router(team_routes.router, prefix="/api/manage-team", tags=["Team"])
