import time
from contextlib import asynccontextmanager
from http import HTTPStatus

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from book_api.core.config import settings
from book_api.core.database import close_db_connection, init_db
from book_api.core.exceptions import BookApiException, DatabaseException, ValidationException
from book_api.core.logger_config import (
    log_business_error,
    log_db_error,
    log_performance,
    log_validation_error,
    logger,
    setup_logger,
)
from book_api.core.middleware import setup_middleware
from book_api.routers import api_router

setup_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: database up on start, down on shutdown"""
    start_time = time.time()
    logger.info("Starting application...")
    await init_db()
    try:
        yield
    finally:
        logger.info("Stopping application...")
        await close_db_connection()
        log_performance("application_lifespan", time.time() - start_time)


def request_context(request: Request) -> dict:
    return {
        "request_id": getattr(request.state, "request_id", request.headers.get("X-Request-ID", "-")),
        "method": request.method,
        "path": request.url.path,
    }


async def book_api_exception_handler(request: Request, exc: BookApiException) -> JSONResponse:
    """Application errors carry their own status code"""
    log_business_error(str(exc), request_context(request))
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body or path parameters are reported as 400"""
    log_validation_error(exc, request_context(request))
    error = ValidationException(details={"errors": jsonable_encoder(exc.errors())})
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Errors raised by the framework itself, rendered in the API error format"""
    log_business_error(f"HTTP {exc.status_code}: {exc.detail}", request_context(request))
    error_code = HTTPStatus(exc.status_code).phrase.lower().replace(" ", "_").replace("-", "_")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error_code": error_code, "message": str(exc.detail)},
        headers=exc.headers,
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log_db_error(exc, operation="request", context=request_context(request))
    error = DatabaseException()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.bind(**request_context(request)).opt(exception=exc).error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error_code": "internal_error", "message": "Internal server error"},
    )


def create_app() -> FastAPI:
    application = FastAPI(
        lifespan=lifespan,
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="API for managing authors and their books",
    )

    setup_middleware(application)

    application.add_exception_handler(BookApiException, book_api_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(SQLAlchemyError, database_exception_handler)
    application.add_exception_handler(Exception, general_exception_handler)

    application.include_router(api_router, prefix=settings.API_PREFIX)

    @application.get("/health", tags=["health"])
    async def health_check():
        return {"status": "healthy", "version": settings.VERSION}

    return application


app = create_app()


def run() -> None:
    logger.info("Starting Uvicorn server...")
    uvicorn.run(
        "book_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=None,
    )


if __name__ == "__main__":
    run()
