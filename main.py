from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from electrical_pm.core.config import settings
from electrical_pm.core.database import engine, Base
from electrical_pm.core.exceptions import AppError, ErrorKind
from electrical_pm.api.routes import (
    admin, auth, clients, daily_logs, employees, files, payroll, projects,
    quotes, sign_ins, time_entries, timesheets
)
import logging

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Project management for electrical contractors: crews, hours, payroll and quotes"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_HTTP_STATUS_KINDS = {kind.status_code: kind for kind in ErrorKind}


def _error_body(kind: ErrorKind, message: str, details=None) -> dict:
    error = {"code": kind.code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    kind = _HTTP_STATUS_KINDS.get(exc.status_code, ErrorKind.VALIDATION)
    if exc.status_code >= 500:
        kind = ErrorKind.INTERNAL
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(kind, str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=_error_body(ErrorKind.VALIDATION, "Request validation failed", details)
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=_error_body(ErrorKind.INTERNAL, "Internal server error")
    )


# Include routers
for module in (
    auth, admin, employees, clients, projects, daily_logs, quotes,
    files, sign_ins, time_entries, timesheets, payroll
):
    app.include_router(module.router, prefix=settings.API_PREFIX)


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Create missing tables on startup."""
    logger.info("Starting up...")
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down...")
    engine.dispose()


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
