from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from sqlalchemy import text
from app.config import settings
from app.database.connection import close_db, engine
from app.controllers.auth_controller import router as auth_router
from app.controllers.property_controller import router as property_router
from app.controllers.real_estate_agent.dashboard_controller import router as agent_dashboard_router
from app.controllers.real_estate_agent.profile_controller import router as agent_profile_router
from app.controllers.real_estate_agent_controller import router as agent_router
from app.controllers.contact_controller import router as contact_router
from app.controllers.upload_controller import router as upload_router
from app.controllers.admin_controller import router as admin_router
from app.utils.exceptions import ValidationError
import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all incoming requests"""
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        logger.info(f"Request: {request.method} {request.url.path} from {client_ip}")
        if request.url.query:
            logger.debug(f"Query: {request.url.query}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(f"Response: {response.status_code} for {request.method} {request.url.path} ({process_time:.3f}s)")

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Check the database on startup without failing it
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except Exception as e:
        logger.warning(f"Database connection failed on startup: {str(e)}")
        logger.warning("App will continue, but database-dependent features may not work")

    yield

    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {str(e)}")


app = FastAPI(
    title="PropertyConnect API",
    description="Real estate listings, agents and contact intake",
    version="1.0.0",
    lifespan=lifespan
)

# Add request logging middleware first (runs before CORS)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = {"success": False, "message": exc.detail}
    if exc.status_code >= 500:
        logger.error(f"{exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
        content["message"] = "Something went wrong!"
        if settings.is_development:
            content["error"] = exc.detail
    if isinstance(exc, ValidationError) and exc.field_errors:
        content["errors"] = exc.field_errors
    # Router-level 404 for paths that match no route
    if exc.status_code == 404 and exc.detail == "Not Found":
        content["message"] = "API endpoint not found"
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation errors", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Something went wrong!",
            "error": str(exc) if settings.is_development else "Internal server error",
        },
    )


app.include_router(auth_router, prefix="/api")
app.include_router(property_router, prefix="/api")
# Fixed agent paths are registered ahead of /agents/{agent_id}
app.include_router(agent_dashboard_router, prefix="/api")
app.include_router(agent_profile_router, prefix="/api")
app.include_router(agent_router, prefix="/api")
app.include_router(contact_router, prefix="/api")
app.include_router(upload_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "PropertyConnect API", "status": "running"}


@app.get("/api/health")
async def health_check():
    return {"success": True, "status": "healthy", "environment": settings.ENVIRONMENT}
