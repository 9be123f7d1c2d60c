import logging
import traceback
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder

from dealership.core.config import settings
from dealership.core.exceptions import DealershipError

# Setup Logging
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Dealership catalog and CRM: vehicles, offers, customers and inquiries",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --------------------------------------------------------------------------
# CORS Middleware (must be registered before the routers)
# --------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --------------------------------------------------------------------------
# Database Initialization (Startup Event)
# --------------------------------------------------------------------------
from dealership.core.database import init_db
from dealership.repositories import get_record_store
from dealership.services.seed_service import seed_demo_data


@app.on_event("startup")
async def on_startup():
    if settings.STORE_BACKEND == "mongo":
        try:
            logger.info("Connecting to Database...")
            await init_db()
            logger.info("Database Connection Successful!")
        except Exception as e:
            logger.error(f"Database Connection FAILED: {e}")
            raise
    else:
        logger.info("Using in-memory record store")

    if settings.SEED_DEMO_DATA:
        await seed_demo_data(get_record_store())

# --------------------------------------------------------------------------
# Exception Handlers (every error is answered with JSON)
# --------------------------------------------------------------------------
@app.exception_handler(DealershipError)
async def dealership_error_handler(request: Request, exc: DealershipError):
    content = {"message": exc.message}
    errors = getattr(exc, "errors", None)
    if errors:
        content["errors"] = errors
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "param": ".".join(str(part) for part in err.get("loc", ())[1:]) or "body",
            "msg": err.get("msg"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"message": "Validation failed", "errors": errors})
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    error_msg = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(f"ERROR OCCURRED AT {request.url.path}:\n{error_msg}")

    content = {"message": "Internal Server Error", "path": str(request.url.path)}
    if settings.DEBUG:
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)

# --------------------------------------------------------------------------
# Basic Routes
# --------------------------------------------------------------------------
@app.get("/")
async def root():
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
@app.get(f"{settings.API_PREFIX}/health")
async def health_check():
    return {"status": "healthy", "store": settings.STORE_BACKEND}

# --------------------------------------------------------------------------
# API Routers
# --------------------------------------------------------------------------
from dealership.api.v1 import api_router

app.include_router(api_router, prefix=settings.API_PREFIX)
