from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import time

# Application routers
from app.routers import auth, folders
from app.config import settings
from app.controllers.base_controller import create_error_response
from app.database import init_db
from app.folderdeck_logger import logger

app = FastAPI(
    title="Folderdeck",
    description="Folders for organizing user-owned apps",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    docs_url="/api/docs" if settings.DEBUG else None,  # Only show docs in debug mode
    redoc_url="/api/redoc" if settings.DEBUG else None,
)

logger.info(f"Server starting... Version: {settings.APP_VERSION}, Debug: {settings.DEBUG}")

allowed_origins = [
    "http://localhost:5173",
    "http://localhost:4173",
    "http://localhost:8000",
    "http://localhost:3000",
]

if settings.CORS_ORIGINS:
    allowed_origins.extend(settings.CORS_ORIGINS.split(","))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    log_dict = {
        "request": {
            "url": str(request.url),
            "method": request.method,
        }
    }
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    log_dict["status"] = response.status_code
    log_dict["process Time"] = process_time
    logger.info(log_dict)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are validation failures like any other: 400, not 422
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    result = create_error_response(message, 400, code="VALIDATION_ERROR")
    return JSONResponse(status_code=result.status_code, content=result.body)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    result = create_error_response(str(exc.detail), exc.status_code)
    return JSONResponse(status_code=result.status_code, content=result.body, headers=exc.headers)


# Register all API routers
app.include_router(auth.router, tags=["Authentication"])
app.include_router(folders.router, tags=["Folders"])


# Health check endpoint
@app.get("/health")
async def root():
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "message": "Folderdeck API is running",
    }


@app.on_event("startup")
async def startup_event():
    init_db()
    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")
