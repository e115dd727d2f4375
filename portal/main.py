"""
Internship Portal - Main Application

FastAPI backend with:
- MongoDB for user identity records and profiles
- Password login and Google Sign-In, session in an HttpOnly JWT cookie
- Cloudinary for resumes and profile photos
- Socket.IO chat relay mounted alongside the API

Run: uvicorn portal.main:asgi_app --reload
"""

import asyncio
import logging
from contextlib import asynccontextmanager

import socketio
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.api.routes import api_router
from portal.core.config import get_settings
from portal.core.errors import PortalError
from portal.db.mongodb import init_mongo_indexes, test_mongo_connection
from portal.logging_config import configure_logging
from portal.realtime.chat import sio

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)
    yield


# Create FastAPI app
app = FastAPI(
    title="Internship Portal",
    description="""
    Job and internship portal API.

    ## Features
    - **Registration**: local accounts with optional profile photo
    - **Authentication**: password login and Google Sign-In, HttpOnly cookie session
    - **Profile**: partial updates with resume and photo uploads
    - **Chat**: Socket.IO rooms per application
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware (credentials need explicit origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    max_age=86400,
)

# Include API routes
app.include_router(api_router, prefix=API_PREFIX)


def envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    return envelope(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request"
    return envelope(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return envelope(404, f"Route {request.url.path} not found")
    return envelope(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return envelope(500, "Internal server error")


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "Job Portal API is running",
        "version": "1.0.0",
        "status": "active",
        "endpoints": {
            "user": f"{API_PREFIX}/user",
            "health": "/api/health",
            "socket": "/socket.io",
        },
    }


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Detailed health check. The ping runs off the event loop."""
    mongodb_ok = await asyncio.to_thread(test_mongo_connection)
    return {
        "status": "healthy",
        "mongodb": "connected" if mongodb_ok else "disconnected",
    }


# Socket.IO in front, everything else falls through to FastAPI
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)
