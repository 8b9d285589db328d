import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobtalk.config import settings
from jobtalk.api import (
    career_routes,
    chat_routes,
    qualification_routes,
    workspace_routes,
)
from jobtalk.services.exceptions import JobTalkError
from jobtalk.services.qualification_service import sync_qualifications

# ── Logging ─────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("jobtalk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.qualification_sync_on_startup:
        result = await sync_qualifications()
        logger.info(f"Qualifications ready: {result.total_count} (temporary={result.is_temporary})")
    yield


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Career counseling backend: job catalog, qualifications, AI mentor and roadmaps",
    lifespan=lifespan,
)

# ── CORS ────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Error Envelope ──────────────────────────────────────────────────────────


@app.exception_handler(JobTalkError)
async def jobtalk_error_handler(request: Request, exc: JobTalkError):
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    body = {"success": False, "message": exc.message}
    if exc.detail is not None:
        body["error"] = exc.detail
    return JSONResponse(body, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"success": False, "message": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {field}: {first.get('msg', '')}" if field else "Invalid request"
    return JSONResponse(
        {"success": False, "message": message, "error": jsonable_encoder(errors)},
        status_code=400,
    )


# ── Routers ─────────────────────────────────────────────────────────────────

app.include_router(career_routes.router, prefix="/api/career", tags=["Career"])
app.include_router(chat_routes.router, prefix="/api/chat", tags=["Chat"])
app.include_router(qualification_routes.router, prefix="/api/qualification", tags=["Qualifications"])
app.include_router(workspace_routes.router, prefix="/api/workspace", tags=["Workspaces"])

# ── Health Check ────────────────────────────────────────────────────────────


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name, "version": "0.1.0"}
