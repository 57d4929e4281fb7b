import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.api.routes import assets, submissions
from app.core.errors import RatingsFormError
from app.services.request_logging import configure_logging

log = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings)

app = FastAPI(
    title="Asset Ratings Review",
    description="Review Credora asset ratings and email submitted overrides",
    version="1.0.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assets.router, prefix="/api")
app.include_router(submissions.router, prefix="/api")


@app.exception_handler(RatingsFormError)
async def ratings_form_error_handler(request: Request, exc: RatingsFormError):
    log.warning("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Missing required fields"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


@app.get("/health")
def health():
    return {"status": "ok"}
