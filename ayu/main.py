import logging
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from ayu.config import settings
from ayu.database import Base, engine
from ayu.models import user  # noqa: F401  (register tables on Base)
from ayu.routers import auth, chat, profile
from ayu.utils.response import create_response, handle_exception
from seed import run_seed

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

# Auto create tables
Base.metadata.create_all(bind=engine)

# CORS for SPA / API access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid {field}: {first.get('msg')}" if field else first.get("msg", "Invalid input")
    else:
        message = "Invalid input"
    return create_response(message, None, status.HTTP_400_BAD_REQUEST, status_text="error")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return create_response(str(exc.detail), None, exc.status_code, status_text="error")


@app.on_event("startup")
async def startup_event():
    run_seed()


# Add routes
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(chat.router)

# Serve uploaded assets
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/")
def home():
    try:
        return create_response(
            message="AyuVeda API running",
            data={"service": "ayuveda-backend"},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@app.get("/api-info")
def api_info():
    return create_response(
        message="API information",
        data={
            "service": settings.PROJECT_NAME,
            "docs_url": "/docs",
            "api_prefix": settings.API_PREFIX,
        },
        status_code=status.HTTP_200_OK
    )
