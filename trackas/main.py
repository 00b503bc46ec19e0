import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware import Middleware
from starlette.middleware.sessions import SessionMiddleware

from trackas import config
from trackas.db import engine, Base
from trackas.exceptions import DuplicateRegistration, LedgerTimeout, StoreError, ValidationError
from trackas.logging_config import setup_logging
from trackas.auth_router import router as auth_router
from trackas.lecturer_router import router as lecturer_router
from trackas.student_router import router as student_router

logger = logging.getLogger(__name__)

setup_logging(config.LOG_LEVEL, config.LOG_FILE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables (if they don't exist)
    Base.metadata.create_all(bind=engine)
    yield


middleware = [
    Middleware(SessionMiddleware, secret_key=config.SECRET_KEY)
]

app = FastAPI(title="TrackAS", middleware=middleware, lifespan=lifespan)

app.include_router(auth_router)
app.include_router(lecturer_router)
app.include_router(student_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(DuplicateRegistration)
async def duplicate_registration_handler(request: Request, exc: DuplicateRegistration):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    if isinstance(exc, LedgerTimeout):
        code = status.HTTP_504_GATEWAY_TIMEOUT
    else:
        code = status.HTTP_502_BAD_GATEWAY
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})


@app.get("/")
async def health():
    return {"status": "ok"}
