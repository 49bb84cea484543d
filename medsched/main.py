from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medsched.core.config import settings
from medsched.core.exceptions import (
    InvalidRange,
    InvalidRejectionNote,
    NotFound,
    PermissionDenied,
    ScheduleConflict,
    ScheduleError,
)
from medsched.core.logger import logger
from medsched.db.session import init_db
from medsched.middleware.log_middleware import LogMiddleware

ERROR_STATUS_CODES = {
    InvalidRange: 422,
    InvalidRejectionNote: 422,
    ScheduleConflict: 409,
    NotFound: 404,
    PermissionDenied: 403,
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_CREATE_ALL:
        await init_db()
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LogMiddleware)

@app.exception_handler(ScheduleError)
async def schedule_error_handler(request: Request, exc: ScheduleError):
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.code} - {exc.message}")
    content = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, ScheduleConflict):
        content["conflict"] = exc.to_dict()
    return JSONResponse(status_code=status_code, content=content)

@app.get("/")
async def root():
    return {"message": "Welcome to MedSched API"}

@app.get(f"{settings.API_V1_STR}/health", tags=["health"])
async def health():
    return {"status": "ok"}

from medsched.api.api import api_router
app.include_router(api_router, prefix=settings.API_V1_STR)
