import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import router as auth_router
from config import Settings, get_settings
from database import EMPLOYEES, USERS, connect, ensure_indexes, get_database
from errors import ErrorCode, STATUS_CODES, internal_error, invalid_input
from logging_config import setup_logging
from modules.accounts.service import AccountService
from modules.employee_management.routes import router as employee_router
from modules.employee_management.service import EmployeeService
from photo_upload import CloudinaryImageHost, PhotoUploadAdapter
from security import CredentialService
from store import MongoStore

logger = logging.getLogger(__name__)

_CODES_BY_STATUS = {status: code for code, status in STATUS_CODES.items()}


def build_services(app: FastAPI, db, settings: Settings) -> None:
    """Wire services once per process; handlers reach them through app.state."""
    uploader = PhotoUploadAdapter(CloudinaryImageHost(settings), settings.PHOTO_FOLDER)
    app.state.employee_service = EmployeeService(MongoStore(db[EMPLOYEES]), uploader)
    app.state.account_service = AccountService(MongoStore(db[USERS]), CredentialService(settings))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    client = connect(settings)
    db = get_database(client, settings)
    await ensure_indexes(db)
    build_services(app, db, settings)
    if not settings.JWT_SECRET:
        logger.warning("JWT_SECRET is not set; login will fail until it is configured")
    if not settings.cloudinary_configured:
        logger.warning("Cloudinary is not configured; employee photo uploads will fail")
    logger.info("Connected to MongoDB database '%s'", settings.MONGO_DB)
    try:
        yield
    finally:
        client.close()


# ERROR RESPONSES
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        body = exc.detail
    else:
        code = _CODES_BY_STATUS.get(exc.status_code, ErrorCode.INVALID_INPUT)
        body = {"code": code.value, "message": str(exc.detail), "details": None}
    return JSONResponse(status_code=exc.status_code, content=body)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    message = details[0]["message"] if details else "Invalid request."
    err = invalid_input(message, details=details)
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    err = internal_error("Internal server error.", details=str(exc))
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.settings = settings

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router)
    app.include_router(employee_router)
    return app


app = create_app()
