# Academy back office entrypoint: FastAPI app wiring routers, error handlers and logging.

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from academy.app.api import adjustments
from academy.app.api import admin_attendance
from academy.app.api import admin_invoices
from academy.app.api import attendance
from academy.app.api import courses
from academy.app.api import login
from academy.app.api import payroll
from academy.app.api import rates
from academy.app.api import register
from academy.app.api import sessions
from academy.app.core.dev_seed import ensure_default_dev_admin
from academy.app.core.errors import AcademyError
from academy.app.core.logging_config import configure_logging
from academy.app.core.settings import get_settings
from academy.app.db.base import Base
from academy.app.db.session import SessionLocal, engine

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AcademyError)
async def academy_error_handler(request: Request, exc: AcademyError):
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_payload()))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Internal server error"})


app.include_router(register.router)
app.include_router(login.router)
app.include_router(courses.router)
app.include_router(rates.router)
app.include_router(sessions.router)
app.include_router(attendance.router)
app.include_router(admin_attendance.router)
app.include_router(adjustments.router)
app.include_router(payroll.router)
app.include_router(admin_invoices.router)


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def seed_default_dev_admin():
    db = SessionLocal()
    try:
        ensure_default_dev_admin(db)
    finally:
        db.close()
