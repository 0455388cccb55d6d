import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

import models.event_listener  # noqa: F401
from core.catch_error_middleware import ErrorHandlerMiddleware
from core.exception_handler import (
    DomainErrorHandler,
    HTTPErrorHandler,
    ValidationErrorHandler,
)
from core.exceptions import DomainError
from core.lifespan import lifespan
from core.settings import settings
from core.throttling import rate_limiter_manager
from routes.admin_contact_owner_routes import router as admin_contact_owner_router
from routes.admin_transfer_routes import router as admin_transfer_router
from routes.contact_owner_routes import router as contact_owner_router
from routes.holding_routes import router as holding_router
from routes.transfer_request_routes import router as transfer_request_router

logging.basicConfig(level=settings.LOG_LEVEL)
app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    exception_handlers={429: rate_limiter_manager.limit_exceeded_handler},
    version="1.0.0",
)

app.include_router(holding_router)
app.include_router(transfer_request_router)
app.include_router(contact_owner_router)
app.include_router(admin_transfer_router, prefix="/admin")
app.include_router(admin_contact_owner_router, prefix="/admin")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["System"])
async def health_check():
    return {"status": "ok"}


app.add_exception_handler(RequestValidationError, ValidationErrorHandler())
app.add_exception_handler(DomainError, DomainErrorHandler())
app.add_exception_handler(StarletteHTTPException, HTTPErrorHandler())

app.add_middleware(ErrorHandlerMiddleware)


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8001)
