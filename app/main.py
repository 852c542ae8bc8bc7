from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.api.v1 import index
from app.api.v1 import certificate
from app.api.v1 import verification


from app.core.config import settings
from app.core.errors import (
    CertificateNotFound, DuplicateIdentity, ExtractionFailed, InvalidDocument,
    StorageUnavailable
)
from app.core.logging import setup_logging
from app.db.core import init_db
from app.repositories.memory import InMemoryCertificateRepository

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.storage_backend == "sql":
        init_db()
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

if settings.storage_backend == "memory":
    app.state.memory_repository = InMemoryCertificateRepository()

# Middlewares
origins = []

if settings.allowed_hosts:
    origins = settings.allowed_hosts.split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain exception handlers
@app.exception_handler(DuplicateIdentity)
async def duplicate_identity_handler(request: Request, exc: DuplicateIdentity):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})


@app.exception_handler(CertificateNotFound)
async def not_found_handler(request: Request, exc: CertificateNotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": exc.message})


@app.exception_handler(ExtractionFailed)
async def extraction_failed_handler(request: Request, exc: ExtractionFailed):
    logger.warning(f"Document extraction failed: {exc.message}")
    if isinstance(exc, InvalidDocument):
        code = status.HTTP_400_BAD_REQUEST
    elif exc.configured:
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# Register routes
app.include_router(index.router, prefix="/api/v1")
app.include_router(certificate.router,
                   prefix="/api/v1/certificates", tags=["Certificates"])
app.include_router(verification.router,
                   prefix="/api/v1/verifications", tags=["Verifications"])

if __name__ == "__main__":
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=None,
    )
