"""Bucketstore API: per-user file storage in buckets."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bucketstore.api.files import app_files
from bucketstore.config import get_settings
from bucketstore.storage import Conflict, InternalError, InvalidName, NotFound, StorageError, Unauthorized
from bucketstore.storage.blocking import shutdown_executor

STATUS_CODES: dict[type[StorageError], int] = {
    Unauthorized: 403,
    InvalidName: 400,
    NotFound: 404,
    Conflict: 409,
    InternalError: 500,
}


def ensure_storage_folder():
    storage_folder = get_settings().storage_folder
    storage_folder.mkdir(parents=True, exist_ok=True)
    return storage_folder


@asynccontextmanager
async def lifespan(app: FastAPI):
    storage_folder = ensure_storage_folder()
    logging.info(f"Storing files in {storage_folder.resolve()}")
    yield
    shutdown_executor()


app = FastAPI(
    title="Bucketstore",
    description=__doc__ if __doc__ else "",
    openapi_tags=[
        dict(name="files", description="Endpoints to upload, retrieve and delete files"),
    ],
    lifespan=lifespan,
)
app.include_router(app_files)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_code_for(exc: StorageError) -> int:
    return STATUS_CODES.get(type(exc), 500)


@app.exception_handler(StorageError)
async def storage_error_exception_handler(request: Request, exc: StorageError):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logging.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status_code,
        content={"message": str(exc)},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "There was an issue with the data you sent.", "fields_invalid": jsonable_encoder(exc.errors())},
    )
