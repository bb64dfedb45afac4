"""API Endpoints for uploading, serving and deleting files."""

import logging
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
from starlette.datastructures import UploadFile

from bucketstore.api.auth import header_user, query_user
from bucketstore.auth import get_user
from bucketstore.config import get_settings
from bucketstore.models import User
from bucketstore.storage import Bucket, InternalError, InvalidName, NotFound, StorageError, StorageFile, UserDir

app_files = APIRouter(tags=["files"])

BucketName = Annotated[str, Path(description="Name of the bucket (letters and digits only)")]
FileName = Annotated[str, Path(description="Name of the file")]


# RESPONSE MODELS
class UploadedFile(BaseModel):
    """Outcome of storing one file of an upload."""

    filename: str = Field(description="The file name as given by the client")
    stored: bool = Field(description="Whether the file was stored")
    path: str | None = Field(None, description="Path to retrieve the file from: <user>/<bucket>/<file>")
    size: int | None = Field(None, description="Number of bytes stored")
    detail: str | None = Field(None, description="Why the file was not stored")


class UploadResponse(BaseModel):
    files: list[UploadedFile] = Field(description="Outcome per uploaded file, in the order they were sent")


class DeleteResponse(BaseModel):
    deleted: str = Field(description="Path of the deleted file")


def file_location(user: User, bucket: Bucket, storage_file: StorageFile) -> str:
    return "/".join(quote(part, safe="") for part in (user.username, bucket.name, storage_file.name))


def _storage_file(user: User, bucket: str, filename: str) -> StorageFile:
    """The file at <user>/<bucket>/<filename>; a name that can't refer to any stored file is not found"""
    user_dir = UserDir(get_settings().storage_folder, user)
    try:
        return StorageFile(Bucket(user_dir, bucket), filename)
    except InvalidName as e:
        raise NotFound("File not found") from e


async def _store(user: User, bucket: Bucket, upload: UploadFile) -> UploadedFile:
    filename = upload.filename or ""
    try:
        storage_file = StorageFile(bucket, filename)
        size = await storage_file.write(upload.file)
    except StorageError as e:
        if isinstance(e, InternalError):
            logging.error(f"Could not store {filename!r} for {user.folder}: {e}")
        else:
            logging.info(f"Not storing {filename!r} for {user.folder}: {e}")
        return UploadedFile(filename=filename, stored=False, detail=str(e))
    logging.info(f"Uploaded file to: {user.folder}/{bucket.name}/{storage_file.name}")
    return UploadedFile(filename=filename, stored=True, path=file_location(user, bucket, storage_file), size=size)


async def _upload(request: Request, user: User, bucket: str | None) -> UploadResponse:
    user_dir = UserDir(get_settings().storage_folder, user)
    # validate the bucket name before reading the body
    named_bucket = Bucket(user_dir, bucket) if bucket is not None else None
    form = await request.form()
    try:
        uploads = [value for _, value in form.multi_items() if isinstance(value, UploadFile)]
        if not uploads:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files in request")
        results = []
        for upload in uploads:
            # without a bucket name, every file gets a fresh bucket of its own
            results.append(await _store(user, named_bucket or Bucket(user_dir), upload))
    finally:
        await form.close()
    return UploadResponse(files=results)


@app_files.post("/")
async def upload_files(request: Request, user: User = Depends(header_user)) -> UploadResponse:
    """
    Upload one or more files as multipart/form-data. Each file is stored in a new bucket with a random name.

    The response lists the outcome per file. Stored files can be retrieved at GET /{path}.
    """
    return await _upload(request, user, bucket=None)


@app_files.post("/{bucket}")
async def upload_files_to_bucket(
    bucket: BucketName, request: Request, user: User = Depends(header_user)
) -> UploadResponse:
    """
    Upload one or more files as multipart/form-data into the given bucket, creating it if needed.

    Existing files are not overwritten: such files are reported as not stored.
    """
    return await _upload(request, user, bucket=bucket)


@app_files.get("/delete/{bucket}/{filename}")
async def delete_file_link(bucket: BucketName, filename: FileName, user: User = Depends(query_user)) -> DeleteResponse:
    """
    Delete a file, authenticating with ?username=...&auth=... so the request can be made from a plain link.
    """
    storage_file = _storage_file(user, bucket, filename)
    logging.info(f"Deleting file from: {user.folder}/{storage_file.bucket.name}/{storage_file.name}")
    await storage_file.delete()
    return DeleteResponse(deleted=file_location(user, storage_file.bucket, storage_file))


@app_files.delete("/{bucket}/{filename}")
async def delete_file(bucket: BucketName, filename: FileName, user: User = Depends(header_user)) -> DeleteResponse:
    """Delete a file. Its bucket and user directory are removed as well when they are left empty."""
    storage_file = _storage_file(user, bucket, filename)
    logging.info(f"Deleting file from: {user.folder}/{storage_file.bucket.name}/{storage_file.name}")
    await storage_file.delete()
    return DeleteResponse(deleted=file_location(user, storage_file.bucket, storage_file))


@app_files.get("/{user}/{bucket}/{filename}", response_class=FileResponse)
async def serve_file(
    user: Annotated[str, Path(description="Username of the owner")], bucket: BucketName, filename: FileName
):
    """Retrieve a file. No credentials are needed: knowing the (random) bucket name is enough."""
    owner = get_user(user)
    if owner is None:
        raise NotFound("File not found")
    storage_file = _storage_file(owner, bucket, filename)
    logging.info(f"Serving file from: {owner.folder}/{storage_file.bucket.name}/{storage_file.name}")
    return await storage_file.serve()
