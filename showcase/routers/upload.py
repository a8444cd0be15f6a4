from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from ..config import settings
from ..dependencies import (
    AuthContext,
    get_auth_context,
    get_blob_store,
    get_record_store,
)
from ..errors import ValidationError, upstream_label
from ..schemas.work import UploadResponse, WorkResponse
from ..services.dispatch import FileSubmission
from ..services.record_store import RecordStore
from ..services.storage_service import BlobStore
from ..services.uploads import submit_work

router = APIRouter(prefix="/api", tags=["Upload"])

CHUNK_SIZE = 1024 * 1024  # 1MB


async def read_upload_file(
    upload_file: UploadFile, max_size: int
) -> FileSubmission:
    """Read an uploaded file, stopping one byte past ``max_size``."""
    chunks = []
    size = 0
    while size <= max_size:
        chunk = await upload_file.read(CHUNK_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
        size += len(chunk)
    return FileSubmission(
        content=b"".join(chunks)[: max_size + 1],
        content_type=upload_file.content_type or "application/octet-stream",
        filename=upload_file.filename,
    )


async def read_submission(
    request: Request,
) -> Tuple[dict, Optional[FileSubmission]]:
    """Pull form fields and the optional file from a JSON or multipart body."""
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError("Invalid JSON body")
        if not isinstance(body, dict):
            raise ValidationError("Invalid JSON body")
        return body, None

    upload = None
    async with request.form() as form:
        fields = {k: v for k, v in form.items() if isinstance(v, str)}
        file = form.get("file")
        if isinstance(file, UploadFile):
            upload = await read_upload_file(file, settings.max_file_size)
    return fields, upload


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_work(
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Upload a student work (file or external URL) and save its metadata"""
    fields, upload = await read_submission(request)
    require_institutional = (
        settings.require_institutional_email or auth.is_authenticated
    )

    with upstream_label("Upload failed"):
        outcome = await run_in_threadpool(
            submit_work,
            fields,
            upload,
            blob_store,
            store,
            require_institutional=require_institutional,
        )

    return UploadResponse(
        work=WorkResponse.model_validate(outcome.work),
        cloud_url=outcome.cloud_url,
    )
