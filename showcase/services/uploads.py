import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ..errors import ValidationError
from ..models.work import Category, Work
from ..schemas.work import WorkCreate
from .dispatch import FileSubmission, build_submission, dispatch
from .intake import validate_submission
from .record_store import RecordStore
from .storage_service import BlobStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadOutcome:
    work: Work
    cloud_url: str


def submit_work(
    fields: Mapping,
    upload: Optional[FileSubmission],
    blob_store: BlobStore,
    store: RecordStore,
    require_institutional: bool = True,
    max_file_size: Optional[int] = None,
    folder: Optional[str] = None,
) -> UploadOutcome:
    """Validate, store the file (or take the URL) and save the work record.

    The blob upload and the record write are separate single attempts; a
    failed write leaves the uploaded blob in place.
    """
    errors = validate_submission(
        fields, require_institutional=require_institutional
    )
    if errors:
        logger.info(
            "Rejected submission: %s", ", ".join(e.field for e in errors)
        )
        raise ValidationError(errors=errors)

    category = Category(str(fields["category"]).strip())
    submission = build_submission(
        category,
        url=fields.get("url"),
        upload=upload,
        max_file_size=max_file_size,
    )
    resolved = dispatch(category, submission, blob_store, folder=folder)

    work = store.create(
        WorkCreate(
            name=str(fields["name"]).strip(),
            roll=str(fields["roll"]).strip(),
            email=str(fields["email"]).strip().lower(),
            title=str(fields["title"]).strip(),
            description=str(fields["description"]).strip(),
            category=category.value,
            file_url=resolved.file_url,
            file_type=resolved.file_type.value,
        )
    )
    logger.info("Work uploaded successfully: %s", work.id)
    return UploadOutcome(work=work, cloud_url=resolved.file_url)
