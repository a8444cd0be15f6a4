"""
Upload dispatch: turn a validated category plus payload into a stored file URL.

Website and Skit entries reference an external URL. Every other category
carries a binary file that goes to the blob store exactly once.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..errors import ValidationError
from ..models.work import Category, FileType
from .storage_service import BlobStore, BlobUploadResult, resolve_resource_type

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset(
    [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "video/mp4",
        "video/quicktime",
        "video/x-msvideo",
        "application/pdf",
        "application/zip",
        "application/x-zip-compressed",
    ]
)


class UploadMode(str, enum.Enum):
    FILE = "file"
    URL = "url"


UPLOAD_MODES = {
    Category.COMIC: UploadMode.FILE,
    Category.WEBSITE: UploadMode.URL,
    Category.MAGAZINE: UploadMode.FILE,
    Category.SKIT: UploadMode.URL,
    Category.OTHER: UploadMode.FILE,
}

URL_FILE_TYPES = {
    Category.WEBSITE: FileType.WEBSITE,
    Category.SKIT: FileType.VIDEO,
}


@dataclass(frozen=True)
class FileSubmission:
    content: bytes
    content_type: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UrlSubmission:
    url: str


Submission = Union[FileSubmission, UrlSubmission]


@dataclass(frozen=True)
class ResolvedFile:
    file_url: str
    file_type: FileType
    blob: Optional[BlobUploadResult] = None


def upload_mode(category: Category) -> UploadMode:
    return UPLOAD_MODES[Category(category)]


_url_adapter = TypeAdapter(AnyUrl)


def is_absolute_url(value: str) -> bool:
    """True for an absolute URL with a scheme and a non-empty host."""
    try:
        parsed = _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return bool(parsed.scheme and parsed.host)


def file_type_for_mime(mimetype: str) -> FileType:
    mimetype = (mimetype or "").lower()
    if mimetype.startswith("image/"):
        return FileType.IMAGE
    if mimetype.startswith("video/"):
        return FileType.VIDEO
    if mimetype == "application/pdf":
        return FileType.PDF
    if "zip" in mimetype:
        return FileType.ZIP
    return FileType.OTHER


def build_submission(
    category: Category,
    url: Optional[str] = None,
    upload: Optional[FileSubmission] = None,
    max_file_size: Optional[int] = None,
) -> Submission:
    """Pick the submission variant for ``category`` and check its preconditions.

    Raises ``ValidationError`` with a single message on the first violation.
    Nothing external is touched here.
    """
    category = Category(category)
    if max_file_size is None:
        max_file_size = settings.max_file_size

    if upload_mode(category) is UploadMode.URL:
        url = str(url or "").strip()
        if not url:
            raise ValidationError(f"{category.value} URL is required")
        if not is_absolute_url(url):
            raise ValidationError("Invalid URL format")
        return UrlSubmission(url=url)

    if upload is None or not upload.content:
        raise ValidationError("File is required")
    if upload.size > max_file_size:
        limit_mb = max_file_size // (1024 * 1024)
        raise ValidationError(f"File size exceeds {limit_mb}MB limit")
    if (upload.content_type or "").lower() not in ALLOWED_MIME_TYPES:
        raise ValidationError(
            "Invalid file type. Allowed: images, videos, PDFs, ZIP files"
        )
    return upload


def dispatch(
    category: Category,
    submission: Submission,
    blob_store: BlobStore,
    folder: Optional[str] = None,
) -> ResolvedFile:
    """Resolve the stored file URL and kind for a checked submission."""
    category = Category(category)
    if isinstance(submission, UrlSubmission):
        return ResolvedFile(
            file_url=submission.url, file_type=URL_FILE_TYPES[category]
        )

    resource_type = resolve_resource_type(submission.content_type)
    logger.info(
        "Uploading %s to blob storage as %s",
        submission.filename or "file",
        resource_type,
    )
    result = blob_store.upload(
        submission.content,
        resource_type=resource_type,
        folder=folder or settings.storage_folder,
        filename=submission.filename,
        content_type=submission.content_type,
    )
    return ResolvedFile(
        file_url=result.url,
        file_type=file_type_for_mime(submission.content_type),
        blob=result,
    )
