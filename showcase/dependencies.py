from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .errors import PermissionDeniedError
from .services.intake import is_institutional_email
from .services.record_store import SqlRecordStore
from .services.storage_service import BlobStore, create_blob_store


@dataclass(frozen=True)
class AuthContext:
    """Who is calling, as reported by the client after identity-provider login."""

    email: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.email)

    @property
    def can_upload(self) -> bool:
        return is_institutional_email(self.email or "")

    @property
    def is_admin(self) -> bool:
        admins = {e.strip().lower() for e in settings.admin_emails}
        return bool(self.email) and self.email.strip().lower() in admins


def get_auth_context(
    x_user_email: Optional[str] = Header(default=None),
) -> AuthContext:
    email = (x_user_email or "").strip() or None
    return AuthContext(email=email)


def require_admin(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """Admin gate for destructive routes; open when no admins are configured."""
    if settings.admin_emails and not auth.is_admin:
        raise PermissionDeniedError("Admin access required")
    return auth


def get_record_store(db: Session = Depends(get_db)) -> SqlRecordStore:
    return SqlRecordStore(db)


@lru_cache
def get_blob_store() -> BlobStore:
    return create_blob_store()
