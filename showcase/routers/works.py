from typing import Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_record_store, require_admin
from ..errors import upstream_label
from ..schemas.work import (
    MessageResponse,
    WorkDetailResponse,
    WorkListResponse,
    WorkResponse,
)
from ..services.listing import build_filter
from ..services.record_store import RecordStore

router = APIRouter(prefix="/api/works", tags=["Works"])


@router.get("", response_model=WorkListResponse)
def get_works(
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = "newest",
    store: RecordStore = Depends(get_record_store),
):
    """Get all works, optionally filtered by category and name/title search"""
    work_filter = build_filter(category=category, search=search, sort=sort)
    with upstream_label("Failed to fetch works"):
        works = store.list_by(work_filter)

    return WorkListResponse(
        count=len(works),
        works=[WorkResponse.model_validate(w) for w in works],
    )


@router.get("/{work_id}", response_model=WorkDetailResponse)
def get_work(work_id: str, store: RecordStore = Depends(get_record_store)):
    """Get a single work by ID"""
    with upstream_label("Failed to fetch work"):
        work = store.get_by_id(work_id)
    return WorkDetailResponse(work=WorkResponse.model_validate(work))


@router.delete(
    "/{work_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_work(work_id: str, store: RecordStore = Depends(get_record_store)):
    """Delete a work record. The stored file is left in blob storage."""
    with upstream_label("Failed to delete work"):
        store.delete_by_id(work_id)
    return MessageResponse(message="Work deleted successfully")
