import logging
import uuid
from typing import List, Protocol, Union

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import MalformedIdentifierError, NotFoundError, UpstreamError
from ..models.work import Work
from ..schemas.work import WorkCreate
from .listing import WorkFilter

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def create(self, record: WorkCreate) -> Work: ...

    def list_by(self, work_filter: WorkFilter) -> List[Work]: ...

    def get_by_id(self, work_id: Union[str, uuid.UUID]) -> Work: ...

    def delete_by_id(self, work_id: Union[str, uuid.UUID]) -> None: ...


def parse_work_id(work_id: Union[str, uuid.UUID]) -> uuid.UUID:
    if isinstance(work_id, uuid.UUID):
        return work_id
    try:
        return uuid.UUID(str(work_id))
    except ValueError:
        raise MalformedIdentifierError()


def _like_pattern(term: str) -> str:
    escaped = (
        term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"%{escaped}%"


class SqlRecordStore:
    """Work records kept in a SQL database through SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, work_filter: WorkFilter):
        query = self.db.query(Work)
        if work_filter.category:
            query = query.filter(Work.category == work_filter.category)
        if work_filter.search:
            pattern = _like_pattern(work_filter.search)
            query = query.filter(
                or_(
                    Work.name.ilike(pattern, escape="\\"),
                    Work.title.ilike(pattern, escape="\\"),
                )
            )
        return query

    def create(self, record: WorkCreate) -> Work:
        data = record.model_dump(exclude_none=True)
        work = Work(**data)
        try:
            self.db.add(work)
            self.db.commit()
            self.db.refresh(work)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError(str(e)) from e
        return work

    def list_by(self, work_filter: WorkFilter) -> List[Work]:
        order = (
            Work.timestamp.asc()
            if work_filter.ascending
            else Work.timestamp.desc()
        )
        try:
            return self._query(work_filter).order_by(order).all()
        except SQLAlchemyError as e:
            raise UpstreamError(str(e)) from e

    def get_by_id(self, work_id: Union[str, uuid.UUID]) -> Work:
        key = parse_work_id(work_id)
        try:
            work = self.db.query(Work).filter(Work.id == key).first()
        except SQLAlchemyError as e:
            raise UpstreamError(str(e)) from e
        if not work:
            raise NotFoundError()
        return work

    def delete_by_id(self, work_id: Union[str, uuid.UUID]) -> None:
        work = self.get_by_id(work_id)
        try:
            self.db.delete(work)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError(str(e)) from e
        logger.info("Deleted work %s", work.id)
