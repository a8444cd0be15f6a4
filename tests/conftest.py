import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from showcase.database import Base, get_db
from showcase.dependencies import get_blob_store
from showcase.main import app
from showcase.models import work  # noqa: F401
from showcase.services.storage_service import (
    BlobUploadResult,
    guess_format,
    resolve_resource_type,
)

STORAGE_DOMAIN = "student-showcase.s3.us-east-1.amazonaws.com"

VALID_FIELDS = {
    "name": "Asha Rao",
    "roll": "BT21CSE001",
    "email": "bt21234567@iiitn.ac.in",
    "title": "Night Shift",
    "description": "A four-page comic about the campus library.",
    "category": "Comic",
}


class FakeBlobStore:
    """In-memory blob store that records every call."""

    def __init__(self):
        self.calls = []
        self.deleted = []

    def upload(
        self,
        data,
        resource_type="auto",
        folder="student-works",
        filename=None,
        content_type=None,
    ):
        if resource_type == "auto":
            resource_type = resolve_resource_type(content_type)
        self.calls.append(
            {
                "data": data,
                "resource_type": resource_type,
                "folder": folder,
                "filename": filename,
                "content_type": content_type,
            }
        )
        key = f"{folder}/{resource_type}/fake-{len(self.calls)}"
        return BlobUploadResult(
            url=f"https://{STORAGE_DOMAIN}/{key}",
            public_id=key,
            resource_type=resource_type,
            format=guess_format(filename, content_type),
            bytes=len(data),
        )

    def delete(self, public_id, resource_type="raw"):
        self.deleted.append(public_id)


@pytest.fixture
def valid_fields():
    return dict(VALID_FIELDS)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(
        bind=engine, autoflush=False, expire_on_commit=False
    )
    session = TestingSession()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def client(db_session, blob_store):
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield TestClient(app)
    app.dependency_overrides.clear()
