"""Shared test fixtures and configuration."""

from __future__ import annotations

import io
from uuid import uuid4

import pytest

from application.services.access_evaluator import AccessEvaluator
from application.services.cascade_deletion import CascadeDeletionService
from application.services.notifier import Notifier
from domain.aggregates.document import Document
from domain.aggregates.user import User
from domain.value_objects.user_role import UserRole
from domain.value_objects.visibility import Visibility
from infrastructure.blob_stores.chunked_blob_store import ChunkedBlobStore
from tests.mocks import (
    MockDocumentRepository,
    MockFolderRepository,
    MockShareRepository,
    MockUserDirectory,
    RecordingNotificationSink,
)


@pytest.fixture
def student() -> User:
    return User(id=uuid4(), name="Sam Student", role=UserRole.STUDENT, department_id="cs")


@pytest.fixture
def other_student() -> User:
    return User(id=uuid4(), name="Alex Student", role=UserRole.STUDENT, department_id="cs")


@pytest.fixture
def lecturer() -> User:
    return User(id=uuid4(), name="Lee Lecturer", role=UserRole.LECTURER, department_id="cs")


@pytest.fixture
def hod() -> User:
    """Head of the ``cs`` department."""
    return User(id=uuid4(), name="Harper Head", role=UserRole.HOD, department_id="cs")


@pytest.fixture
def foreign_hod() -> User:
    """Head of another department."""
    return User(id=uuid4(), name="Morgan Head", role=UserRole.HOD, department_id="math")


@pytest.fixture
def admin() -> User:
    return User(id=uuid4(), name="Ada Admin", role=UserRole.ADMIN, department_id=None)


@pytest.fixture
def all_users(student, other_student, lecturer, hod, foreign_hod, admin) -> list[User]:
    return [student, other_student, lecturer, hod, foreign_hod, admin]


@pytest.fixture
def user_directory(all_users) -> MockUserDirectory:
    return MockUserDirectory(*all_users)


@pytest.fixture
def document_repository() -> MockDocumentRepository:
    return MockDocumentRepository()


@pytest.fixture
def share_repository() -> MockShareRepository:
    return MockShareRepository()


@pytest.fixture
def folder_repository() -> MockFolderRepository:
    return MockFolderRepository()


@pytest.fixture
def notification_sink() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def notifier(notification_sink) -> Notifier:
    return Notifier(notification_sink)


@pytest.fixture
def access_evaluator(user_directory, share_repository) -> AccessEvaluator:
    return AccessEvaluator(user_directory, share_repository)


@pytest.fixture
def blob_store() -> ChunkedBlobStore:
    """Blob store on fsspec's in-memory filesystem, isolated per test.

    A tiny chunk size makes every multi-byte payload span several chunks.
    """
    return ChunkedBlobStore(f"memory://blobs-{uuid4().hex}", chunk_size=4)


@pytest.fixture
def cascade_deletion(
    document_repository,
    folder_repository,
    share_repository,
    blob_store,
) -> CascadeDeletionService:
    return CascadeDeletionService(
        document_repository,
        folder_repository,
        share_repository,
        blob_store,
    )


@pytest.fixture
def make_document(document_repository, blob_store):
    """Store ``content`` in the blob store and register a document for it."""

    async def _make_document(
        owner: User,
        *,
        content: bytes = b"lecture notes",
        title: str = "Notes",
        visibility: Visibility = Visibility.PRIVATE,
        content_type: str = "application/pdf",
        original_name: str | None = "notes.pdf",
    ) -> Document:
        stored = blob_store.store(io.BytesIO(content), content_type=content_type)
        document = Document.create(
            owner_id=owner.id,
            title=title,
            blob_id=stored.blob_id,
            visibility=visibility,
            content_type=content_type,
            size=stored.size_bytes,
            original_name=original_name,
        )
        await document_repository.create(document)
        return document

    return _make_document
