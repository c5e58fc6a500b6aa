"""Tests for infrastructure components."""

from __future__ import annotations

import re
from uuid import uuid4

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from application.dtos.notification_dtos import Notification
from domain.exceptions import DuplicateRecordError, InfrastructureError
from domain.value_objects.notification_kind import NotificationPriority, NotificationType
from infrastructure.config import DEFAULT_ALLOWED_CONTENT_TYPES, Settings
from infrastructure.mongo_repositories.mongo_errors import contains, mongo_errors
from infrastructure.notifications.kafka_notification_sink import KafkaNotificationSink
from infrastructure.notifications.null_notification_sink import NullNotificationSink


class TestSettings:
    """Test environment driven configuration."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("ALLOWED_CONTENT_TYPES", raising=False)
        monkeypatch.delenv("STRICT_BLOB_DELETION", raising=False)

        settings = Settings(_env_file=None)

        assert settings.allowed_content_types == DEFAULT_ALLOWED_CONTENT_TYPES
        assert settings.strict_blob_deletion is False
        assert settings.blob_chunk_size_bytes == 255 * 1024

    def test_content_types_from_comma_separated_env(self, monkeypatch) -> None:
        monkeypatch.setenv("ALLOWED_CONTENT_TYPES", "application/pdf, text/plain ,")

        settings = Settings(_env_file=None)

        assert settings.allowed_content_types == ["application/pdf", "text/plain"]

    def test_content_types_from_json_env(self, monkeypatch) -> None:
        monkeypatch.setenv("ALLOWED_CONTENT_TYPES", '["image/png"]')

        assert Settings(_env_file=None).allowed_content_types == ["image/png"]

    def test_strict_blob_deletion_flag(self, monkeypatch) -> None:
        monkeypatch.setenv("STRICT_BLOB_DELETION", "true")

        assert Settings(_env_file=None).strict_blob_deletion is True


class TestMongoErrors:
    """Test translation of pymongo errors into domain exceptions."""

    def test_duplicate_key(self) -> None:
        with pytest.raises(DuplicateRecordError), mongo_errors("insert_share"):
            raise DuplicateKeyError("E11000 duplicate key")

    def test_other_pymongo_errors(self) -> None:
        with pytest.raises(InfrastructureError, match="find_document"), mongo_errors("find_document"):
            raise ServerSelectionTimeoutError("no servers")

    def test_unrelated_errors_pass_through(self) -> None:
        with pytest.raises(KeyError), mongo_errors("noop"):
            raise KeyError("x")

    def test_contains_escapes_regex(self) -> None:
        query = contains("C++ (intro)")

        assert query["$options"] == "i"
        assert re.search(query["$regex"], "Notes for C++ (Intro) week 1", re.IGNORECASE)
        assert not re.search(query["$regex"], "CCC intro", re.IGNORECASE)


class _RecordingPublisher:
    def __init__(self) -> None:
        self.published: list[tuple[str, dict]] = []

    async def publish(self, subject: str, payload: dict) -> None:
        self.published.append((subject, payload))


class TestNotificationSinks:
    """Test the notification sink adapters."""

    @pytest.mark.asyncio
    async def test_kafka_sink_keys_by_receiver(self) -> None:
        publisher = _RecordingPublisher()
        sink = KafkaNotificationSink(publisher=publisher)
        receiver_id = uuid4()

        await sink.send(
            Notification(
                receiver_id=receiver_id,
                sender_id=uuid4(),
                title="Document Shared",
                message="hello",
                type=NotificationType.DOCUMENT_SHARE,
                priority=NotificationPriority.MEDIUM,
            ),
        )

        subject, payload = publisher.published[0]
        assert subject == str(receiver_id)
        assert payload["event_type"] == "NotificationRequested"
        assert payload["data"]["type"] == "document_share"
        assert payload["data"]["receiver_id"] == str(receiver_id)

    @pytest.mark.asyncio
    async def test_null_sink_accepts_everything(self) -> None:
        await NullNotificationSink().send(
            Notification(receiver_id=uuid4(), sender_id=uuid4(), title="t", message="m"),
        )


class TestContainer:
    """Test dependency wiring."""

    def test_use_cases_resolve(self, tmp_path) -> None:
        from application.use_cases.deletion_use_cases import DeleteFolderUseCase
        from application.use_cases.file_use_cases import StreamFileUseCase
        from infrastructure.di.container import create_container

        settings = Settings(
            _env_file=None,
            BLOB_BASE_URL=f"file://{tmp_path}",
            NOTIFICATION_BACKEND="none",
            STRICT_BLOB_DELETION=True,
        )
        container = create_container(settings)

        stream = container[StreamFileUseCase]
        delete_folder = container[DeleteFolderUseCase]

        assert stream.blob_store is container[StreamFileUseCase].blob_store
        assert delete_folder.cascade_deletion.strict_blob_deletion is True
