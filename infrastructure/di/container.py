from __future__ import annotations

from lagom import Container
from motor.motor_asyncio import AsyncIOMotorClient

from application.ports.blob_store import BlobStore
from application.ports.notification_sink import NotificationSink
from application.ports.repositories.document_repository import DocumentRepository
from application.ports.repositories.folder_repository import FolderRepository
from application.ports.repositories.share_repository import ShareRepository
from application.ports.user_directory import UserDirectory
from application.services.access_evaluator import AccessEvaluator
from application.services.cascade_deletion import CascadeDeletionService
from application.services.notifier import Notifier
from application.use_cases.deletion_use_cases import DeleteDocumentUseCase, DeleteFolderUseCase
from application.use_cases.document_use_cases import (
    GetDocumentUseCase,
    ListAccessibleDocumentsUseCase,
    ListMyDocumentsUseCase,
    UpdateDocumentUseCase,
    UploadDocumentUseCase,
)
from application.use_cases.file_use_cases import DownloadFileUseCase, StreamFileUseCase
from application.use_cases.folder_use_cases import (
    AddDocumentToFolderUseCase,
    CreateFolderUseCase,
    ListFolderDocumentsUseCase,
    ListFoldersUseCase,
    RemoveDocumentFromFolderUseCase,
    UpdateFolderUseCase,
)
from application.use_cases.share_use_cases import (
    ListDocumentSharesUseCase,
    ListReceivedSharesUseCase,
    ListSentSharesUseCase,
    RevokeShareUseCase,
    ShareDocumentUseCase,
)
from infrastructure.blob_stores.chunked_blob_store import ChunkedBlobStore
from infrastructure.config import Settings, settings
from infrastructure.mongo_repositories.mongo_document_repository import MongoDocumentRepository
from infrastructure.mongo_repositories.mongo_folder_repository import MongoFolderRepository
from infrastructure.mongo_repositories.mongo_share_repository import MongoShareRepository
from infrastructure.notifications.kafka_notification_sink import KafkaNotificationSink
from infrastructure.notifications.kafka_publisher import KafkaPublisher
from infrastructure.notifications.mongo_notification_sink import MongoNotificationSink
from infrastructure.notifications.null_notification_sink import NullNotificationSink
from infrastructure.user_directory.mongo_user_directory import MongoUserDirectory


def _register_notifications(container: Container, app_settings: Settings) -> None:
    if app_settings.notification_backend == "kafka":
        container[KafkaPublisher] = KafkaPublisher(
            bootstrap_servers=app_settings.kafka_bootstrap_servers,
            topic=app_settings.kafka_topic,
        )
        container[NotificationSink] = lambda c: KafkaNotificationSink(publisher=c[KafkaPublisher])
    elif app_settings.notification_backend == "mongo":
        container[NotificationSink] = lambda c: MongoNotificationSink(
            client=c[AsyncIOMotorClient],
            settings=app_settings,
        )
    else:
        container[NotificationSink] = NullNotificationSink()

    container[Notifier] = lambda c: Notifier(sink=c[NotificationSink])


def create_container(app_settings: Settings = settings) -> Container:
    container = Container()
    container[Settings] = app_settings

    # Storage handles are created once and shared by every request
    container[AsyncIOMotorClient] = AsyncIOMotorClient(
        app_settings.mongo_uri,
        tz_aware=True,
    )
    container[BlobStore] = ChunkedBlobStore(
        base_url=app_settings.blob_base_url,
        chunk_size=app_settings.blob_chunk_size_bytes,
        storage_options=app_settings.blob_storage_options,
    )

    # Repositories
    container[DocumentRepository] = lambda c: MongoDocumentRepository(
        client=c[AsyncIOMotorClient],
        settings=app_settings,
    )
    container[FolderRepository] = lambda c: MongoFolderRepository(
        client=c[AsyncIOMotorClient],
        settings=app_settings,
    )
    container[ShareRepository] = lambda c: MongoShareRepository(
        client=c[AsyncIOMotorClient],
        settings=app_settings,
    )
    container[UserDirectory] = lambda c: MongoUserDirectory(
        client=c[AsyncIOMotorClient],
        settings=app_settings,
    )

    _register_notifications(container, app_settings)

    # Application services
    container[AccessEvaluator] = lambda c: AccessEvaluator(
        user_directory=c[UserDirectory],
        share_repository=c[ShareRepository],
    )
    container[CascadeDeletionService] = lambda c: CascadeDeletionService(
        document_repository=c[DocumentRepository],
        folder_repository=c[FolderRepository],
        share_repository=c[ShareRepository],
        blob_store=c[BlobStore],
        strict_blob_deletion=app_settings.strict_blob_deletion,
    )

    # Document Use Cases
    container[UploadDocumentUseCase] = lambda c: UploadDocumentUseCase(
        document_repository=c[DocumentRepository],
        folder_repository=c[FolderRepository],
        blob_store=c[BlobStore],
        max_upload_bytes=app_settings.max_upload_bytes,
        allowed_content_types=app_settings.allowed_content_types,
    )
    container[GetDocumentUseCase] = lambda c: GetDocumentUseCase(
        document_repository=c[DocumentRepository],
        access_evaluator=c[AccessEvaluator],
    )
    container[ListMyDocumentsUseCase] = lambda c: ListMyDocumentsUseCase(
        document_repository=c[DocumentRepository],
    )
    container[ListAccessibleDocumentsUseCase] = lambda c: ListAccessibleDocumentsUseCase(
        document_repository=c[DocumentRepository],
        share_repository=c[ShareRepository],
        user_directory=c[UserDirectory],
        access_evaluator=c[AccessEvaluator],
    )
    container[UpdateDocumentUseCase] = lambda c: UpdateDocumentUseCase(
        document_repository=c[DocumentRepository],
        notifier=c[Notifier],
    )

    # File Use Cases
    container[DownloadFileUseCase] = lambda c: DownloadFileUseCase(
        document_repository=c[DocumentRepository],
        blob_store=c[BlobStore],
        access_evaluator=c[AccessEvaluator],
    )
    container[StreamFileUseCase] = lambda c: StreamFileUseCase(
        document_repository=c[DocumentRepository],
        blob_store=c[BlobStore],
        access_evaluator=c[AccessEvaluator],
    )

    # Share Use Cases
    container[ShareDocumentUseCase] = lambda c: ShareDocumentUseCase(
        document_repository=c[DocumentRepository],
        share_repository=c[ShareRepository],
        user_directory=c[UserDirectory],
        access_evaluator=c[AccessEvaluator],
        notifier=c[Notifier],
    )
    container[RevokeShareUseCase] = lambda c: RevokeShareUseCase(
        share_repository=c[ShareRepository],
        document_repository=c[DocumentRepository],
        notifier=c[Notifier],
    )
    container[ListDocumentSharesUseCase] = lambda c: ListDocumentSharesUseCase(
        document_repository=c[DocumentRepository],
        share_repository=c[ShareRepository],
        access_evaluator=c[AccessEvaluator],
    )
    container[ListReceivedSharesUseCase] = lambda c: ListReceivedSharesUseCase(
        share_repository=c[ShareRepository],
        document_repository=c[DocumentRepository],
    )
    container[ListSentSharesUseCase] = lambda c: ListSentSharesUseCase(
        share_repository=c[ShareRepository],
        document_repository=c[DocumentRepository],
    )

    # Folder Use Cases
    container[CreateFolderUseCase] = lambda c: CreateFolderUseCase(
        folder_repository=c[FolderRepository],
    )
    container[ListFoldersUseCase] = lambda c: ListFoldersUseCase(
        folder_repository=c[FolderRepository],
    )
    container[UpdateFolderUseCase] = lambda c: UpdateFolderUseCase(
        folder_repository=c[FolderRepository],
    )
    container[AddDocumentToFolderUseCase] = lambda c: AddDocumentToFolderUseCase(
        folder_repository=c[FolderRepository],
        document_repository=c[DocumentRepository],
    )
    container[RemoveDocumentFromFolderUseCase] = lambda c: RemoveDocumentFromFolderUseCase(
        folder_repository=c[FolderRepository],
    )
    container[ListFolderDocumentsUseCase] = lambda c: ListFolderDocumentsUseCase(
        folder_repository=c[FolderRepository],
        document_repository=c[DocumentRepository],
    )

    # Deletion Use Cases
    container[DeleteDocumentUseCase] = lambda c: DeleteDocumentUseCase(
        document_repository=c[DocumentRepository],
        share_repository=c[ShareRepository],
        cascade_deletion=c[CascadeDeletionService],
        notifier=c[Notifier],
    )
    container[DeleteFolderUseCase] = lambda c: DeleteFolderUseCase(
        folder_repository=c[FolderRepository],
        document_repository=c[DocumentRepository],
        cascade_deletion=c[CascadeDeletionService],
        notifier=c[Notifier],
    )

    return container
