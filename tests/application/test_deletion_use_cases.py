"""Tests for cascading document and folder deletion."""

from __future__ import annotations

from uuid import uuid4

import pytest
from returns.result import Failure, Success

from application.services.cascade_deletion import CascadeDeletionService
from application.use_cases.deletion_use_cases import DeleteDocumentUseCase, DeleteFolderUseCase
from domain.aggregates.folder import Folder, FolderMembership
from domain.aggregates.share_grant import ShareGrant
from domain.value_objects.notification_kind import NotificationPriority, NotificationType
from tests.mocks import FailingBlobStore


def _delete_document_use_case(
    document_repository,
    share_repository,
    cascade,
    notifier=None,
) -> DeleteDocumentUseCase:
    return DeleteDocumentUseCase(document_repository, share_repository, cascade, notifier)


async def _folder_with(folder_repository, owner, *documents) -> Folder:
    folder = Folder.create(owner_id=owner.id, name="Coursework")
    await folder_repository.create(folder)
    for document in documents:
        await folder_repository.add_membership(
            FolderMembership(folder_id=folder.id, document_id=document.id),
        )
    return folder


class TestDeleteDocumentUseCase:
    @pytest.mark.asyncio
    async def test_delete_removes_everything(
        self,
        make_document,
        document_repository,
        share_repository,
        folder_repository,
        blob_store,
        cascade_deletion,
        student,
    ) -> None:
        document = await make_document(student)
        await _folder_with(folder_repository, student, document)

        use_case = _delete_document_use_case(document_repository, share_repository, cascade_deletion)
        result = await use_case.execute(document.id, student)

        assert isinstance(result, Success)
        report = result.unwrap()
        assert report.blob_deleted is True
        assert report.folder_associations_removed == 1
        assert report.warnings == []
        assert document.id not in document_repository.documents
        assert blob_store.info(document.blob_id) is None
        assert folder_repository.memberships == []

    @pytest.mark.asyncio
    async def test_shared_document_needs_force(
        self,
        make_document,
        document_repository,
        share_repository,
        cascade_deletion,
        student,
        other_student,
    ) -> None:
        document = await make_document(student, title="Shared notes")
        await share_repository.add(ShareGrant.create(document.id, student.id, other_student.id))

        use_case = _delete_document_use_case(document_repository, share_repository, cascade_deletion)
        result = await use_case.execute(document.id, student)

        assert isinstance(result, Failure)
        error = result.failure()
        assert error.category == "conflict"
        assert error.data == {
            "share_count": 1,
            "document": {"id": str(document.id), "title": "Shared notes"},
        }
        assert document.id in document_repository.documents

        forced = (await use_case.execute(document.id, student, force=True)).unwrap()
        assert forced.shares_removed == 1
        assert await share_repository.count_by_document(document.id) == 0

    @pytest.mark.asyncio
    async def test_only_owner_or_admin(
        self,
        make_document,
        document_repository,
        share_repository,
        cascade_deletion,
        notifier,
        notification_sink,
        student,
        hod,
        admin,
    ) -> None:
        document = await make_document(student)
        use_case = _delete_document_use_case(
            document_repository,
            share_repository,
            cascade_deletion,
            notifier,
        )

        assert (await use_case.execute(document.id, hod)).failure().category == "access_denied"
        assert isinstance(await use_case.execute(document.id, admin), Success)

        notification = notification_sink.sent[0]
        assert notification.receiver_id == student.id
        assert notification.type == NotificationType.ADMIN_ACTION
        assert notification.priority == NotificationPriority.HIGH

    @pytest.mark.asyncio
    async def test_missing_blob_is_a_warning(
        self,
        make_document,
        document_repository,
        share_repository,
        blob_store,
        cascade_deletion,
        student,
    ) -> None:
        document = await make_document(student)
        blob_store.delete(document.blob_id)

        use_case = _delete_document_use_case(document_repository, share_repository, cascade_deletion)
        report = (await use_case.execute(document.id, student)).unwrap()

        assert report.blob_deleted is False
        assert report.warnings == ["File content was already missing from storage"]
        assert document.id not in document_repository.documents

    @pytest.mark.asyncio
    async def test_blob_failure_still_deletes_record_by_default(
        self,
        make_document,
        document_repository,
        share_repository,
        folder_repository,
        blob_store,
        student,
    ) -> None:
        document = await make_document(student)
        failing = FailingBlobStore(blob_store, fail_delete={document.blob_id})
        cascade = CascadeDeletionService(
            document_repository,
            folder_repository,
            share_repository,
            failing,
        )

        use_case = _delete_document_use_case(document_repository, share_repository, cascade)
        report = (await use_case.execute(document.id, student)).unwrap()

        assert report.blob_deleted is False
        assert report.warnings[0].startswith("Failed to delete file content from storage")
        assert document.id not in document_repository.documents

    @pytest.mark.asyncio
    async def test_strict_mode_keeps_record_when_blob_delete_fails(
        self,
        make_document,
        document_repository,
        share_repository,
        folder_repository,
        blob_store,
        student,
    ) -> None:
        document = await make_document(student)
        failing = FailingBlobStore(blob_store, fail_delete={document.blob_id})
        cascade = CascadeDeletionService(
            document_repository,
            folder_repository,
            share_repository,
            failing,
            strict_blob_deletion=True,
        )

        use_case = _delete_document_use_case(document_repository, share_repository, cascade)
        result = await use_case.execute(document.id, student)

        assert result.failure().category == "storage"
        assert document.id in document_repository.documents

        forced = (await use_case.execute(document.id, student, force=True)).unwrap()
        assert forced.blob_deleted is False
        assert document.id not in document_repository.documents

    @pytest.mark.asyncio
    async def test_not_found(
        self,
        document_repository,
        share_repository,
        cascade_deletion,
        student,
    ) -> None:
        use_case = _delete_document_use_case(document_repository, share_repository, cascade_deletion)

        assert (await use_case.execute(uuid4(), student)).failure().category == "not_found"


class TestDeleteFolderUseCase:
    @pytest.mark.asyncio
    async def test_empty_folder(
        self,
        folder_repository,
        document_repository,
        cascade_deletion,
        student,
    ) -> None:
        folder = await _folder_with(folder_repository, student)

        use_case = DeleteFolderUseCase(folder_repository, document_repository, cascade_deletion)
        report = (await use_case.execute(folder.id, student)).unwrap()

        assert report.documents_processed == 0
        assert folder.id not in folder_repository.folders

    @pytest.mark.asyncio
    async def test_non_empty_folder_conflict(
        self,
        make_document,
        folder_repository,
        document_repository,
        cascade_deletion,
        student,
    ) -> None:
        document = await make_document(student, title="Essay")
        folder = await _folder_with(folder_repository, student, document)

        use_case = DeleteFolderUseCase(folder_repository, document_repository, cascade_deletion)
        error = (await use_case.execute(folder.id, student)).failure()

        assert error.category == "conflict"
        assert error.data["folder"] == {
            "id": str(folder.id),
            "name": "Coursework",
            "document_count": 1,
        }
        assert error.data["documents"] == [{"id": str(document.id), "title": "Essay"}]
        assert folder.id in folder_repository.folders

    @pytest.mark.asyncio
    async def test_force_keeps_documents(
        self,
        make_document,
        folder_repository,
        document_repository,
        cascade_deletion,
        student,
    ) -> None:
        document = await make_document(student)
        folder = await _folder_with(folder_repository, student, document)

        use_case = DeleteFolderUseCase(folder_repository, document_repository, cascade_deletion)
        report = (await use_case.execute(folder.id, student, force=True)).unwrap()

        assert report.documents_deleted == 0
        assert report.folder_associations_removed == 1
        assert document.id in document_repository.documents
        assert folder_repository.memberships == []

    @pytest.mark.asyncio
    async def test_cascade_reports_partial_failures(
        self,
        make_document,
        folder_repository,
        document_repository,
        share_repository,
        blob_store,
        student,
        other_student,
    ) -> None:
        ok = await make_document(student, title="Fine")
        stuck = await make_document(student, title="Stuck")
        gone = await make_document(student, title="Gone")
        await share_repository.add(ShareGrant.create(ok.id, student.id, other_student.id))
        folder = await _folder_with(folder_repository, student, ok, stuck, gone)
        await document_repository.delete(gone.id)

        failing = FailingBlobStore(blob_store, fail_delete={stuck.blob_id})
        cascade = CascadeDeletionService(
            document_repository,
            folder_repository,
            share_repository,
            failing,
            strict_blob_deletion=True,
        )
        use_case = DeleteFolderUseCase(folder_repository, document_repository, cascade)

        report = (await use_case.execute(folder.id, student, delete_documents=True)).unwrap()

        assert report.documents_processed == 3
        assert report.documents_deleted == 1
        assert report.folder_associations_removed == 3
        assert {e.document_id for e in report.errors} == {stuck.id, gone.id}
        assert ok.id not in document_repository.documents
        # Folder cascades always force past blob failures
        assert stuck.id not in document_repository.documents
        assert await share_repository.count_by_document(ok.id) == 0
        assert folder.id not in folder_repository.folders
        assert folder_repository.memberships == []

    @pytest.mark.asyncio
    async def test_admin_delete_notifies_owner(
        self,
        folder_repository,
        document_repository,
        cascade_deletion,
        notifier,
        notification_sink,
        student,
        admin,
        other_student,
    ) -> None:
        folder = await _folder_with(folder_repository, student)
        use_case = DeleteFolderUseCase(
            folder_repository,
            document_repository,
            cascade_deletion,
            notifier,
        )

        denied = await use_case.execute(folder.id, other_student)
        assert denied.failure().category == "access_denied"

        assert isinstance(await use_case.execute(folder.id, admin), Success)
        assert notification_sink.sent[0].receiver_id == student.id

    @pytest.mark.asyncio
    async def test_admin_cascade_notifies_each_document_owner(
        self,
        make_document,
        folder_repository,
        document_repository,
        cascade_deletion,
        notifier,
        notification_sink,
        student,
        lecturer,
        admin,
    ) -> None:
        thesis = await make_document(student, title="Thesis")
        slides = await make_document(lecturer, title="Slides")
        memo = await make_document(admin, title="Memo")
        folder = await _folder_with(folder_repository, student, thesis, slides, memo)
        use_case = DeleteFolderUseCase(
            folder_repository,
            document_repository,
            cascade_deletion,
            notifier,
        )

        report = (await use_case.execute(folder.id, admin, delete_documents=True)).unwrap()

        assert report.documents_deleted == 3
        assert "deleted_documents" not in report.model_dump()
        by_title = {n.title: n for n in notification_sink.sent}
        document_notices = [
            n for n in notification_sink.sent if n.title == "Documents Deleted with Folder"
        ]
        assert sorted(n.receiver_id for n in document_notices) == sorted([student.id, lecturer.id])
        assert all(n.type == NotificationType.ADMIN_ACTION for n in document_notices)
        assert all(n.priority == NotificationPriority.HIGH for n in document_notices)
        assert all(n.sender_id == admin.id for n in notification_sink.sent)
        assert by_title["Folder Deleted"].receiver_id == student.id

    @pytest.mark.asyncio
    async def test_owner_cascade_sends_no_notifications(
        self,
        make_document,
        folder_repository,
        document_repository,
        cascade_deletion,
        notifier,
        notification_sink,
        student,
    ) -> None:
        thesis = await make_document(student, title="Thesis")
        folder = await _folder_with(folder_repository, student, thesis)
        use_case = DeleteFolderUseCase(
            folder_repository,
            document_repository,
            cascade_deletion,
            notifier,
        )

        assert isinstance(await use_case.execute(folder.id, student, delete_documents=True), Success)
        assert notification_sink.sent == []
