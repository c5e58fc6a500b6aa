"""Tests for DTOs."""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from application.dtos.common_dtos import ApiResponse, PageResult
from application.dtos.document_dtos import DocumentResponse, UploadDocumentRequest
from application.dtos.folder_dtos import CreateFolderRequest, UpdateFolderRequest
from application.dtos.share_dtos import ShareDocumentRequest
from application.mappers.document_mappers import DocumentMapper
from domain.aggregates.document import Document
from domain.value_objects.folder_status import FolderStatus
from domain.value_objects.visibility import Visibility


class TestApiResponse:
    """Test the response envelope."""

    def test_ok(self) -> None:
        response = ApiResponse.ok("Done", {"id": 1})

        assert response.model_dump(exclude_none=True) == {
            "success": True,
            "message": "Done",
            "data": {"id": 1},
        }

    def test_fail(self) -> None:
        response = ApiResponse.fail("Nope", "conflict", data={"share_count": 2})

        assert response.success is False
        assert response.error == "conflict"
        assert response.data == {"share_count": 2}


class TestPageResult:
    def test_page_of_documents(self) -> None:
        document = Document.create(owner_id=uuid4(), title="Notes", blob_id="abc", size=3)

        page = PageResult[DocumentResponse](
            items=[DocumentMapper.to_document_response(document)],
            total=5,
            skip=0,
            limit=1,
        )

        dumped = page.model_dump(mode="json")
        assert dumped["total"] == 5
        assert dumped["items"][0]["document_id"] == str(document.id)
        assert dumped["items"][0]["visibility"] == "private"


class TestRequests:
    """Test request DTO validation."""

    def test_upload_defaults(self) -> None:
        request = UploadDocumentRequest(filename="a.pdf")

        assert request.visibility == Visibility.PRIVATE
        assert request.folder_id is None

    def test_upload_rejects_unknown_visibility(self) -> None:
        with pytest.raises(ValidationError):
            UploadDocumentRequest(visibility="secret")

    def test_share_requires_at_least_one_user(self) -> None:
        with pytest.raises(ValidationError):
            ShareDocumentRequest(user_ids=[])

    def test_share_rejects_malformed_ids(self) -> None:
        with pytest.raises(ValidationError):
            ShareDocumentRequest(user_ids=["nope"])

    def test_folder_status_values(self) -> None:
        assert CreateFolderRequest(name="x", status="Completed").status == FolderStatus.COMPLETED
        with pytest.raises(ValidationError):
            CreateFolderRequest(name="x", status="Archived")

    def test_update_folder_ignores_unknown_fields(self) -> None:
        request = UpdateFolderRequest.model_validate({"owner_id": str(uuid4())})

        assert request.name is None
        assert request.status is None
