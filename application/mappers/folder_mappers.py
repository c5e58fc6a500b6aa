from application.dtos.folder_dtos import FolderMembershipResponse, FolderResponse
from domain.aggregates.folder import Folder, FolderMembership


class FolderMapper:
    @staticmethod
    def to_folder_response(folder: Folder, document_count: int = 0) -> FolderResponse:
        return FolderResponse(
            folder_id=folder.id,
            owner_id=folder.owner_id,
            name=folder.name,
            status=folder.status,
            document_count=document_count,
            created_at=folder.created_at,
            updated_at=folder.updated_at,
        )

    @staticmethod
    def to_membership_response(membership: FolderMembership) -> FolderMembershipResponse:
        return FolderMembershipResponse(
            membership_id=membership.id,
            folder_id=membership.folder_id,
            document_id=membership.document_id,
            created_at=membership.created_at,
        )
