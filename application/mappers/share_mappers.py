from application.dtos.share_dtos import ShareGrantResponse
from domain.aggregates.share_grant import ShareGrant


class ShareMapper:
    @staticmethod
    def to_share_response(grant: ShareGrant) -> ShareGrantResponse:
        return ShareGrantResponse(
            share_id=grant.id,
            document_id=grant.document_id,
            grantor_id=grant.grantor_id,
            grantee_id=grant.grantee_id,
            created_at=grant.created_at,
        )
