from application.dtos.document_dtos import DocumentResponse
from domain.aggregates.document import Document


class DocumentMapper:
    @staticmethod
    def to_document_response(document: Document) -> DocumentResponse:
        """Map a Document record to a DocumentResponse DTO.

        Args:
            document: The Document record to map

        Returns:
            DocumentResponse: The mapped response DTO

        """
        return DocumentResponse(
            document_id=document.id,
            owner_id=document.owner_id,
            title=document.title,
            original_name=document.original_name,
            visibility=document.visibility,
            content_type=document.content_type,
            size=document.size,
            blob_id=document.blob_id,
            created_at=document.created_at,
            updated_at=document.updated_at,
        )
