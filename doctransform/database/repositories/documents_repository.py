from psycopg.rows import dict_row

from doctransform.database.connection import get_connection
from doctransform.processor.exceptions import DocumentNotFoundError
from doctransform.processor.models import Document, parse_file_type


class DocumentsRepository:
    """Database operations for the documents table.

    The pipeline only reads documents, apart from the extracted text cache.
    """

    def find_by_id(self, document_id: int) -> Document:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, original_file_name, storage_key,
                           file_type, file_size, is_scan, extracted_text
                    FROM documents
                    WHERE id = %s
                    """,
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        return Document(
            id=row["id"],
            user_id=row["user_id"],
            original_file_name=row["original_file_name"],
            storage_key=row["storage_key"],
            file_type=parse_file_type(row["file_type"]),
            file_size=row["file_size"],
            is_scan=row["is_scan"],
            extracted_text=row["extracted_text"],
        )

    def update_extracted_text(self, document_id: int, extracted_text: str) -> None:
        """Cache extracted text on the document. Safe to repeat.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET extracted_text = %s
                    WHERE id = %s
                    """,
                    (extracted_text, document_id),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
