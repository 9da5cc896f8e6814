from datetime import datetime
from typing import Any

from psycopg.rows import dict_row

from doctransform.database.connection import get_connection
from doctransform.database.models import JobRecord, OptionsSnapshot
from doctransform.database.repositories.base import BaseJobLedger, check_terminal_payload
from doctransform.processor.exceptions import InvalidTransitionError, JobNotFoundError
from doctransform.processor.models import JobStatus

_JOB_COLUMNS = """
    id, document_id, user_id, output_format, artifact_key, artifact_url,
    result_text, translate_from, translate_to, ocr_languages,
    preserve_structure, status, error_message, created_at, completed_at
"""


class JobRepository(BaseJobLedger):
    """Database operations for the processing_jobs table."""

    def create_job(self, document_id: int, user_id: int, options: OptionsSnapshot) -> int:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO processing_jobs
                    (document_id, user_id, output_format, translate_from,
                     translate_to, ocr_languages, preserve_structure, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, 'pending')
                    RETURNING id
                    """,
                    (
                        document_id,
                        user_id,
                        options.output_format,
                        options.translate_from,
                        options.translate_to,
                        options.ocr_languages,
                        options.preserve_structure,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError("INSERT INTO processing_jobs returned no id")
        return int(row[0])

    def claim_job(self, job_id: int) -> bool:
        """Compare-and-set pending -> processing on a single row."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE processing_jobs
                    SET status = 'processing'
                    WHERE id = %s AND status = 'pending'
                    """,
                    (job_id,),
                )
                claimed = cur.rowcount == 1
            conn.commit()
        if not claimed:
            self.get_job(job_id)
        return claimed

    def claim_next_job(self) -> JobRecord | None:
        """Claim the next pending job using SELECT FOR UPDATE SKIP LOCKED."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_JOB_COLUMNS}
                    FROM processing_jobs
                    WHERE status = 'pending'
                    ORDER BY created_at, id
                    LIMIT 1
                    FOR UPDATE SKIP LOCKED
                    """
                )
                row = cur.fetchone()

            if row is None:
                conn.commit()
                return None

            conn.execute(
                "UPDATE processing_jobs SET status = 'processing' WHERE id = %s",
                (row["id"],),
            )
            conn.commit()

        row["status"] = JobStatus.PROCESSING.value
        return _row_to_record(row)

    def set_status(
        self,
        job_id: int,
        status: JobStatus,
        *,
        artifact_key: str | None = None,
        artifact_url: str | None = None,
        result_text: str | None = None,
        error_message: str | None = None,
        completed_at: datetime | None = None,
    ) -> bool:
        if status is JobStatus.PROCESSING:
            return self.claim_job(job_id)
        check_terminal_payload(job_id, status, artifact_key, artifact_url, completed_at)

        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE processing_jobs
                    SET status = %s, artifact_key = %s, artifact_url = %s,
                        result_text = %s, error_message = %s, completed_at = %s
                    WHERE id = %s AND status = 'processing'
                    """,
                    (
                        status.value,
                        artifact_key,
                        artifact_url,
                        result_text,
                        error_message,
                        completed_at,
                        job_id,
                    ),
                )
                applied = cur.rowcount == 1
            conn.commit()

        if not applied:
            current = self.get_job(job_id)
            raise InvalidTransitionError(
                f"Job {job_id}: cannot move from '{current.status.value}' to '{status.value}'"
            )
        return True

    def get_job(self, job_id: int) -> JobRecord:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_JOB_COLUMNS} FROM processing_jobs WHERE id = %s",
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise JobNotFoundError(f"Job {job_id} not found")
        return _row_to_record(row)

    def list_jobs_for_document(self, document_id: int) -> list[JobRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_JOB_COLUMNS}
                    FROM processing_jobs
                    WHERE document_id = %s
                    ORDER BY created_at, id
                    """,
                    (document_id,),
                )
                rows = cur.fetchall()
        return [_row_to_record(row) for row in rows]


def _row_to_record(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        document_id=row["document_id"],
        user_id=row["user_id"],
        options=OptionsSnapshot(
            output_format=row["output_format"],
            translate_from=row["translate_from"],
            translate_to=row["translate_to"],
            ocr_languages=row["ocr_languages"],
            preserve_structure=bool(row["preserve_structure"]),
        ),
        status=JobStatus(row["status"]),
        artifact_key=row["artifact_key"],
        artifact_url=row["artifact_url"],
        result_text=row["result_text"],
        error_message=row["error_message"],
        created_at=row["created_at"],
        completed_at=row["completed_at"],
    )
