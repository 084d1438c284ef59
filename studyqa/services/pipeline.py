"""Document lifecycle: upload -> extraction -> storage, and generation -> replace."""
import logging
import threading
from typing import Any, Dict, List, Protocol

from studyqa.core.errors import (
    ExtractionFailed,
    GenerationFailed,
    NotFound,
    UnsupportedMediaType,
    ValidationFailed,
)
from studyqa.schemas import Document, DocumentCreate, Question, QuestionCreate
from studyqa.services.question_parser import normalize_questions
from studyqa.storage.base import Storage

logger = logging.getLogger(__name__)


ALLOWED_MEDIA_TYPES = frozenset({"application/pdf", "image/png", "image/jpeg"})


class TextExtractor(Protocol):
    def extract_text(self, file_path: str, media_type: str) -> str:
        ...


class QuestionGenerator(Protocol):
    def generate_questions(self, text: str, count: int) -> Any:
        ...


class DocumentPipeline:
    """
    Coordinates extraction, question generation and storage.

    Failure model: upload and generate_questions either complete or leave
    persisted state exactly as it was. A document only exists once its text
    does, and old questions are only replaced once a usable new batch exists.
    """

    def __init__(
        self,
        storage: Storage,
        extractor: TextExtractor,
        generator: QuestionGenerator,
        max_upload_bytes: int = 10 * 1024 * 1024,
        max_question_count: int = 50,
    ):
        self.storage = storage
        self.extractor = extractor
        self.generator = generator
        self.max_upload_bytes = max_upload_bytes
        self.max_question_count = max_question_count

        self._locks: Dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # Documents

    def validate_upload(self, media_type: str, file_size: int) -> None:
        """Reject an upload by declared type and size before any work is done."""
        if media_type not in ALLOWED_MEDIA_TYPES:
            raise UnsupportedMediaType(media_type)
        if file_size > self.max_upload_bytes:
            raise ValidationFailed(
                f"File too large: {file_size} bytes (limit {self.max_upload_bytes})",
                errors=[{"field": "file", "message": "File exceeds the upload size limit"}],
            )

    def upload(
        self,
        file_path: str,
        media_type: str,
        file_name: str,
        file_size: int,
        user_id: int,
    ) -> Document:
        """
        Extract the text of an uploaded file and persist it as a Document.

        Raises:
            UnsupportedMediaType: media type not accepted (extractor never runs)
            ValidationFailed: upload too large
            ExtractionFailed: extractor raised or produced no text
        """
        self.validate_upload(media_type, file_size)

        try:
            content = self.extractor.extract_text(file_path, media_type)
        except Exception as e:
            logger.error("Extraction failed for %s (%s): %s", file_name, media_type, e)
            raise ExtractionFailed(f"Failed to extract text from file: {str(e)}", cause=e) from e

        if not content or not content.strip():
            logger.warning("Extraction produced no text for %s", file_name)
            raise ExtractionFailed("Failed to extract text from file: no text found")

        document = self.storage.create_document(
            DocumentCreate(
                user_id=user_id,
                name=file_name,
                file_type=media_type,
                file_size=file_size,
                content=content,
            )
        )
        logger.info("Created document %s (%s, %d bytes) for user %s", document.id, file_name, file_size, user_id)
        return document

    def list_documents(self, user_id: int) -> List[Document]:
        return self.storage.get_documents_by_user_id(user_id)

    def delete_document(self, document_id: int) -> bool:
        """Delete a document together with its questions."""
        if self.storage.get_document(document_id) is None:
            raise NotFound("Document not found")

        with self._lock_for(document_id):
            deleted = self.storage.delete_document(document_id)

        self._discard_lock(document_id)

        if not deleted:
            # removed by a concurrent request after the check above
            raise NotFound("Document not found")

        logger.info("Deleted document %s", document_id)
        return deleted

    # Questions

    def list_questions(self, document_id: int) -> List[Question]:
        return self.storage.get_questions_by_document_id(document_id)

    def generate_questions(self, document_id: int, requested_count: int) -> List[Question]:
        """
        Generate a fresh question set for a document, replacing the old one.

        Requests for the same document run one at a time. The old set is only
        touched after the generator produced at least one usable pair.

        Raises:
            ValidationFailed: requested_count is not a positive integer
            NotFound: no such document
            GenerationFailed: generator errored or returned nothing usable
        """
        if isinstance(requested_count, bool) or not isinstance(requested_count, int) or requested_count < 1:
            raise ValidationFailed(
                "Question count must be a positive integer",
                errors=[{"field": "count", "message": "must be a positive integer"}],
            )
        count = min(requested_count, self.max_question_count)

        # unknown ids must not leave a lock behind
        if self.storage.get_document(document_id) is None:
            raise NotFound("Document not found")

        with self._lock_for(document_id):
            document = self.storage.get_document(document_id)
            if document is None:
                self._discard_lock(document_id)
                raise NotFound("Document not found")

            try:
                payload = self.generator.generate_questions(document.content, count)
            except GenerationFailed:
                raise
            except Exception as e:
                logger.error("Question generation failed for document %s: %s", document_id, e)
                raise GenerationFailed(f"Failed to generate questions: {str(e)}", cause=e) from e

            pairs = normalize_questions(payload)[:count]

            questions = self.storage.replace_questions(
                document_id,
                [
                    QuestionCreate(document_id=document_id, question=p.question, answer=p.answer)
                    for p in pairs
                ],
            )

        logger.info("Replaced questions for document %s with %d new ones", document_id, len(questions))
        return questions

    def _lock_for(self, document_id: int) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(document_id, threading.Lock())

    def _discard_lock(self, document_id: int) -> None:
        with self._locks_guard:
            self._locks.pop(document_id, None)
