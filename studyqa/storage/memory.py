"""In-memory storage, for development and tests only. Nothing survives a restart."""
import itertools
import threading
from typing import Dict, List, Optional

from studyqa.core.errors import DuplicateKey
from studyqa.schemas import (
    User, UserCreate,
    Document, DocumentCreate,
    Question, QuestionCreate,
)
from studyqa.storage.base import Storage
from studyqa.utils.clock import utcnow


class MemoryStorage(Storage):

    def __init__(self):
        self._users: Dict[int, User] = {}
        self._documents: Dict[int, Document] = {}
        self._questions: Dict[int, Question] = {}

        self._user_ids = itertools.count(1)
        self._document_ids = itertools.count(1)
        self._question_ids = itertools.count(1)

        self._lock = threading.Lock()

    # User methods

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in list(self._users.values()) if u.username == username), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in list(self._users.values()) if u.email == email), None)

    def create_user(self, user: UserCreate) -> User:
        with self._lock:
            if self.get_user_by_username(user.username):
                raise DuplicateKey("username")
            if self.get_user_by_email(user.email):
                raise DuplicateKey("email")
            new_user = User(id=next(self._user_ids), **user.model_dump())
            self._users[new_user.id] = new_user
            return new_user

    # Document methods

    def get_document(self, document_id: int) -> Optional[Document]:
        return self._documents.get(document_id)

    def get_documents_by_user_id(self, user_id: int) -> List[Document]:
        return [d for d in list(self._documents.values()) if d.user_id == user_id]

    def create_document(self, document: DocumentCreate) -> Document:
        with self._lock:
            new_document = Document(
                id=next(self._document_ids),
                upload_date=utcnow(),
                **document.model_dump(),
            )
            self._documents[new_document.id] = new_document
            return new_document

    def delete_document(self, document_id: int) -> bool:
        with self._lock:
            self._delete_questions(document_id)
            return self._documents.pop(document_id, None) is not None

    # Question methods

    def get_question(self, question_id: int) -> Optional[Question]:
        return self._questions.get(question_id)

    def get_questions_by_document_id(self, document_id: int) -> List[Question]:
        return [q for q in list(self._questions.values()) if q.document_id == document_id]

    def create_questions(self, questions: List[QuestionCreate]) -> List[Question]:
        with self._lock:
            return self._insert_questions(questions)

    def delete_questions_by_document_id(self, document_id: int) -> int:
        with self._lock:
            return self._delete_questions(document_id)

    def replace_questions(self, document_id: int, questions: List[QuestionCreate]) -> List[Question]:
        with self._lock:
            self._delete_questions(document_id)
            return self._insert_questions(questions)

    # Callers hold self._lock

    def _insert_questions(self, questions: List[QuestionCreate]) -> List[Question]:
        now = utcnow()
        # build the whole batch before any record becomes visible
        batch = [
            Question(id=next(self._question_ids), created_at=now, **q.model_dump())
            for q in questions
        ]
        self._questions.update((q.id, q) for q in batch)
        return batch

    def _delete_questions(self, document_id: int) -> int:
        doomed = [qid for qid, q in self._questions.items() if q.document_id == document_id]
        for qid in doomed:
            del self._questions[qid]
        return len(doomed)
