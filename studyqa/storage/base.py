"""Storage contract shared by every persistence backend."""
from abc import ABC, abstractmethod
from typing import List, Optional

from studyqa.schemas import (
    User, UserCreate,
    Document, DocumentCreate,
    Question, QuestionCreate,
)


class Storage(ABC):
    """
    Persistence interface over users, documents and questions.

    Obligations for every backend:
    - username and email are unique; violating inserts raise DuplicateKey
    - ids are assigned by the store and never chosen by callers
    - delete_document removes the document's questions before the document
    - create_questions and replace_questions are all-or-nothing
    """

    # User methods

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def create_user(self, user: UserCreate) -> User:
        ...

    # Document methods

    @abstractmethod
    def get_document(self, document_id: int) -> Optional[Document]:
        ...

    @abstractmethod
    def get_documents_by_user_id(self, user_id: int) -> List[Document]:
        ...

    @abstractmethod
    def create_document(self, document: DocumentCreate) -> Document:
        ...

    @abstractmethod
    def delete_document(self, document_id: int) -> bool:
        """Delete a document and its questions. Returns False if it did not exist."""

    # Question methods

    @abstractmethod
    def get_question(self, question_id: int) -> Optional[Question]:
        ...

    @abstractmethod
    def get_questions_by_document_id(self, document_id: int) -> List[Question]:
        ...

    @abstractmethod
    def create_questions(self, questions: List[QuestionCreate]) -> List[Question]:
        ...

    @abstractmethod
    def delete_questions_by_document_id(self, document_id: int) -> int:
        """Delete every question of a document. Returns how many were removed."""

    @abstractmethod
    def replace_questions(self, document_id: int, questions: List[QuestionCreate]) -> List[Question]:
        """
        Swap the question set of a document for a new batch.

        Readers never see the document with neither the old nor the new set.
        """

    def create_question(self, question: QuestionCreate) -> Question:
        return self.create_questions([question])[0]

    def close(self) -> None:
        """Release backend resources."""
