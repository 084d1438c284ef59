"""Relational storage backed by SQLAlchemy."""
import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from studyqa import models
from studyqa.core.errors import DuplicateKey
from studyqa.schemas import (
    User, UserCreate,
    Document, DocumentCreate,
    Question, QuestionCreate,
)
from studyqa.storage.base import Storage
from studyqa.utils.clock import utcnow

logger = logging.getLogger(__name__)


class SQLStorage(Storage):
    """
    Storage over the users, documents and questions tables.

    Cascades, batches and replacements each run inside one transaction, so a
    failure part-way rolls the whole unit back.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    # User methods

    def get_user(self, user_id: int) -> Optional[User]:
        with self.session_factory() as db:
            row = db.get(models.User, user_id)
            return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self.session_factory() as db:
            row = db.scalars(select(models.User).where(models.User.username == username)).first()
            return User.model_validate(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self.session_factory() as db:
            row = db.scalars(select(models.User).where(models.User.email == email)).first()
            return User.model_validate(row) if row else None

    def create_user(self, user: UserCreate) -> User:
        with self.session_factory() as db:
            row = models.User(**user.model_dump())
            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise DuplicateKey(_duplicate_field(e)) from e
            db.refresh(row)
            return User.model_validate(row)

    # Document methods

    def get_document(self, document_id: int) -> Optional[Document]:
        with self.session_factory() as db:
            row = db.get(models.Document, document_id)
            return Document.model_validate(row) if row else None

    def get_documents_by_user_id(self, user_id: int) -> List[Document]:
        with self.session_factory() as db:
            rows = db.scalars(
                select(models.Document)
                .where(models.Document.user_id == user_id)
                .order_by(models.Document.id)
            ).all()
            return [Document.model_validate(row) for row in rows]

    def create_document(self, document: DocumentCreate) -> Document:
        with self.session_factory() as db:
            row = models.Document(upload_date=utcnow(), **document.model_dump())
            db.add(row)
            db.commit()
            db.refresh(row)
            return Document.model_validate(row)

    def delete_document(self, document_id: int) -> bool:
        with self.session_factory.begin() as db:
            _delete_questions(db, document_id)
            result = db.execute(delete(models.Document).where(models.Document.id == document_id))
            return result.rowcount > 0

    # Question methods

    def get_question(self, question_id: int) -> Optional[Question]:
        with self.session_factory() as db:
            row = db.get(models.Question, question_id)
            return Question.model_validate(row) if row else None

    def get_questions_by_document_id(self, document_id: int) -> List[Question]:
        with self.session_factory() as db:
            rows = db.scalars(
                select(models.Question)
                .where(models.Question.document_id == document_id)
                .order_by(models.Question.id)
            ).all()
            return [Question.model_validate(row) for row in rows]

    def create_questions(self, questions: List[QuestionCreate]) -> List[Question]:
        if not questions:
            return []
        with self.session_factory.begin() as db:
            return _insert_questions(db, questions)

    def delete_questions_by_document_id(self, document_id: int) -> int:
        with self.session_factory.begin() as db:
            return _delete_questions(db, document_id)

    def replace_questions(self, document_id: int, questions: List[QuestionCreate]) -> List[Question]:
        with self.session_factory.begin() as db:
            removed = _delete_questions(db, document_id)
            created = _insert_questions(db, questions)
            logger.debug("Replaced %d questions with %d for document %s", removed, len(created), document_id)
            return created

    def close(self) -> None:
        self.session_factory.kw["bind"].dispose()


def _insert_questions(db: Session, questions: List[QuestionCreate]) -> List[Question]:
    now = utcnow()
    rows = [models.Question(created_at=now, **q.model_dump()) for q in questions]
    db.add_all(rows)
    db.flush()
    return [Question.model_validate(row) for row in rows]


def _delete_questions(db: Session, document_id: int) -> int:
    result = db.execute(delete(models.Question).where(models.Question.document_id == document_id))
    return result.rowcount


def _duplicate_field(error: IntegrityError) -> str:
    message = str(error.orig).lower()
    return "email" if "email" in message else "username"
