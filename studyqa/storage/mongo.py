"""Document-store storage backed by MongoDB (pymongo)."""
import logging
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from studyqa.core.errors import DuplicateKey
from studyqa.schemas import (
    User, UserCreate,
    Document, DocumentCreate,
    Question, QuestionCreate,
)
from studyqa.storage.base import Storage
from studyqa.utils.clock import utcnow_ms

logger = logging.getLogger(__name__)


class MongoStorage(Storage):
    """
    Storage over the users, documents and questions collections.

    Ids are integers handed out by a counters collection so records look the
    same as on the other backends. Without multi-document transactions the
    writes are ordered so a failure never orphans questions: questions go
    before their document, a new batch is written before the old one is
    removed, and a partially written batch is removed again.
    """

    def __init__(self, database: Database, client: Optional[MongoClient] = None):
        self.db = database
        self.client = client
        self.users = database["users"]
        self.documents = database["documents"]
        self.questions = database["questions"]
        self.counters = database["counters"]
        self._ensure_indexes()

    @classmethod
    def from_uri(cls, uri: str, db_name: str, timeout_ms: int = 5000) -> "MongoStorage":
        client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        logger.info("Connecting to MongoDB database %s", db_name)
        return cls(client[db_name], client=client)

    def _ensure_indexes(self) -> None:
        self.users.create_index([("username", ASCENDING)], unique=True)
        self.users.create_index([("email", ASCENDING)], unique=True)
        self.documents.create_index([("userId", ASCENDING)])
        self.questions.create_index([("documentId", ASCENDING)])

    def _next_ids(self, collection: str, count: int = 1) -> List[int]:
        counter = self.counters.find_one_and_update(
            {"_id": collection},
            {"$inc": {"seq": count}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        last = counter["seq"]
        return list(range(last - count + 1, last + 1))

    # User methods

    def get_user(self, user_id: int) -> Optional[User]:
        return _to_record(User, self.users.find_one({"_id": user_id}))

    def get_user_by_username(self, username: str) -> Optional[User]:
        return _to_record(User, self.users.find_one({"username": username}))

    def get_user_by_email(self, email: str) -> Optional[User]:
        return _to_record(User, self.users.find_one({"email": email}))

    def create_user(self, user: UserCreate) -> User:
        doc = {"_id": self._next_ids("users")[0], **user.model_dump(by_alias=True)}
        try:
            self.users.insert_one(doc)
        except DuplicateKeyError as e:
            field = "username" if self.users.find_one({"username": user.username}) else "email"
            raise DuplicateKey(field) from e
        return _to_record(User, doc)

    # Document methods

    def get_document(self, document_id: int) -> Optional[Document]:
        return _to_record(Document, self.documents.find_one({"_id": document_id}))

    def get_documents_by_user_id(self, user_id: int) -> List[Document]:
        cursor = self.documents.find({"userId": user_id}).sort("_id", ASCENDING)
        return [_to_record(Document, doc) for doc in cursor]

    def create_document(self, document: DocumentCreate) -> Document:
        doc = {
            "_id": self._next_ids("documents")[0],
            **document.model_dump(by_alias=True),
            "uploadDate": utcnow_ms(),
        }
        self.documents.insert_one(doc)
        return _to_record(Document, doc)

    def delete_document(self, document_id: int) -> bool:
        self.questions.delete_many({"documentId": document_id})
        result = self.documents.delete_one({"_id": document_id})
        return result.deleted_count > 0

    # Question methods

    def get_question(self, question_id: int) -> Optional[Question]:
        return _to_record(Question, self.questions.find_one({"_id": question_id}))

    def get_questions_by_document_id(self, document_id: int) -> List[Question]:
        cursor = self.questions.find({"documentId": document_id}).sort("_id", ASCENDING)
        return [_to_record(Question, doc) for doc in cursor]

    def create_questions(self, questions: List[QuestionCreate]) -> List[Question]:
        if not questions:
            return []
        ids = self._next_ids("questions", len(questions))
        now = utcnow_ms()
        docs = [
            {"_id": qid, **q.model_dump(by_alias=True), "createdAt": now}
            for qid, q in zip(ids, questions)
        ]
        try:
            self.questions.insert_many(docs, ordered=True)
        except PyMongoError:
            self.questions.delete_many({"_id": {"$in": ids}})
            raise
        return [_to_record(Question, doc) for doc in docs]

    def delete_questions_by_document_id(self, document_id: int) -> int:
        return self.questions.delete_many({"documentId": document_id}).deleted_count

    def replace_questions(self, document_id: int, questions: List[QuestionCreate]) -> List[Question]:
        created = self.create_questions(questions)
        self.questions.delete_many({
            "documentId": document_id,
            "_id": {"$nin": [q.id for q in created]},
        })
        return created

    def close(self) -> None:
        if self.client is not None:
            self.client.close()


def _to_record(model, doc: Optional[Dict[str, Any]]):
    if doc is None:
        return None
    data = {k: v for k, v in doc.items() if k != "_id"}
    data["id"] = doc["_id"]
    return model.model_validate(data)

