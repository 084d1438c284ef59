"""
Pytest configuration.

Provides storage backends, mocked extractor/generator and an HTTP client.
"""
from unittest.mock import Mock

import mongomock
import pytest
from fastapi.testclient import TestClient

from studyqa.core.config import Settings
from studyqa.db.sessions import create_db_engine, create_session_factory
from studyqa.main import create_app
from studyqa.schemas import DocumentCreate, QuestionCreate
from studyqa.services.pipeline import DocumentPipeline
from studyqa.storage.memory import MemoryStorage
from studyqa.storage.mongo import MongoStorage
from studyqa.storage.sql import SQLStorage


EXTRACTED_TEXT = "Photosynthesis converts light energy into chemical energy stored in glucose."


# ==================== Storage fixtures ====================

def _memory_storage():
    return MemoryStorage()


def _sql_storage():
    engine = create_db_engine("sqlite://")
    return SQLStorage(create_session_factory(engine))


def _mongo_storage():
    return MongoStorage(mongomock.MongoClient()["studyqa_test"])


STORAGE_FACTORIES = {
    "memory": _memory_storage,
    "sql": _sql_storage,
    "mongo": _mongo_storage,
}


@pytest.fixture(params=sorted(STORAGE_FACTORIES))
def storage(request):
    """Every storage backend in turn."""
    backend = STORAGE_FACTORIES[request.param]()
    yield backend
    backend.close()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


# ==================== Collaborator mocks ====================

@pytest.fixture
def mock_extractor():
    """Extractor returning fixed text, so no PDF parser or OCR binary is needed."""
    mock = Mock()
    mock.extract_text.return_value = EXTRACTED_TEXT
    return mock


@pytest.fixture
def mock_generator():
    """Generator returning three pairs in the documented {"questions": [...]} shape."""
    mock = Mock()
    mock.generate_questions.return_value = {
        "questions": [
            {"question": f"Question {i}?", "answer": f"Answer {i}."}
            for i in range(1, 4)
        ]
    }
    return mock


@pytest.fixture
def pipeline(storage, mock_extractor, mock_generator):
    return DocumentPipeline(
        storage=storage,
        extractor=mock_extractor,
        generator=mock_generator,
        max_upload_bytes=10 * 1024 * 1024,
        max_question_count=50,
    )


# ==================== Data helpers ====================

def make_document(storage, user_id=1, name="notes.pdf", content=EXTRACTED_TEXT):
    return storage.create_document(
        DocumentCreate(
            user_id=user_id,
            name=name,
            file_type="application/pdf",
            file_size=2048,
            content=content,
        )
    )


def make_questions(storage, document_id, count):
    return storage.create_questions([
        QuestionCreate(document_id=document_id, question=f"Old {i}?", answer=f"Old answer {i}")
        for i in range(count)
    ])


# ==================== API fixtures ====================

@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        STORAGE_BACKEND="memory",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        OPENAI_API_KEY="test-key",
    )


@pytest.fixture
def app(test_settings, memory_storage, mock_extractor, mock_generator):
    return create_app(
        settings=test_settings,
        storage=memory_storage,
        extractor=mock_extractor,
        generator=mock_generator,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
