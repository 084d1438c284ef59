"""
HTTP tests through FastAPI's TestClient.

The app runs on the in-memory store with the extractor and generator mocked.
"""
import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from studyqa.core.errors import GenerationFailed
from studyqa.main import create_app
from tests.conftest import EXTRACTED_TEXT

pytestmark = pytest.mark.integration


PDF_BYTES = b"%PDF-1.4\n" + b"0" * (2048 - 9)


def register(client, username="alice", email="alice@example.com", password="s3cret"):
    return client.post("/api/auth/register", json={
        "username": username, "email": email, "password": password,
    })


def upload(client, user_id, name="notes.pdf", content=PDF_BYTES, media_type="application/pdf"):
    return client.post(
        "/api/documents/upload",
        files={"file": (name, content, media_type)},
        data={"userId": str(user_id)},
    )


@pytest.fixture
def user_id(client):
    return register(client).json()["id"]


class TestAuthRoutes:

    def test_register_hides_password(self, client):
        response = register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "alice"
        assert body["email"] == "alice@example.com"
        assert "password" not in body

    def test_register_duplicate_username(self, client):
        register(client)

        response = register(client, email="other@example.com")

        assert response.status_code == 400
        assert response.json()["detail"] == "Username already exists"

    def test_register_duplicate_email(self, client):
        register(client)

        response = register(client, username="bob")

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already exists"

    def test_register_invalid_email(self, client):
        response = register(client, email="not-an-email")

        assert response.status_code == 400
        assert response.json()["errors"]

    def test_login(self, client):
        registered = register(client).json()

        response = client.post("/api/auth/login", json={"username": "alice", "password": "s3cret"})

        assert response.status_code == 200
        assert response.json() == registered

    def test_login_missing_fields(self, client):
        response = client.post("/api/auth/login", json={"username": "alice"})

        assert response.status_code == 400

    def test_login_bad_password(self, client):
        register(client)

        response = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})

        assert response.status_code == 401


class TestDocumentRoutes:

    def test_upload_scenario(self, client, user_id, mock_generator):
        response = upload(client, user_id)

        assert response.status_code == 201
        document = response.json()
        assert document["name"] == "notes.pdf"
        assert document["fileType"] == "application/pdf"
        assert document["fileSize"] == 2048
        assert document["userId"] == user_id
        assert document["content"] == EXTRACTED_TEXT
        assert "uploadDate" in document

        generated = client.post("/api/questions/generate", json={"documentId": document["id"], "count": 3})

        assert generated.status_code == 201
        questions = generated.json()
        assert 0 < len(questions) <= 3
        assert all(q["documentId"] == document["id"] for q in questions)

    def test_upload_saves_file_with_random_name(self, client, user_id, test_settings, mock_extractor):
        upload(client, user_id)

        saved_path = Path(mock_extractor.extract_text.call_args.args[0])
        assert saved_path.parent == Path(test_settings.UPLOAD_DIR)
        assert saved_path.suffix == ".pdf"
        assert saved_path.name != "notes.pdf"
        assert saved_path.read_bytes() == PDF_BYTES

    def test_upload_without_file(self, client, user_id):
        response = client.post("/api/documents/upload", data={"userId": str(user_id)})

        assert response.status_code == 400

    @pytest.mark.parametrize("bad_user", ["abc", "999"])
    def test_upload_bad_user_id(self, client, bad_user):
        response = upload(client, bad_user)

        assert response.status_code == 400

    def test_upload_plain_text_rejected_before_extraction(self, client, user_id, mock_extractor, test_settings):
        response = upload(client, user_id, name="notes.txt", content=b"hello", media_type="text/plain")

        assert response.status_code == 400
        mock_extractor.extract_text.assert_not_called()
        assert not Path(test_settings.UPLOAD_DIR).exists()

    def test_upload_too_large(self, test_settings, memory_storage, mock_extractor, mock_generator):
        small_limit = test_settings.model_copy(update={"MAX_UPLOAD_BYTES": 1024})
        app = create_app(small_limit, memory_storage, mock_extractor, mock_generator)

        with TestClient(app) as client:
            response = upload(client, register(client).json()["id"])

        assert response.status_code == 400
        mock_extractor.extract_text.assert_not_called()

    def test_extraction_failure(self, client, user_id, mock_extractor, test_settings):
        mock_extractor.extract_text.side_effect = ValueError("Failed to extract text from PDF: bad xref")

        response = upload(client, user_id)

        assert response.status_code == 500
        assert "bad xref" in response.json()["detail"]
        assert client.get(f"/api/documents/{user_id}").json() == []
        assert os.listdir(test_settings.UPLOAD_DIR) == []

    def test_storage_failure_removes_saved_file(self, app, memory_storage, test_settings, monkeypatch):
        def fail(document):
            raise RuntimeError("disk full")

        monkeypatch.setattr(memory_storage, "create_document", fail)

        with TestClient(app, raise_server_exceptions=False) as client:
            response = upload(client, register(client).json()["id"])

        assert response.status_code == 500
        assert os.listdir(test_settings.UPLOAD_DIR) == []

    def test_list_documents(self, client, user_id):
        upload(client, user_id, name="a.pdf")
        upload(client, user_id, name="b.png", media_type="image/png")

        response = client.get(f"/api/documents/{user_id}")

        assert response.status_code == 200
        assert sorted(d["name"] for d in response.json()) == ["a.pdf", "b.png"]

    def test_list_documents_invalid_id(self, client):
        assert client.get("/api/documents/abc").status_code == 400

    def test_delete_document(self, client, user_id):
        document = upload(client, user_id).json()
        client.post("/api/questions/generate", json={"documentId": document["id"]})

        response = client.delete(f"/api/documents/{document['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Document deleted successfully"}
        assert client.get(f"/api/documents/{user_id}").json() == []
        assert client.get(f"/api/questions/{document['id']}").json() == []

    def test_delete_missing_document(self, client):
        assert client.delete("/api/documents/42").status_code == 404

    def test_delete_invalid_id(self, client):
        assert client.delete("/api/documents/abc").status_code == 400


class TestQuestionRoutes:

    def test_generate_defaults_to_five(self, client, user_id, mock_generator):
        document = upload(client, user_id).json()

        response = client.post("/api/questions/generate", json={"documentId": str(document["id"])})

        assert response.status_code == 201
        mock_generator.generate_questions.assert_called_once_with(EXTRACTED_TEXT, 5)

    def test_generate_missing_document_id(self, client):
        response = client.post("/api/questions/generate", json={"count": 3})

        assert response.status_code == 400
        assert response.json()["detail"] == "Document ID is required"

    def test_generate_unknown_document(self, client):
        response = client.post("/api/questions/generate", json={"documentId": 77})

        assert response.status_code == 404

    def test_generate_invalid_count(self, client, user_id):
        document = upload(client, user_id).json()

        response = client.post("/api/questions/generate", json={"documentId": document["id"], "count": "lots"})

        assert response.status_code == 400

    def test_failed_generation_keeps_previous_questions(self, client, user_id, mock_generator):
        document = upload(client, user_id).json()
        first = client.post("/api/questions/generate", json={"documentId": document["id"]}).json()
        mock_generator.generate_questions.side_effect = GenerationFailed("Failed to generate questions: timeout")

        response = client.post("/api/questions/generate", json={"documentId": document["id"]})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to generate questions: timeout"
        assert client.get(f"/api/questions/{document['id']}").json() == first

    def test_regeneration_replaces_questions(self, client, user_id, mock_generator):
        document = upload(client, user_id).json()
        first = client.post("/api/questions/generate", json={"documentId": document["id"]}).json()
        mock_generator.generate_questions.return_value = [{"question": "New?", "answer": "Yes."}]

        second = client.post("/api/questions/generate", json={"documentId": document["id"]}).json()

        listed = client.get(f"/api/questions/{document['id']}").json()
        assert [q["id"] for q in listed] == [q["id"] for q in second]
        assert not {q["id"] for q in first} & {q["id"] for q in listed}

    def test_list_questions_invalid_id(self, client):
        assert client.get("/api/questions/abc").status_code == 400


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
