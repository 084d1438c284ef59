"""Document routes."""
import logging
import secrets
import time
from pathlib import Path
from typing import List, Optional

import aiofiles
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from studyqa.core.config import Settings
from studyqa.core.deps import get_pipeline, get_settings, get_storage, parse_id
from studyqa.schemas import Document, MessageResponse
from studyqa.services.pipeline import DocumentPipeline
from studyqa.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["Documents"])


def _stored_filename(original: str) -> str:
    """Collision-resistant name: <epoch-ms>-<12 hex><original extension>."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}{Path(original).suffix}"


@router.post("/upload", response_model=Document, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    user_id: Optional[str] = Form(None, alias="userId"),
    pipeline: DocumentPipeline = Depends(get_pipeline),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """
    Upload a PDF, PNG or JPEG and extract its text into a new document.

    Raises:
        HTTPException 400: No file, bad user id, wrong type or too large
        HTTPException 500: Text extraction failed
    """
    if file is None or not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded"
        )

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID is required"
        )
    owner_id = parse_id(user_id, "user ID")
    if storage.get_user(owner_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID"
        )

    # one byte past the limit is enough to reject
    content = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    media_type = file.content_type or ""
    pipeline.validate_upload(media_type, len(content))

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    file_path = upload_dir / _stored_filename(file.filename)

    async with aiofiles.open(file_path, "wb") as buffer:
        await buffer.write(content)

    try:
        # OCR can take seconds; keep it off the event loop
        return await run_in_threadpool(
            pipeline.upload,
            str(file_path),
            media_type,
            file.filename,
            len(content),
            owner_id,
        )
    except Exception:
        file_path.unlink(missing_ok=True)
        raise


@router.get("/{user_id}", response_model=List[Document])
def list_documents(user_id: str, pipeline: DocumentPipeline = Depends(get_pipeline)):
    """List every document owned by a user."""
    return pipeline.list_documents(parse_id(user_id, "user ID"))


@router.delete("/{document_id}", response_model=MessageResponse)
def delete_document(document_id: str, pipeline: DocumentPipeline = Depends(get_pipeline)):
    """Delete a document and all questions generated from it."""
    pipeline.delete_document(parse_id(document_id, "document ID"))
    return MessageResponse(message="Document deleted successfully")
