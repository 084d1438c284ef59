"""Question routes."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from studyqa.core.config import Settings
from studyqa.core.deps import get_pipeline, get_settings, parse_id
from studyqa.schemas import GenerateQuestionsRequest, Question
from studyqa.services.pipeline import DocumentPipeline


router = APIRouter(prefix="/api/questions", tags=["Questions"])


@router.post("/generate", response_model=List[Question], status_code=status.HTTP_201_CREATED)
def generate_questions(
    request: GenerateQuestionsRequest,
    pipeline: DocumentPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
):
    """
    Generate study questions for a document.

    Replaces the document's previous questions only when generation succeeds.
    """
    if request.document_id is None or request.document_id == "":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Document ID is required"
        )
    document_id = parse_id(request.document_id, "document ID")

    if request.count is None:
        count = settings.DEFAULT_QUESTION_COUNT
    else:
        count = parse_id(request.count, "question count")

    return pipeline.generate_questions(document_id, count)


@router.get("/{document_id}", response_model=List[Question])
def list_questions(document_id: str, pipeline: DocumentPipeline = Depends(get_pipeline)):
    """List the current questions of a document."""
    return pipeline.list_questions(parse_id(document_id, "document ID"))
