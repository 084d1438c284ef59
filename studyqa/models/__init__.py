"""Database models."""
from studyqa.models.user import User
from studyqa.models.document import Document
from studyqa.models.question import Question

__all__ = [
    "User",
    "Document",
    "Question",
]
