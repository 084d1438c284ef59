"""FastAPI dependencies resolving the objects wired by create_app."""
from typing import Optional

from fastapi import HTTPException, Request, status

from studyqa.core.config import Settings
from studyqa.services.auth_service import AuthService
from studyqa.services.pipeline import DocumentPipeline
from studyqa.storage.base import Storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_pipeline(request: Request) -> DocumentPipeline:
    return request.app.state.pipeline


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def parse_id(value, label: str) -> int:
    """Parse a numeric id from a path, form or JSON value, or answer 400."""
    parsed = parse_int(value)
    if parsed is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label}"
        )
    return parsed


def parse_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return None
