"""Pydantic records shared by every storage backend and the API.

Fields are snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from studyqa.utils.clock import ensure_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def normalise_timestamps(cls, value):
        # backends hand back naive datetimes; records are always UTC-aware
        if isinstance(value, datetime):
            return ensure_utc(value)
        return value


# Users

class UserCreate(CamelModel):
    username: str
    email: str
    password: str  # already hashed


class User(UserCreate):
    id: int


class UserPublic(CamelModel):
    id: int
    username: str
    email: str


# Documents

class DocumentCreate(CamelModel):
    user_id: int
    name: str
    file_type: str
    file_size: int
    content: str


class Document(DocumentCreate):
    id: int
    upload_date: datetime


# Questions

class QuestionCreate(CamelModel):
    document_id: int
    question: str
    answer: str


class Question(QuestionCreate):
    id: int
    created_at: datetime


class QuestionAnswer(BaseModel):
    """One normalised question/answer pair produced by the generator."""

    question: str
    answer: str


# Request bodies

class RegisterRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    email: EmailStr


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class GenerateQuestionsRequest(CamelModel):
    document_id: Optional[Union[int, str]] = None
    count: Optional[Union[int, str]] = None


class MessageResponse(BaseModel):
    message: str
