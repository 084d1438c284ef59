"""Normalise language-model output into question/answer pairs.

Providers do not return one stable JSON shape even in JSON mode. Every shape
accepted here is listed in ``PayloadShape``; anything else is a generation
failure. Adding a shape means adding a variant, a branch in ``classify`` and
a test.
"""
from enum import Enum
from typing import Any, List

from studyqa.core.errors import GenerationFailed
from studyqa.schemas import QuestionAnswer


class PayloadShape(str, Enum):
    QUESTIONS_KEY = "questions_key"    # {"questions": [{...}, ...]}
    BARE_LIST = "bare_list"            # [{...}, ...]
    WRAPPED_LIST = "wrapped_list"      # {"<any key>": [{...}, ...]}
    KEYED_OBJECTS = "keyed_objects"    # {"1": {...}, "2": {...}}
    SINGLE_PAIR = "single_pair"        # {"question": ..., "answer": ...}
    UNKNOWN = "unknown"


def _is_pair(item: Any) -> bool:
    return (
        isinstance(item, dict)
        and isinstance(item.get("question"), str)
        and isinstance(item.get("answer"), str)
        and bool(item["question"].strip())
        and bool(item["answer"].strip())
    )


def classify(payload: Any) -> PayloadShape:
    if isinstance(payload, list):
        return PayloadShape.BARE_LIST

    if not isinstance(payload, dict):
        return PayloadShape.UNKNOWN

    if isinstance(payload.get("questions"), list):
        return PayloadShape.QUESTIONS_KEY

    if "question" in payload and "answer" in payload:
        return PayloadShape.SINGLE_PAIR

    list_values = [v for v in payload.values() if isinstance(v, list)]
    if len(payload) == 1 and len(list_values) == 1:
        return PayloadShape.WRAPPED_LIST

    if payload and any(isinstance(v, dict) for v in payload.values()):
        return PayloadShape.KEYED_OBJECTS

    return PayloadShape.UNKNOWN


def normalize_questions(payload: Any) -> List[QuestionAnswer]:
    """
    Flatten a generator payload into question/answer pairs.

    Entries without a non-empty string question and answer are dropped.

    Raises:
        GenerationFailed: the shape is unknown or nothing usable is left
    """
    shape = classify(payload)

    if shape is PayloadShape.QUESTIONS_KEY:
        items = payload["questions"]
    elif shape is PayloadShape.BARE_LIST:
        items = payload
    elif shape is PayloadShape.WRAPPED_LIST:
        items = next(iter(payload.values()))
    elif shape is PayloadShape.KEYED_OBJECTS:
        items = list(payload.values())
    elif shape is PayloadShape.SINGLE_PAIR:
        items = [payload]
    else:
        raise GenerationFailed(
            f"Failed to generate questions: unrecognised response shape ({type(payload).__name__})"
        )

    pairs = [
        QuestionAnswer(question=item["question"].strip(), answer=item["answer"].strip())
        for item in items
        if _is_pair(item)
    ]

    if not pairs:
        raise GenerationFailed("Failed to generate questions: response contained no question/answer pairs")

    return pairs
