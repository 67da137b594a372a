from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from app.authoring.constants import FALSE_OPTION_TEXT, MAX_OPTIONS, MIN_OPTIONS, TRUE_OPTION_TEXT
from app.authoring.errors import (
    AuthoringValidationError,
    EmptyCategoriesError,
    EmptyOptionTextError,
    EmptyQuestionTextError,
    InvalidCorrectCountError,
    InvalidOptionCountError,
    InvalidTrueFalseOptionsError,
)
from app.authoring.options import OptionSetState
from app.authoring.types import Difficulty, KnowledgeCategory, Option, QuestionType

_MULTIPLE_CHOICE_CORRECT_MESSAGE = "Multiple-answer questions must have at least one correct option."


@dataclass(frozen=True, slots=True)
class QuestionDraft:
    text: str
    question_type: QuestionType
    options: tuple[Option, ...]
    categories: str | tuple[str, ...] = ()
    knowledge_category: KnowledgeCategory | None = None
    explanation: str | None = None
    difficulty: Difficulty | None = None

    @classmethod
    def from_option_set(
        cls,
        option_set: OptionSetState,
        *,
        text: str,
        categories: str | Sequence[str] = (),
        knowledge_category: KnowledgeCategory | None = None,
        explanation: str | None = None,
        difficulty: Difficulty | None = None,
    ) -> QuestionDraft:
        return cls(
            text=text,
            question_type=option_set.question_type,
            options=option_set.options,
            categories=categories if isinstance(categories, str) else tuple(categories),
            knowledge_category=knowledge_category,
            explanation=explanation,
            difficulty=difficulty,
        )


def parse_categories(raw: str | Sequence[str]) -> list[str]:
    """Splits a comma separated category field (or a list of entries) into trimmed, non-empty names."""
    entries = raw.split(",") if isinstance(raw, str) else raw
    return [entry.strip() for entry in entries if entry and entry.strip()]


def normalize_options(options: Sequence[Option]) -> list[dict[str, object]]:
    return [{"text": option.text.strip(), "isCorrect": bool(option.is_correct)} for option in options]


def check_question(draft: QuestionDraft) -> AuthoringValidationError | None:
    """Returns the first violated rule for the draft, or None when it is valid."""
    if not draft.text.strip():
        return EmptyQuestionTextError()

    if draft.question_type is not QuestionType.TRUE_FALSE and any(
        not option.text.strip() for option in draft.options
    ):
        return EmptyOptionTextError()

    correct_count = sum(1 for option in draft.options if option.is_correct)
    if draft.question_type.is_exclusive and correct_count != 1:
        return InvalidCorrectCountError()
    if draft.question_type is QuestionType.MULTIPLE_CHOICE and correct_count < 1:
        return InvalidCorrectCountError(_MULTIPLE_CHOICE_CORRECT_MESSAGE)

    if not parse_categories(draft.categories):
        return EmptyCategoriesError()

    return None


def check_option_shape(draft: QuestionDraft) -> AuthoringValidationError | None:
    """Structural option rules, checked after the ordered field rules pass."""
    if draft.question_type is QuestionType.TRUE_FALSE:
        texts = tuple(option.text.strip() for option in draft.options)
        if texts != (TRUE_OPTION_TEXT, FALSE_OPTION_TEXT):
            return InvalidTrueFalseOptionsError()
        return None
    if not MIN_OPTIONS <= len(draft.options) <= MAX_OPTIONS:
        return InvalidOptionCountError()
    return None


def validate_question(draft: QuestionDraft) -> None:
    violation = check_question(draft) or check_option_shape(draft)
    if violation is not None:
        raise violation


def build_question_payload(draft: QuestionDraft) -> dict[str, object]:
    validate_question(draft)

    payload: dict[str, object] = {
        "questionText": draft.text.strip(),
        "questionType": draft.question_type.value,
        "options": normalize_options(draft.options),
        "categories": parse_categories(draft.categories),
    }
    if draft.difficulty is not None:
        payload["difficulty"] = draft.difficulty.value
    if draft.knowledge_category is not None:
        payload["knowledgeCategory"] = draft.knowledge_category.value
    if draft.explanation is not None and draft.explanation.strip():
        payload["explanation"] = draft.explanation.strip()
    return payload
